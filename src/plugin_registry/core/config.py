"""Registry configuration from command-line flags and environment variables."""

import os
from collections.abc import Mapping
from dataclasses import dataclass

BUCKET_ENV_VAR = "AWS_S3_BUCKET"
CONFIRM_TIMEOUT_ENV_VAR = "PLUGIN_REGISTRY_CONFIRM_TIMEOUT"
PUBLIC_URL_ENV_VAR = "PLUGIN_REGISTRY_PUBLIC_URL"

DEFAULT_CONFIRM_TIMEOUT_SECONDS = 60.0


@dataclass(frozen=True)
class RegistryConfig:
    """Immutable registry configuration.

    Resolved once at the CLI entry point and passed to each component that
    talks to the registry. All fields are read-only after construction.
    """

    bucket: str
    confirm_timeout_seconds: float = DEFAULT_CONFIRM_TIMEOUT_SECONDS
    public_url: str | None = None

    def download_url(self, key: str) -> str:
        """Download location recorded in the catalogs for an object key."""
        if not self.public_url:
            return key
        return f"{self.public_url.rstrip('/')}/{key}"

    @staticmethod
    def from_env(
        bucket: str | None = None, environ: Mapping[str, str] | None = None
    ) -> "RegistryConfig":
        """Build configuration, preferring explicit flags over the environment.

        Args:
            bucket: Bucket from the --bucket flag, if given
            environ: Environment to read (defaults to os.environ)

        Raises:
            ValueError: If no bucket is available or the timeout is not a positive number
        """
        env = os.environ if environ is None else environ

        resolved_bucket = bucket or env.get(BUCKET_ENV_VAR, "")
        if not resolved_bucket:
            raise ValueError(f"No bucket supplied: pass --bucket or set {BUCKET_ENV_VAR}")

        raw_timeout = env.get(CONFIRM_TIMEOUT_ENV_VAR, str(DEFAULT_CONFIRM_TIMEOUT_SECONDS))
        try:
            timeout = float(raw_timeout)
        except ValueError:
            raise ValueError(
                f"{CONFIRM_TIMEOUT_ENV_VAR} must be a number of seconds, got {raw_timeout!r}"
            ) from None
        if timeout <= 0:
            raise ValueError(f"{CONFIRM_TIMEOUT_ENV_VAR} must be positive, got {raw_timeout!r}")

        return RegistryConfig(
            bucket=resolved_bucket,
            confirm_timeout_seconds=timeout,
            public_url=env.get(PUBLIC_URL_ENV_VAR) or None,
        )
