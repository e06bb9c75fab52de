"""Upload client: stream one release artifact into the registry bucket."""

import logging

from plugin_registry.core.config import RegistryConfig
from plugin_registry.core.errors import (
    ArtifactTooLargeError,
    UploadError,
    UploadUnconfirmedError,
)
from plugin_registry.core.types import Release
from plugin_registry.integrations.object_store.abc import ObjectStore
from plugin_registry.integrations.object_store.types import (
    ObjectConfirmationError,
    ObjectStoreError,
    ObjectTooLargeError,
)

logger = logging.getLogger(__name__)


class Uploader:
    """Single best-effort upload per call; retries are left to the caller."""

    def __init__(self, store: ObjectStore, config: RegistryConfig) -> None:
        self._store = store
        self._config = config

    def upload(self, release: Release) -> str:
        """Upload the release artifact and wait until the store confirms it.

        Returns:
            The remote key the artifact was written to

        Raises:
            UploadError: If the artifact cannot be opened or the store rejects it
            ArtifactTooLargeError: If the store rejects the artifact for size
            UploadUnconfirmedError: If the upload succeeded but the object could not
                be confirmed within the timeout; it may exist and needs manual checking
        """
        key = release.remote_key
        logger.debug("uploading %s from %s", key, release.path)

        try:
            artifact = release.path.open("rb")
        except OSError as e:
            raise UploadError(f"couldn't open file {release.path} to upload: {e}", key) from e

        with artifact:
            try:
                self._store.put_object(key, artifact)
            except ObjectTooLargeError as e:
                raise ArtifactTooLargeError(
                    f"error while uploading {release.path} to {self._config.bucket}:{key}: "
                    "the object is too large",
                    key,
                ) from e
            except ObjectStoreError as e:
                raise UploadError(
                    f"couldn't upload file {release.path} to {self._config.bucket}:{key}: {e}",
                    key,
                ) from e

        try:
            self._store.wait_until_exists(key, self._config.confirm_timeout_seconds)
        except ObjectConfirmationError as e:
            raise UploadUnconfirmedError(
                f"uploaded {key} but could not confirm it exists within "
                f"{self._config.confirm_timeout_seconds:g}s; verify it manually",
                key,
            ) from e

        return key
