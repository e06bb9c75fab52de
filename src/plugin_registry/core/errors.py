"""Exception hierarchy for the release pipeline.

Lower layers raise (or carry, for build outcomes) these structured causes;
the CLI layer decides how to present them.
"""


class RegistryError(Exception):
    """Base class for all release pipeline errors."""


class DescriptorError(RegistryError):
    """The plugin descriptor could not be read or parsed."""


class DescriptorValidationError(DescriptorError):
    """The plugin descriptor is missing required fields."""

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"plugin.yaml is missing required fields: {', '.join(missing)}")


class OutputDirError(RegistryError):
    """The requested output directory is empty or unsafe."""


class BuildError(RegistryError):
    """A platform build (binary or shared UI) failed.

    `cause` holds the underlying failure; for platforms invalidated by a
    failed UI build it is the UIBuildError.
    """

    def __init__(
        self,
        message: str,
        platform_key: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.platform_key = platform_key
        self.cause = cause
        super().__init__(message)


class UIBuildError(BuildError):
    """The shared UI build failed, invalidating every platform."""


class ArchiveError(RegistryError):
    """Creating an archive from a staging directory failed."""


class UploadError(RegistryError):
    """Uploading an artifact to the object store failed."""

    def __init__(self, message: str, key: str) -> None:
        self.key = key
        super().__init__(message)


class ArtifactTooLargeError(UploadError):
    """The object store rejected the artifact because of its size."""


class UploadUnconfirmedError(UploadError):
    """The upload succeeded but the object could not be confirmed.

    The object may exist in the store. Treat as requiring manual verification.
    """


class CatalogError(RegistryError):
    """Fetching, decoding, or writing a catalog failed."""
