"""No-op wrapper for object store writes."""

import logging
from typing import BinaryIO

from plugin_registry.integrations.object_store.abc import ObjectStore

logger = logging.getLogger(__name__)


class DryRunObjectStore(ObjectStore):
    """No-op wrapper that prevents writes to the registry.

    Read operations are delegated to the wrapped implementation so catalogs
    can still be fetched and merged. Writes and confirmation waits return
    without executing.
    """

    def __init__(self, wrapped: ObjectStore) -> None:
        """Create a dry-run wrapper around an ObjectStore implementation.

        Args:
            wrapped: The ObjectStore implementation to wrap (usually RealObjectStore)
        """
        self._wrapped = wrapped
        self._skipped_keys: list[str] = []

    @property
    def skipped_keys(self) -> list[str]:
        """Keys that would have been written."""
        return list(self._skipped_keys)

    def get_object(self, key: str) -> bytes:
        """Delegate read operation to wrapped implementation."""
        return self._wrapped.get_object(key)

    def put_object(self, key: str, body: bytes | BinaryIO) -> None:
        """No-op for writing an object in dry-run mode."""
        logger.debug("dry run: skipping write of %s", key)
        self._skipped_keys.append(key)

    def wait_until_exists(self, key: str, timeout_seconds: float) -> None:
        """No-op: nothing was written, so there is nothing to confirm."""
        pass
