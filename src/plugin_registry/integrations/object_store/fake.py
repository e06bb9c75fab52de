"""Fake in-memory object store for testing."""

from typing import BinaryIO

from plugin_registry.integrations.object_store.abc import ObjectStore
from plugin_registry.integrations.object_store.types import (
    ObjectConfirmationError,
    ObjectNotFoundError,
    ObjectTooLargeError,
)


class FakeObjectStore(ObjectStore):
    """In-memory fake implementation for testing.

    State is provided via constructor or captured during execution.
    """

    def __init__(
        self,
        objects: dict[str, bytes] | None = None,
        *,
        max_object_size: int | None = None,
        unconfirmed_keys: set[str] | None = None,
        get_errors: dict[str, Exception] | None = None,
        put_errors: dict[str, Exception] | None = None,
    ) -> None:
        """Create FakeObjectStore.

        Args:
            objects: Initial objects (key -> body)
            max_object_size: Bodies larger than this many bytes are rejected as too large
            unconfirmed_keys: Keys that are stored but never confirmed by wait_until_exists
            get_errors: Errors to raise when reading specific keys
            put_errors: Errors to raise when writing specific keys
        """
        self._objects: dict[str, bytes] = dict(objects or {})
        self._max_object_size = max_object_size
        self._unconfirmed_keys = unconfirmed_keys or set()
        self._get_errors = get_errors or {}
        self._put_errors = put_errors or {}
        self._put_keys: list[str] = []
        self._wait_calls: list[tuple[str, float]] = []

    @property
    def objects(self) -> dict[str, bytes]:
        """Current objects, for test assertions."""
        return dict(self._objects)

    @property
    def put_keys(self) -> list[str]:
        """Keys written, in order, for test assertions."""
        return list(self._put_keys)

    @property
    def wait_calls(self) -> list[tuple[str, float]]:
        return list(self._wait_calls)

    def get_object(self, key: str) -> bytes:
        if key in self._get_errors:
            raise self._get_errors[key]
        if key not in self._objects:
            raise ObjectNotFoundError(key)
        return self._objects[key]

    def put_object(self, key: str, body: bytes | BinaryIO) -> None:
        if key in self._put_errors:
            raise self._put_errors[key]
        data = body if isinstance(body, bytes) else body.read()
        if self._max_object_size is not None and len(data) > self._max_object_size:
            raise ObjectTooLargeError(
                f"object {key} is {len(data)} bytes, limit is {self._max_object_size}", key
            )
        self._objects[key] = data
        self._put_keys.append(key)

    def wait_until_exists(self, key: str, timeout_seconds: float) -> None:
        self._wait_calls.append((key, timeout_seconds))
        if key in self._unconfirmed_keys or key not in self._objects:
            raise ObjectConfirmationError(
                f"failed attempt to wait for object {key} to exist", key
            )
