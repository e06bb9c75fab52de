"""Abstract interface for the remote object store backing the registry."""

from abc import ABC, abstractmethod
from typing import BinaryIO


class ObjectStore(ABC):
    """Key/value access to a single bucket.

    Implementations include:
    - RealObjectStore: S3 via boto3
    - FakeObjectStore: In-memory for testing
    - DryRunObjectStore: Delegates reads, skips writes
    """

    @abstractmethod
    def get_object(self, key: str) -> bytes:
        """Read the full body of an object.

        Raises:
            ObjectNotFoundError: If the key does not exist
            ObjectStoreError: For any other store failure
        """
        ...

    @abstractmethod
    def put_object(self, key: str, body: bytes | BinaryIO) -> None:
        """Write an object, overwriting any existing one at the key.

        Args:
            key: Destination key within the bucket
            body: Object content, either in memory or as a readable binary stream

        Raises:
            ObjectTooLargeError: If the store rejects the object for size
            ObjectStoreError: For any other store failure
        """
        ...

    @abstractmethod
    def wait_until_exists(self, key: str, timeout_seconds: float) -> None:
        """Block until the object is readable from the store.

        Raises:
            ObjectConfirmationError: If the object is not confirmed within the timeout
        """
        ...
