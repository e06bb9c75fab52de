"""Error types raised by object store implementations."""


class ObjectStoreError(Exception):
    """A store operation failed."""

    def __init__(self, message: str, key: str) -> None:
        self.key = key
        super().__init__(message)


class ObjectNotFoundError(ObjectStoreError):
    """The requested key does not exist in the store."""

    def __init__(self, key: str) -> None:
        super().__init__(f"object {key} does not exist", key)


class ObjectTooLargeError(ObjectStoreError):
    """The store rejected the object because of its size."""


class ObjectConfirmationError(ObjectStoreError):
    """The object could not be confirmed present within the wait bound."""
