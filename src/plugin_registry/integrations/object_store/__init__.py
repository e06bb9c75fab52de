from plugin_registry.integrations.object_store.abc import ObjectStore
from plugin_registry.integrations.object_store.dry_run import DryRunObjectStore
from plugin_registry.integrations.object_store.real import RealObjectStore
from plugin_registry.integrations.object_store.types import (
    ObjectConfirmationError,
    ObjectNotFoundError,
    ObjectStoreError,
    ObjectTooLargeError,
)

__all__ = [
    "DryRunObjectStore",
    "ObjectConfirmationError",
    "ObjectNotFoundError",
    "ObjectStore",
    "ObjectStoreError",
    "ObjectTooLargeError",
    "RealObjectStore",
]
