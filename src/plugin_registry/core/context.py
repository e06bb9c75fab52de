"""Application context with dependency injection."""

import os
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from plugin_registry.core.config import RegistryConfig
from plugin_registry.core.indexer import IndexSynchronizer
from plugin_registry.core.orchestrator import BuildOrchestrator
from plugin_registry.core.packager import Packager
from plugin_registry.core.publisher import Publisher
from plugin_registry.core.uploader import Uploader
from plugin_registry.core.user_feedback import (
    InteractiveFeedback,
    SuppressedFeedback,
    UserFeedback,
)
from plugin_registry.integrations.builder.abc import Builder
from plugin_registry.integrations.builder.real import RealBuilder
from plugin_registry.integrations.object_store.abc import ObjectStore
from plugin_registry.integrations.object_store.dry_run import DryRunObjectStore
from plugin_registry.integrations.object_store.real import RealObjectStore
from plugin_registry.integrations.time.abc import Time
from plugin_registry.integrations.time.real import RealTime

StoreFactory = Callable[[RegistryConfig], ObjectStore]


def _real_store_factory(config: RegistryConfig) -> ObjectStore:
    return RealObjectStore(config.bucket)


@dataclass(frozen=True)
class RegistryContext:
    """Immutable context holding all dependencies for registry operations.

    Created at CLI entry point and threaded through the application.
    The object store is opened per command because its bucket is only known
    once the command's flags have been resolved into a RegistryConfig.
    """

    builder: Builder
    time: Time
    feedback: UserFeedback
    store_factory: StoreFactory
    environ: Mapping[str, str] = field(default_factory=dict)
    dry_run: bool = False

    def resolve_config(self, bucket: str | None) -> RegistryConfig:
        """Resolve registry configuration from a --bucket flag and the environment.

        Raises:
            ValueError: If no bucket is available or the environment is malformed
        """
        return RegistryConfig.from_env(bucket=bucket, environ=self.environ)

    def open_store(self, config: RegistryConfig) -> ObjectStore:
        store = self.store_factory(config)
        if self.dry_run:
            return DryRunObjectStore(store)
        return store

    def packager(self) -> Packager:
        return Packager(BuildOrchestrator(self.builder, self.feedback), self.feedback)

    def indexer(self, config: RegistryConfig, store: ObjectStore) -> IndexSynchronizer:
        return IndexSynchronizer(store, config, self.time, self.feedback)

    def publisher(self, config: RegistryConfig, store: ObjectStore) -> Publisher:
        return Publisher(
            Uploader(store, config),
            self.indexer(config, store),
            self.feedback,
        )

    @staticmethod
    def for_test(
        builder: Builder | None = None,
        store: ObjectStore | None = None,
        time: Time | None = None,
        feedback: UserFeedback | None = None,
        environ: Mapping[str, str] | None = None,
        dry_run: bool = False,
    ) -> "RegistryContext":
        """Create test context with optional pre-configured integration classes.

        Args:
            builder: Optional Builder. If None, creates a FakeBuilder.
            store: Optional ObjectStore returned for every bucket.
                If None, creates an empty FakeObjectStore.
            time: Optional Time. If None, creates a FakeTime.
            feedback: Optional UserFeedback. If None, creates FakeUserFeedback.
            environ: Environment used to resolve configuration (defaults to empty).
            dry_run: Whether to wrap the store in DryRunObjectStore.

        Returns:
            RegistryContext configured with provided values and test defaults

        Example:
            >>> store = FakeObjectStore(max_object_size=10)
            >>> ctx = RegistryContext.for_test(store=store, environ={"AWS_S3_BUCKET": "b"})
        """
        from plugin_registry.core.user_feedback import FakeUserFeedback
        from plugin_registry.integrations.builder.fake import FakeBuilder
        from plugin_registry.integrations.object_store.fake import FakeObjectStore
        from plugin_registry.integrations.time.fake import FakeTime

        resolved_store = store if store is not None else FakeObjectStore()

        return RegistryContext(
            builder=builder if builder is not None else FakeBuilder(),
            time=time if time is not None else FakeTime(),
            feedback=feedback if feedback is not None else FakeUserFeedback(),
            store_factory=lambda config: resolved_store,
            environ=environ or {},
            dry_run=dry_run,
        )


def create_context(*, dry_run: bool, quiet: bool = False) -> RegistryContext:
    """Create production context with real implementations.

    Args:
        dry_run: If True, registry writes are skipped (reads still happen)
        quiet: If True, only errors are reported to the user

    Returns:
        RegistryContext with real implementations
    """
    feedback: UserFeedback = SuppressedFeedback() if quiet else InteractiveFeedback()
    return RegistryContext(
        builder=RealBuilder(),
        time=RealTime(),
        feedback=feedback,
        store_factory=_real_store_factory,
        environ=dict(os.environ),
        dry_run=dry_run,
    )
