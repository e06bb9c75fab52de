"""Index synchronization: merge a new release into the plugin and registry catalogs.

Both catalogs are updated by a full fetch, an in-memory merge, and a full
overwrite. The store offers no conditional writes and nothing here takes a
lock, so two publishers racing on the same catalog can lose an update
(last writer wins).
"""

import hashlib
import logging
from dataclasses import dataclass, field
from typing import TypeVar

from pydantic import BaseModel, ValidationError

from plugin_registry.core.config import RegistryConfig
from plugin_registry.core.descriptor import PluginDescriptor
from plugin_registry.core.errors import CatalogError
from plugin_registry.core.types import (
    REGISTRY_CATALOG_KEY,
    ArchitectureInfo,
    PluginCatalog,
    RegistryCatalog,
    Release,
    VersionRecord,
    plugin_catalog_key,
)
from plugin_registry.core.user_feedback import UserFeedback
from plugin_registry.integrations.object_store.abc import ObjectStore
from plugin_registry.integrations.object_store.types import (
    ObjectConfirmationError,
    ObjectNotFoundError,
    ObjectStoreError,
)
from plugin_registry.integrations.time.abc import Time

logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

HASH_CHUNK_SIZE = 1024 * 1024


@dataclass(frozen=True)
class ReleaseIndexResult:
    """Checksum and size of one release's local artifact, or why they could not be read."""

    release: Release
    info: ArchitectureInfo | None = None
    error: OSError | None = None

    @property
    def succeeded(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class SyncResult:
    """Aggregate outcome of one synchronization.

    When `catalogs_written` is False nothing was written to the store and the
    catalogs hold the merge that would have been written, if any.
    """

    plugin_catalog: PluginCatalog
    registry_catalog: RegistryCatalog | None
    results: list[ReleaseIndexResult] = field(default_factory=list)
    skipped: list[Release] = field(default_factory=list)
    catalogs_written: bool = False

    @property
    def indexed(self) -> list[ReleaseIndexResult]:
        return [result for result in self.results if result.succeeded]

    @property
    def failed(self) -> list[ReleaseIndexResult]:
        return [result for result in self.results if not result.succeeded]


def compute_checksum(release: Release) -> str:
    """Hex SHA-256 of the local artifact's bytes, read in chunks."""
    hasher = hashlib.sha256()
    with release.path.open("rb") as f:
        for chunk in iter(lambda: f.read(HASH_CHUNK_SIZE), b""):
            hasher.update(chunk)
    return hasher.hexdigest()


class IndexSynchronizer:
    """Sole writer of the plugin and registry catalogs."""

    def __init__(
        self,
        store: ObjectStore,
        config: RegistryConfig,
        time: Time,
        feedback: UserFeedback,
    ) -> None:
        self._store = store
        self._config = config
        self._time = time
        self._feedback = feedback

    def synchronize(
        self,
        releases: list[Release],
        descriptor: PluginDescriptor,
        *,
        allow_partial: bool = False,
    ) -> SyncResult:
        """Make a newly uploaded version discoverable in both catalogs.

        The caller must only invoke this once every release has been uploaded.

        Args:
            releases: The uploaded per-platform releases of one plugin version
            descriptor: Source of truth for the plugin's display metadata
            allow_partial: Index the releases that could be hashed even if
                others failed. Otherwise any failure leaves both catalogs untouched.

        Returns:
            SyncResult with per-release results and whether catalogs were written

        Raises:
            ValueError: If releases is empty
            CatalogError: If a catalog cannot be fetched, decoded, or written
        """
        if not releases:
            raise ValueError("cannot index an empty set of releases")

        plugin_id = releases[0].plugin
        version = releases[0].version
        catalog = self.fetch_plugin_catalog(plugin_id)

        results: list[ReleaseIndexResult] = []
        skipped: list[Release] = []
        for release in releases:
            if release.plugin != catalog.id:
                logger.warning(
                    "got release that wasn't part of plugin '%s': %s", catalog.id, release
                )
                skipped.append(release)
                continue
            results.append(self._index_release(release))

        indexed = [result for result in results if result.succeeded]
        failed = [result for result in results if not result.succeeded]
        for result in failed:
            self._feedback.error(f"❌ Could not index {result.release.os_arch}: {result.error}")

        if not indexed or (failed and not allow_partial):
            return SyncResult(
                plugin_catalog=catalog,
                registry_catalog=None,
                results=results,
                skipped=skipped,
                catalogs_written=False,
            )

        self._merge_version(catalog, version, indexed, descriptor)
        self._feedback.info(f"uploading plugin index to {catalog.key}...")
        self._write(catalog.key, catalog)

        registry = self.fetch_registry_catalog()
        if registry.upsert(catalog.to_entry()):
            logger.debug("updated registry entry for %s", catalog.id)
        else:
            logger.debug("added registry entry for %s", catalog.id)
        self._feedback.info("uploading registry index...")
        self._write(REGISTRY_CATALOG_KEY, registry)

        return SyncResult(
            plugin_catalog=catalog,
            registry_catalog=registry,
            results=results,
            skipped=skipped,
            catalogs_written=True,
        )

    def fetch_plugin_catalog(self, plugin_id: str) -> PluginCatalog:
        """Fetch the plugin's catalog, or a minimal new one if it does not exist yet."""
        key = plugin_catalog_key(plugin_id)
        body = self._fetch(key, "plugin index")
        if body is None:
            return PluginCatalog.minimal(plugin_id)
        return self._decode(body, PluginCatalog, key)

    def fetch_registry_catalog(self) -> RegistryCatalog:
        """Fetch the registry catalog, or an empty one if it does not exist yet."""
        body = self._fetch(REGISTRY_CATALOG_KEY, "registry index")
        if body is None:
            return RegistryCatalog()
        return self._decode(body, RegistryCatalog, REGISTRY_CATALOG_KEY)

    def _index_release(self, release: Release) -> ReleaseIndexResult:
        try:
            checksum = compute_checksum(release)
            size = release.path.stat().st_size
        except OSError as e:
            return ReleaseIndexResult(release=release, error=e)
        return ReleaseIndexResult(
            release=release,
            info=ArchitectureInfo(
                checksum=checksum,
                download_url=self._config.download_url(release.remote_key),
                size=size,
            ),
        )

    def _merge_version(
        self,
        catalog: PluginCatalog,
        version: str,
        indexed: list[ReleaseIndexResult],
        descriptor: PluginDescriptor,
    ) -> VersionRecord:
        now = self._time.now()
        architectures = {
            result.release.os_arch: result.info for result in indexed if result.info is not None
        }

        existing_idx = catalog.find_version(version)
        if existing_idx is None:
            record = VersionRecord(
                metadata=descriptor.snapshot(),
                version=version,
                architectures=architectures,
                created=now,
                updated=now,
            )
            catalog.versions.append(record)
        else:
            # Re-publish: created stays fixed, architectures not re-uploaded are kept
            existing = catalog.versions[existing_idx]
            record = VersionRecord(
                metadata=descriptor.snapshot(),
                version=version,
                architectures={**existing.architectures, **architectures},
                created=existing.created,
                updated=now,
            )
            catalog.versions[existing_idx] = record

        catalog.latest_version = record
        catalog.name = descriptor.name
        catalog.description = descriptor.description
        catalog.icon = descriptor.icon
        return record

    def _fetch(self, key: str, label: str) -> bytes | None:
        try:
            return self._store.get_object(key)
        except ObjectNotFoundError:
            logger.debug("no %s at %s yet", label, key)
            return None
        except ObjectStoreError as e:
            raise CatalogError(f"couldn't get {label}: {e}") from e

    def _decode(self, body: bytes, model: type[M], key: str) -> M:
        try:
            return model.model_validate_json(body)
        except ValidationError as e:
            raise CatalogError(f"couldn't decode {key} to json: {e}") from e

    def _write(self, key: str, catalog: BaseModel) -> None:
        body = catalog.model_dump_json().encode("utf-8")
        try:
            self._store.put_object(key, body)
            self._store.wait_until_exists(key, self._config.confirm_timeout_seconds)
        except ObjectConfirmationError as e:
            raise CatalogError(f"wrote {key} but could not confirm it exists: {e}") from e
        except ObjectStoreError as e:
            raise CatalogError(f"couldn't upload index to {self._config.bucket}:{key}: {e}") from e
