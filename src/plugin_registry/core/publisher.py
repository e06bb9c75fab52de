"""Publish coordination: upload every artifact of a release, then index it."""

from dataclasses import dataclass

from plugin_registry.core.descriptor import PluginDescriptor
from plugin_registry.core.indexer import IndexSynchronizer, SyncResult
from plugin_registry.core.types import PublishRequest
from plugin_registry.core.uploader import Uploader
from plugin_registry.core.user_feedback import UserFeedback


@dataclass(frozen=True)
class PublishResult:
    uploaded_keys: list[str]
    sync: SyncResult


class Publisher:
    """Sequences uploads for one release and runs index synchronization once."""

    def __init__(
        self, uploader: Uploader, indexer: IndexSynchronizer, feedback: UserFeedback
    ) -> None:
        self._uploader = uploader
        self._indexer = indexer
        self._feedback = feedback

    def publish(
        self,
        request: PublishRequest,
        descriptor: PluginDescriptor,
        *,
        allow_partial: bool = False,
    ) -> PublishResult:
        """Upload each release in order, then update the catalogs.

        The first upload failure aborts the publish before any catalog is
        touched. Artifacts uploaded before the failure stay in the store.

        Raises:
            ValueError: If the request names no artifacts
            UploadError: If any upload fails (including its distinguished subclasses)
            CatalogError: If index synchronization fails
        """
        releases = request.to_releases()
        if not releases:
            raise ValueError("no artifacts supplied: pass at least one platform artifact path")

        uploaded: list[str] = []
        for release in releases:
            self._feedback.info(f"uploading release to {release.remote_key}...")
            key = self._uploader.upload(release)
            uploaded.append(key)
            self._feedback.success(f"uploaded release {release}: {key}")

        sync = self._indexer.synchronize(releases, descriptor, allow_partial=allow_partial)
        return PublishResult(uploaded_keys=uploaded, sync=sync)
