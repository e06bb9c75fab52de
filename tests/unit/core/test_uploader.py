"""Tests for uploading release artifacts."""

from collections.abc import Callable
from pathlib import Path

import pytest

from plugin_registry.core.config import RegistryConfig
from plugin_registry.core.errors import ArtifactTooLargeError, UploadError, UploadUnconfirmedError
from plugin_registry.core.types import Release
from plugin_registry.core.uploader import Uploader
from plugin_registry.integrations.object_store.fake import FakeObjectStore
from plugin_registry.integrations.object_store.types import ObjectStoreError

KEY = "p/1.2.0/linux-amd64.tar.gz"


def _release(path: Path) -> Release:
    return Release(plugin="p", version="1.2.0", os="linux", arch="amd64", path=path)


def test_upload_writes_artifact_and_confirms(write_artifact: Callable[..., Path]) -> None:
    store = FakeObjectStore()
    config = RegistryConfig(bucket="b", confirm_timeout_seconds=30.0)
    path = write_artifact("linux_amd64.tar.gz", b"compressed bytes")

    key = Uploader(store, config).upload(_release(path))

    assert key == KEY
    assert store.objects[KEY] == b"compressed bytes"
    assert store.wait_calls == [(KEY, 30.0)]


def test_too_large_artifact_is_distinguished(write_artifact: Callable[..., Path]) -> None:
    store = FakeObjectStore(max_object_size=4)
    path = write_artifact("linux_amd64.tar.gz", b"much more than four bytes")

    with pytest.raises(ArtifactTooLargeError) as exc_info:
        Uploader(store, RegistryConfig(bucket="b")).upload(_release(path))

    assert exc_info.value.key == KEY
    assert "too large" in str(exc_info.value)
    assert KEY not in store.objects


def test_store_failure_is_wrapped_with_bucket_and_key(write_artifact: Callable[..., Path]) -> None:
    store = FakeObjectStore(put_errors={KEY: ObjectStoreError("access denied", KEY)})
    path = write_artifact("linux_amd64.tar.gz")

    with pytest.raises(UploadError) as exc_info:
        Uploader(store, RegistryConfig(bucket="b")).upload(_release(path))

    assert not isinstance(exc_info.value, (ArtifactTooLargeError, UploadUnconfirmedError))
    assert f"b:{KEY}" in str(exc_info.value)
    assert "access denied" in str(exc_info.value)


def test_unconfirmed_upload_needs_manual_verification(
    write_artifact: Callable[..., Path],
) -> None:
    """The object was written, so the error must not read like a plain failure."""
    store = FakeObjectStore(unconfirmed_keys={KEY})
    path = write_artifact("linux_amd64.tar.gz")

    with pytest.raises(UploadUnconfirmedError, match="verify it manually"):
        Uploader(store, RegistryConfig(bucket="b")).upload(_release(path))

    assert KEY in store.objects


def test_missing_local_artifact(tmp_path: Path) -> None:
    store = FakeObjectStore()

    with pytest.raises(UploadError, match="couldn't open file"):
        Uploader(store, RegistryConfig(bucket="b")).upload(_release(tmp_path / "missing.tar.gz"))

    assert store.put_keys == []
