"""Tests for the publish command."""

from collections.abc import Callable
from dataclasses import replace
from pathlib import Path

from click.testing import CliRunner

from plugin_registry.cli.cli import cli
from plugin_registry.core.context import RegistryContext
from plugin_registry.core.types import PluginCatalog
from plugin_registry.integrations.object_store.fake import FakeObjectStore
from plugin_registry.integrations.object_store.types import ObjectStoreError

ENV = {"AWS_S3_BUCKET": "registry-bucket"}


def _publish_args(plugin_dir: Path, *extra: str) -> list[str]:
    return ["publish", "p", "1.2.0", "-m", str(plugin_dir / "plugin.yaml"), *extra]


def test_publish_uploads_and_indexes(
    write_plugin: Callable[..., Path], write_artifact: Callable[..., Path]
) -> None:
    """Test that publish uploads each artifact and prints the keys on stdout."""
    plugin_dir = write_plugin()
    linux = write_artifact("linux.tar.gz")
    store = FakeObjectStore()
    ctx = RegistryContext.for_test(store=store, environ=ENV)

    runner = CliRunner()
    result = runner.invoke(
        cli,
        [
            "publish",
            "p",
            "1.2.0",
            "-m",
            str(plugin_dir / "plugin.yaml"),
            "--linux-amd64",
            str(linux),
        ],
        obj=ctx,
    )

    assert result.exit_code == 0, result.output
    assert "p/1.2.0/linux-amd64.tar.gz" in result.output
    assert "p/1.2.0/linux-amd64.tar.gz" in store.objects
    catalog = PluginCatalog.model_validate_json(store.objects["p/index.json"])
    assert catalog.latest_version.version == "1.2.0"
    assert "index.json" in store.objects


def test_publish_accepts_underscore_platform_flags(
    write_plugin: Callable[..., Path], write_artifact: Callable[..., Path]
) -> None:
    plugin_dir = write_plugin()
    mac = write_artifact("mac.tar.gz")
    store = FakeObjectStore()

    result = CliRunner().invoke(
        cli,
        _publish_args(plugin_dir, "--darwin_arm64", str(mac)),
        obj=RegistryContext.for_test(store=store, environ=ENV),
    )

    assert result.exit_code == 0, result.output
    assert "p/1.2.0/darwin-arm64.tar.gz" in store.objects


def test_publish_without_bucket_is_a_usage_error(
    write_plugin: Callable[..., Path], write_artifact: Callable[..., Path]
) -> None:
    plugin_dir = write_plugin()
    linux = write_artifact("linux.tar.gz")

    result = CliRunner().invoke(
        cli,
        _publish_args(plugin_dir, "--linux-amd64", str(linux)),
        obj=RegistryContext.for_test(environ={}),
    )

    assert result.exit_code == 2
    assert "No bucket supplied" in result.output


def test_publish_bucket_flag_overrides_environment(
    write_plugin: Callable[..., Path], write_artifact: Callable[..., Path]
) -> None:
    plugin_dir = write_plugin()
    linux = write_artifact("linux.tar.gz")

    result = CliRunner().invoke(
        cli,
        [
            "publish",
            "p",
            "1.2.0",
            "-m",
            str(plugin_dir / "plugin.yaml"),
            "-b",
            "flag-bucket",
            "--linux-amd64",
            str(linux),
        ],
        obj=RegistryContext.for_test(environ={}),
    )

    assert result.exit_code == 0, result.output


def test_publish_without_artifacts_fails(write_plugin: Callable[..., Path]) -> None:
    plugin_dir = write_plugin()
    store = FakeObjectStore()

    result = CliRunner().invoke(
        cli,
        ["publish", "p", "1.2.0", "-m", str(plugin_dir / "plugin.yaml")],
        obj=RegistryContext.for_test(store=store, environ=ENV),
    )

    assert result.exit_code == 1
    assert "no artifacts supplied" in result.output
    assert store.put_keys == []


def test_publish_with_incomplete_metadata_fails(
    write_plugin: Callable[..., Path], write_artifact: Callable[..., Path]
) -> None:
    plugin_dir = write_plugin(repository="")
    linux = write_artifact("linux.tar.gz")
    store = FakeObjectStore()

    result = CliRunner().invoke(
        cli,
        _publish_args(plugin_dir, "--linux-amd64", str(linux)),
        obj=RegistryContext.for_test(store=store, environ=ENV),
    )

    assert result.exit_code == 1
    assert "missing required fields: repository" in result.output
    assert store.put_keys == []


def test_publish_too_large_artifact(
    write_plugin: Callable[..., Path], write_artifact: Callable[..., Path]
) -> None:
    plugin_dir = write_plugin()
    linux = write_artifact("linux.tar.gz", b"x" * 64)
    store = FakeObjectStore(max_object_size=8)

    result = CliRunner().invoke(
        cli,
        _publish_args(plugin_dir, "--linux-amd64", str(linux)),
        obj=RegistryContext.for_test(store=store, environ=ENV),
    )

    assert result.exit_code == 1
    assert "too large" in result.output
    assert "p/index.json" not in store.objects


def test_publish_unconfirmed_upload_asks_for_manual_check(
    write_plugin: Callable[..., Path], write_artifact: Callable[..., Path]
) -> None:
    plugin_dir = write_plugin()
    linux = write_artifact("linux.tar.gz")
    store = FakeObjectStore(unconfirmed_keys={"p/1.2.0/linux-amd64.tar.gz"})

    result = CliRunner().invoke(
        cli,
        _publish_args(plugin_dir, "--linux-amd64", str(linux)),
        obj=RegistryContext.for_test(store=store, environ=ENV),
    )

    assert result.exit_code == 1
    assert "may exist" in result.output
    assert "p/index.json" not in store.objects


def test_dry_run_reads_but_does_not_write(
    write_plugin: Callable[..., Path], write_artifact: Callable[..., Path]
) -> None:
    plugin_dir = write_plugin()
    linux = write_artifact("linux.tar.gz")
    store = FakeObjectStore()

    result = CliRunner().invoke(
        cli,
        _publish_args(plugin_dir, "--linux-amd64", str(linux)),
        obj=RegistryContext.for_test(store=store, environ=ENV, dry_run=True),
    )

    assert result.exit_code == 0, result.output
    assert "DRY RUN" in result.output
    assert store.objects == {}


def test_publish_reports_missing_store_configuration(
    write_plugin: Callable[..., Path], write_artifact: Callable[..., Path]
) -> None:
    plugin_dir = write_plugin()
    linux = write_artifact("linux.tar.gz")

    def unconfigured_store(config):
        raise ObjectStoreError(
            "couldn't load default configuration, have you set up your AWS account?", key=""
        )

    ctx = replace(RegistryContext.for_test(environ=ENV), store_factory=unconfigured_store)

    result = CliRunner().invoke(
        cli, _publish_args(plugin_dir, "--linux-amd64", str(linux)), obj=ctx
    )

    assert result.exit_code == 1
    assert "have you set up your AWS account?" in result.output
