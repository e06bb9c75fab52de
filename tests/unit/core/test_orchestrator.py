"""Tests for concurrent multi-platform builds."""

from collections.abc import Callable
from pathlib import Path

from plugin_registry.core.errors import BuildError, UIBuildError
from plugin_registry.core.orchestrator import BuildOrchestrator
from plugin_registry.core.platforms import SUPPORTED_PLATFORMS, PlatformTarget
from plugin_registry.core.types import BuildOutcome
from plugin_registry.core.user_feedback import FakeUserFeedback
from plugin_registry.integrations.builder.fake import FakeBuilder


def _build(
    builder: FakeBuilder,
    plugin_dir: Path,
    platforms: tuple[PlatformTarget, ...] = SUPPORTED_PLATFORMS,
) -> list[BuildOutcome]:
    orchestrator = BuildOrchestrator(builder, FakeUserFeedback())
    return orchestrator.build_all(plugin_dir, "1.0.0", plugin_dir / "build", platforms)


def test_all_platforms_built_into_isolated_staging_dirs(
    write_plugin: Callable[..., Path],
) -> None:
    plugin_dir = write_plugin()
    builder = FakeBuilder()

    outcomes = _build(builder, plugin_dir)

    assert [outcome.target for outcome in outcomes] == list(SUPPORTED_PLATFORMS)
    assert all(outcome.succeeded for outcome in outcomes)
    assert builder.ui_calls == 1
    for outcome in outcomes:
        staging = outcome.staging_dir
        assert staging == plugin_dir / "build" / outcome.target.key
        binary = staging / "bin" / outcome.target.binary_name
        assert binary.read_bytes() == f"binary {outcome.target.key}".encode()
        assert (staging / "plugin.yaml").exists()
        assert (staging / "assets" / "index.js").read_bytes() == b"ui();"


def test_binary_failure_is_isolated_to_its_platform(write_plugin: Callable[..., Path]) -> None:
    plugin_dir = write_plugin()
    builder = FakeBuilder(failing_platforms={"linux_arm64": "linker exploded"})

    outcomes = _build(builder, plugin_dir)

    failed = [outcome for outcome in outcomes if not outcome.succeeded]
    assert [outcome.target.key for outcome in failed] == ["linux_arm64"]
    error = failed[0].error
    assert isinstance(error, BuildError)
    assert error.platform_key == "linux_arm64"
    assert "linker exploded" in str(error)
    assert not (failed[0].staging_dir / "assets").exists()


def test_ui_failure_invalidates_every_platform(write_plugin: Callable[..., Path]) -> None:
    plugin_dir = write_plugin()
    builder = FakeBuilder(ui_error="pnpm missing")

    outcomes = _build(builder, plugin_dir)

    assert len(outcomes) == len(SUPPORTED_PLATFORMS)
    for outcome in outcomes:
        assert outcome.error is not None
        assert isinstance(outcome.error.cause, UIBuildError)
        assert "pnpm missing" in str(outcome.error)
        assert not (outcome.staging_dir / "assets").exists()
    # Binaries still ran; they were invalidated after the join
    assert len(builder.binary_calls) == len(SUPPORTED_PLATFORMS)


def test_ui_failure_keeps_binary_failure_in_message(write_plugin: Callable[..., Path]) -> None:
    plugin_dir = write_plugin()
    builder = FakeBuilder(ui_error="ui broke", failing_platforms={"darwin_amd64": "cgo"})

    outcomes = _build(builder, plugin_dir, (PlatformTarget("darwin", "amd64"),))

    assert outcomes[0].error is not None
    message = str(outcomes[0].error)
    assert "ui broke" in message
    assert "binary build also failed" in message


def test_ui_build_without_assets_is_a_failure(write_plugin: Callable[..., Path]) -> None:
    plugin_dir = write_plugin()
    builder = FakeBuilder(ui_assets={})

    outcomes = _build(builder, plugin_dir, (PlatformTarget("linux", "amd64"),))

    assert outcomes[0].error is not None
    assert isinstance(outcomes[0].error.cause, UIBuildError)
    assert "produced no assets" in str(outcomes[0].error)


def test_existing_binaries_are_not_rebuilt(write_plugin: Callable[..., Path]) -> None:
    plugin_dir = write_plugin()
    builder = FakeBuilder()
    feedback = FakeUserFeedback()
    orchestrator = BuildOrchestrator(builder, feedback)
    platforms = (PlatformTarget("linux", "amd64"), PlatformTarget("windows", "arm64"))

    orchestrator.build_all(plugin_dir, "1.0.0", plugin_dir / "build", platforms)
    outcomes = orchestrator.build_all(plugin_dir, "1.0.0", plugin_dir / "build", platforms)

    assert all(outcome.succeeded for outcome in outcomes)
    assert builder.binary_calls == ["linux_amd64", "windows_arm64"]
    assert "INFO: ⚠️  Skipping linux_amd64 (already built)" in feedback.messages


def test_missing_descriptor_fails_every_platform_without_building(tmp_path: Path) -> None:
    plugin_dir = tmp_path / "plugin"
    plugin_dir.mkdir()
    builder = FakeBuilder()

    outcomes = _build(builder, plugin_dir, (PlatformTarget("linux", "amd64"),))

    assert len(outcomes) == 1
    assert outcomes[0].error is not None
    assert "plugin.yaml" in str(outcomes[0].error)
    assert builder.binary_calls == []


class UndecodableOutputBuilder(FakeBuilder):
    """Raises the error a strict decode of a toolchain's output would."""

    def __init__(self, *, binary_key: str | None = None, ui: bool = False) -> None:
        super().__init__()
        self._binary_key = binary_key
        self._ui = ui

    def build_binary(self, plugin_dir: Path, output_path: Path, target: PlatformTarget) -> None:
        if target.key == self._binary_key:
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        super().build_binary(plugin_dir, output_path, target)

    def build_ui(self, plugin_dir: Path) -> Path:
        if self._ui:
            raise UnicodeDecodeError("utf-8", b"\xff", 0, 1, "invalid start byte")
        return super().build_ui(plugin_dir)


def test_unexpected_binary_error_is_isolated_to_its_platform(
    write_plugin: Callable[..., Path],
) -> None:
    plugin_dir = write_plugin()
    builder = UndecodableOutputBuilder(binary_key="darwin_amd64")

    outcomes = _build(builder, plugin_dir)

    assert len(outcomes) == len(SUPPORTED_PLATFORMS)
    failed = [outcome for outcome in outcomes if not outcome.succeeded]
    assert [outcome.target.key for outcome in failed] == ["darwin_amd64"]
    error = failed[0].error
    assert isinstance(error, BuildError)
    assert isinstance(error.cause, UnicodeDecodeError)


def test_unexpected_ui_error_becomes_ui_build_error(write_plugin: Callable[..., Path]) -> None:
    plugin_dir = write_plugin()
    builder = UndecodableOutputBuilder(ui=True)

    outcomes = _build(builder, plugin_dir)

    assert len(outcomes) == len(SUPPORTED_PLATFORMS)
    for outcome in outcomes:
        assert outcome.error is not None
        ui_error = outcome.error.cause
        assert isinstance(ui_error, UIBuildError)
        assert isinstance(ui_error.cause, UnicodeDecodeError)
