"""Tests for the toolchain-backed builder."""

from pathlib import Path
from unittest.mock import patch

from plugin_registry.core.platforms import PlatformTarget
from plugin_registry.integrations.builder.real import RealBuilder

RUN_PATH = "plugin_registry.integrations.builder.real.run_subprocess_with_context"


def test_build_binary_cross_compiles_for_target() -> None:
    output_path = Path("/plugin/build/windows_arm64/bin/plugin.exe")

    with patch(RUN_PATH) as mock_run:
        RealBuilder().build_binary(Path("/plugin"), output_path, PlatformTarget("windows", "arm64"))

    mock_run.assert_called_once()
    args, kwargs = mock_run.call_args
    assert args[0] == ["go", "build", "-o", str(output_path), "./pkg"]
    assert kwargs["cwd"] == Path("/plugin")
    assert kwargs["env"]["GOOS"] == "windows"
    assert kwargs["env"]["GOARCH"] == "arm64"


def test_build_ui_runs_pnpm_and_returns_assets_dir() -> None:
    with patch(RUN_PATH) as mock_run:
        assets_dir = RealBuilder().build_ui(Path("/plugin"))

    args, kwargs = mock_run.call_args
    assert args[0] == ["pnpm", "run", "build"]
    assert kwargs["cwd"] == Path("/plugin/ui")
    assert assets_dir == Path("/plugin/ui/dist/assets")
