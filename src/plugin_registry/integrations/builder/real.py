"""Production builder using the Go toolchain and pnpm."""

import os
from pathlib import Path

from plugin_registry.core.platforms import PlatformTarget
from plugin_registry.core.subprocess import run_subprocess_with_context
from plugin_registry.integrations.builder.abc import Builder


class RealBuilder(Builder):
    """Cross-compiles with `go build` and bundles the UI with `pnpm run build`."""

    def build_binary(self, plugin_dir: Path, output_path: Path, target: PlatformTarget) -> None:
        env = dict(os.environ)
        env["GOOS"] = target.os
        env["GOARCH"] = target.arch
        run_subprocess_with_context(
            ["go", "build", "-o", str(output_path), "./pkg"],
            operation_context=f"build binary for {target.key}",
            cwd=plugin_dir,
            env=env,
        )

    def build_ui(self, plugin_dir: Path) -> Path:
        ui_dir = plugin_dir / "ui"
        run_subprocess_with_context(
            ["pnpm", "run", "build"],
            operation_context="build ui",
            cwd=ui_dir,
        )
        return ui_dir / "dist" / "assets"
