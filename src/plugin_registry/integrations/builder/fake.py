"""Fake builder for testing the orchestrator without external toolchains."""

import threading
from pathlib import Path

from plugin_registry.core.platforms import PlatformTarget
from plugin_registry.integrations.builder.abc import Builder


class FakeBuilder(Builder):
    """In-memory fake that writes placeholder outputs and records calls.

    Safe to call from several threads at once, like the real builder.
    """

    def __init__(
        self,
        *,
        failing_platforms: dict[str, str] | None = None,
        ui_error: str | None = None,
        ui_assets: dict[str, bytes] | None = None,
    ) -> None:
        """Create FakeBuilder.

        Args:
            failing_platforms: Platform key -> error message for binary builds that fail
            ui_error: If set, build_ui() fails with this message
            ui_assets: Relative path -> content of the assets build_ui() produces
                (defaults to a single index.js)
        """
        self._failing_platforms = failing_platforms or {}
        self._ui_error = ui_error
        self._ui_assets = ui_assets if ui_assets is not None else {"index.js": b"ui();"}
        self._lock = threading.Lock()
        self._binary_calls: list[str] = []
        self._ui_calls = 0

    @property
    def binary_calls(self) -> list[str]:
        """Platform keys build_binary() was called for, for test assertions."""
        with self._lock:
            return sorted(self._binary_calls)

    @property
    def ui_calls(self) -> int:
        with self._lock:
            return self._ui_calls

    def build_binary(self, plugin_dir: Path, output_path: Path, target: PlatformTarget) -> None:
        with self._lock:
            self._binary_calls.append(target.key)
        if target.key in self._failing_platforms:
            raise RuntimeError(self._failing_platforms[target.key])
        output_path.write_bytes(f"binary {target.key}".encode())

    def build_ui(self, plugin_dir: Path) -> Path:
        with self._lock:
            self._ui_calls += 1
        if self._ui_error is not None:
            raise RuntimeError(self._ui_error)
        assets_dir = plugin_dir / "ui" / "dist" / "assets"
        for rel_path, content in self._ui_assets.items():
            dest = assets_dir / rel_path
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(content)
        return assets_dir
