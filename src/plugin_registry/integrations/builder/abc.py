"""Abstract interface for the external toolchains that build a plugin."""

from abc import ABC, abstractmethod
from pathlib import Path

from plugin_registry.core.platforms import PlatformTarget


class Builder(ABC):
    """Compiles plugin binaries and bundles the plugin UI.

    Implementations include:
    - RealBuilder: Shells out to the Go toolchain and pnpm
    - FakeBuilder: In-memory for testing
    """

    @abstractmethod
    def build_binary(self, plugin_dir: Path, output_path: Path, target: PlatformTarget) -> None:
        """Compile the plugin binary for one platform.

        Args:
            plugin_dir: Root of the plugin source tree
            output_path: Where the compiled binary must be written
            target: Platform to cross-compile for

        Raises:
            RuntimeError: If compilation fails
        """
        ...

    @abstractmethod
    def build_ui(self, plugin_dir: Path) -> Path:
        """Bundle the plugin UI once for all platforms.

        Args:
            plugin_dir: Root of the plugin source tree

        Returns:
            Directory holding the built UI assets

        Raises:
            RuntimeError: If the bundler fails
        """
        ...
