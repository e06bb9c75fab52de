"""Concurrent multi-platform build orchestration.

The shared UI build and every per-platform binary build run in parallel.
Results are joined in two phases: first every task's result is collected,
then a failed UI build is applied to all platform outcomes and the built UI
assets are distributed into the staging directories that are still valid.
Tasks never touch each other's staging directories or shared result state.
"""

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from pathlib import Path

from plugin_registry.core.descriptor import DESCRIPTOR_FILENAME
from plugin_registry.core.errors import BuildError, UIBuildError
from plugin_registry.core.file_utils import copy_file, copy_tree
from plugin_registry.core.platforms import PlatformTarget
from plugin_registry.core.types import BuildOutcome
from plugin_registry.core.user_feedback import UserFeedback
from plugin_registry.integrations.builder.abc import Builder

logger = logging.getLogger(__name__)

ASSETS_DIRNAME = "assets"
BIN_DIRNAME = "bin"


def binary_output_path(staging_dir: Path, target: PlatformTarget) -> Path:
    return staging_dir / BIN_DIRNAME / target.binary_name


class BuildOrchestrator:
    """Builds a plugin for several platforms into per-platform staging directories."""

    def __init__(self, builder: Builder, feedback: UserFeedback) -> None:
        self._builder = builder
        self._feedback = feedback

    def build_all(
        self,
        plugin_dir: Path,
        version: str,
        output_root: Path,
        platforms: list[PlatformTarget] | tuple[PlatformTarget, ...],
    ) -> list[BuildOutcome]:
        """Build every platform and return one outcome per platform, in input order.

        Args:
            plugin_dir: Root of the plugin source tree (holds plugin.yaml and ui/)
            version: Version being built, for progress reporting
            output_root: Directory under which `<os>_<arch>/` staging dirs are created
            platforms: Targets to build

        Returns:
            One BuildOutcome per target. Targets whose staging directory could not
            be prepared carry that error and are never built.
        """
        staging_dirs = {target.key: output_root / target.key for target in platforms}
        errors: dict[str, BuildError] = {}

        # Phase 0: isolated staging directories plus the descriptor, before any build starts
        for target in platforms:
            error = self._prepare_staging_dir(plugin_dir, staging_dirs[target.key], target)
            if error is not None:
                errors[target.key] = error

        buildable = [target for target in platforms if target.key not in errors]
        self._feedback.info(
            f"Building version {version} for {len(buildable)} platform(s): "
            + ", ".join(target.key for target in buildable)
        )

        # Phase 1: fan out one UI build plus N binary builds, join on all of them
        with ThreadPoolExecutor(max_workers=len(buildable) + 1) as executor:
            ui_future = executor.submit(self._build_ui, plugin_dir)
            binary_futures: dict[str, Future[BuildError | None]] = {
                target.key: executor.submit(
                    self._build_binary, plugin_dir, staging_dirs[target.key], target
                )
                for target in buildable
            }
            ui_result = ui_future.result()
            for key, future in binary_futures.items():
                binary_error = future.result()
                if binary_error is not None:
                    errors[key] = binary_error

        # Phase 2: post-hoc invalidation and asset distribution
        if isinstance(ui_result, UIBuildError):
            self._feedback.error(f"❌ UI build failed: {ui_result}")
            for target in buildable:
                errors[target.key] = _invalidated_by_ui(target, ui_result, errors.get(target.key))
        else:
            for target in buildable:
                if target.key in errors:
                    continue
                error = self._install_assets(ui_result, staging_dirs[target.key], target)
                if error is not None:
                    errors[target.key] = error
            self._feedback.success("✅ Built and distributed UI assets")

        return [
            BuildOutcome(
                target=target,
                staging_dir=staging_dirs[target.key],
                error=errors.get(target.key),
            )
            for target in platforms
        ]

    def _prepare_staging_dir(
        self, plugin_dir: Path, staging_dir: Path, target: PlatformTarget
    ) -> BuildError | None:
        try:
            (staging_dir / BIN_DIRNAME).mkdir(parents=True, exist_ok=True)
        except OSError as e:
            self._feedback.error(f"❌ Failed to create output dir for {target.key}: {e}")
            return BuildError(
                f"failed to create output dir for {target.key}: {e}", target.key, cause=e
            )

        try:
            copy_file(plugin_dir / DESCRIPTOR_FILENAME, staging_dir / DESCRIPTOR_FILENAME)
        except OSError as e:
            self._feedback.error(f"❌ Failed to copy {DESCRIPTOR_FILENAME} to {target.key}: {e}")
            return BuildError(
                f"failed to copy {DESCRIPTOR_FILENAME} to {target.key}: {e}", target.key, cause=e
            )
        return None

    def _build_binary(
        self, plugin_dir: Path, staging_dir: Path, target: PlatformTarget
    ) -> BuildError | None:
        output_path = binary_output_path(staging_dir, target)
        if output_path.exists():
            self._feedback.info(f"⚠️  Skipping {target.key} (already built)")
            return None

        self._feedback.info(f"Building binary for {target.key}...")
        try:
            self._builder.build_binary(plugin_dir, output_path, target)
        except Exception as e:
            logger.debug("binary build for %s failed", target.key, exc_info=True)
            return BuildError(f"binary build failed for {target.key}: {e}", target.key, cause=e)

        self._feedback.success(f"✅ Built binary for {target.key}")
        return None

    def _build_ui(self, plugin_dir: Path) -> Path | UIBuildError:
        self._feedback.info("Building ui...")
        try:
            assets_dir = self._builder.build_ui(plugin_dir)
        except Exception as e:
            logger.debug("UI build failed", exc_info=True)
            return UIBuildError(f"UI build error: {e}", cause=e)

        if not assets_dir.is_dir():
            return UIBuildError(f"UI build produced no assets at {assets_dir}")
        return assets_dir

    def _install_assets(
        self, assets_dir: Path, staging_dir: Path, target: PlatformTarget
    ) -> BuildError | None:
        try:
            copy_tree(assets_dir, staging_dir / ASSETS_DIRNAME)
        except OSError as e:
            return BuildError(f"failed to copy UI to {target.key}: {e}", target.key, cause=e)
        return None


def _invalidated_by_ui(
    target: PlatformTarget, ui_error: UIBuildError, binary_error: BuildError | None
) -> BuildError:
    message = f"UI build failed: {ui_error}"
    if binary_error is not None:
        message += f" (binary build also failed: {binary_error})"
    return BuildError(message, target.key, cause=ui_error)
