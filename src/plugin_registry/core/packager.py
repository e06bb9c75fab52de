"""Packaging step: validate, build every platform, archive the results."""

import logging
import shutil
from dataclasses import dataclass, field
from pathlib import Path

from plugin_registry.core.archiver import ArchiveResult, create_archive
from plugin_registry.core.descriptor import (
    DESCRIPTOR_FILENAME,
    PluginDescriptor,
    load_descriptor,
    save_descriptor,
)
from plugin_registry.core.errors import ArchiveError, OutputDirError, RegistryError
from plugin_registry.core.orchestrator import BuildOrchestrator
from plugin_registry.core.platforms import SUPPORTED_PLATFORMS, PlatformTarget
from plugin_registry.core.user_feedback import UserFeedback

logger = logging.getLogger(__name__)

ARCHIVE_SUFFIX = ".tar.gz"


@dataclass(frozen=True)
class PackageOptions:
    """Explicit configuration for one packaging run."""

    plugin_dir: Path
    out_dir: str = "build"
    version: str | None = None
    clean: bool = True
    platforms: tuple[PlatformTarget, ...] = SUPPORTED_PLATFORMS

    @property
    def output_root(self) -> Path:
        return self.plugin_dir / self.out_dir


@dataclass(frozen=True)
class PackageResult:
    """Artifacts produced per platform key, and the cause for every platform that failed."""

    descriptor: PluginDescriptor
    artifacts: dict[str, ArchiveResult] = field(default_factory=dict)
    failures: dict[str, RegistryError] = field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return not self.failures


def archive_path_for(output_root: Path, platform_key: str) -> Path:
    return output_root / f"{platform_key}{ARCHIVE_SUFFIX}"


def validate_output_dir(out_dir: str, plugin_dir: Path) -> None:
    """Refuse to build into an output directory that cleaning would make destructive.

    Raises:
        OutputDirError: If out_dir is empty, the filesystem root, the plugin dir,
            or any directory containing the plugin dir
    """
    if not out_dir.strip():
        raise OutputDirError("cannot build to empty directory")
    resolved = (plugin_dir / out_dir).resolve()
    if resolved == Path(resolved.anchor):
        raise OutputDirError("DANGER: You supplied the root directory as the output directory")
    if plugin_dir.resolve().is_relative_to(resolved):
        raise OutputDirError(
            f"output directory {resolved} must not be the plugin directory or contain it"
        )


def prepare_descriptor(options: PackageOptions) -> PluginDescriptor:
    """Load and validate the descriptor, rewriting it with the requested version.

    Raises:
        DescriptorError: If plugin.yaml cannot be loaded
        DescriptorValidationError: If required fields are missing
    """
    descriptor_path = options.plugin_dir / DESCRIPTOR_FILENAME
    descriptor = load_descriptor(descriptor_path)
    if options.version:
        descriptor = descriptor.with_version(options.version)
    descriptor.validate_required()
    if options.version:
        save_descriptor(descriptor, descriptor_path)
    return descriptor


class Packager:
    """Runs the full local packaging step for one plugin."""

    def __init__(self, orchestrator: BuildOrchestrator, feedback: UserFeedback) -> None:
        self._orchestrator = orchestrator
        self._feedback = feedback

    def package(self, options: PackageOptions) -> PackageResult:
        """Build and archive the plugin for every requested platform.

        Validation errors abort before anything is built. Build and archive
        failures are isolated per platform and reported in the result.

        Raises:
            OutputDirError: If the output directory is unusable
            DescriptorError: If the descriptor is missing or invalid
        """
        validate_output_dir(options.out_dir, options.plugin_dir)
        descriptor = prepare_descriptor(options)
        output_root = options.output_root

        if options.clean and output_root.exists():
            logger.debug("cleaning output directory %s", output_root)
            try:
                shutil.rmtree(output_root)
            except OSError as e:
                raise OutputDirError(f"failed to clean output directory: {e}") from e

        outcomes = self._orchestrator.build_all(
            options.plugin_dir, descriptor.version, output_root, options.platforms
        )

        artifacts: dict[str, ArchiveResult] = {}
        failures: dict[str, RegistryError] = {}
        for outcome in outcomes:
            key = outcome.target.key
            if outcome.error is not None:
                failures[key] = outcome.error
                continue
            try:
                archive = create_archive(outcome.staging_dir, archive_path_for(output_root, key))
            except ArchiveError as e:
                self._feedback.error(f"❌ Compression failed for {key}: {e}")
                failures[key] = e
                continue
            artifacts[key] = archive
            self._feedback.success(f"✅ Packaged {key} → {archive.archive_path}")

        return PackageResult(descriptor=descriptor, artifacts=artifacts, failures=failures)
