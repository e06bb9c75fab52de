"""Package command - build, archive, and optionally publish a plugin."""

from pathlib import Path

import click

from plugin_registry.cli.commands.shared import (
    allow_partial_option,
    bucket_option,
    resolve_config,
    run_publish,
)
from plugin_registry.cli.ensure import Ensure
from plugin_registry.cli.error_boundary import cli_error_boundary
from plugin_registry.cli.rendering import format_package_summary, stderr_console
from plugin_registry.core.context import RegistryContext
from plugin_registry.core.descriptor import DESCRIPTOR_FILENAME
from plugin_registry.core.packager import PackageOptions
from plugin_registry.core.platforms import SUPPORTED_PLATFORMS, PlatformTarget, parse_platform_key
from plugin_registry.core.types import PublishRequest


def _parse_platforms(platform_keys: tuple[str, ...]) -> tuple[PlatformTarget, ...]:
    if not platform_keys:
        return SUPPORTED_PLATFORMS
    try:
        return tuple(parse_platform_key(key) for key in platform_keys)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="--platform") from None


@click.command(name="package")
@click.argument("path", type=click.Path(exists=True, file_okay=False, path_type=Path))
@click.option(
    "-o",
    "--out",
    "out_dir",
    default="build",
    show_default=True,
    help="Output directory for the plugin packages, relative to PATH",
)
@click.option(
    "-v",
    "--version",
    "version",
    default=None,
    help="Version to use for the build. Defaults to what is in the plugin.yaml",
)
@click.option(
    "--clean/--no-clean",
    default=True,
    show_default=True,
    help="Clean the output directory before packaging",
)
@click.option(
    "--platform",
    "platform_keys",
    multiple=True,
    help="Only build this platform (e.g. linux_amd64); repeatable. Defaults to all.",
)
@click.option(
    "-p",
    "--publish",
    is_flag=True,
    help="Publish the builds to the registry after building",
)
@bucket_option
@allow_partial_option
@click.pass_obj
@cli_error_boundary
def package_cmd(
    ctx: RegistryContext,
    path: Path,
    out_dir: str,
    version: str | None,
    clean: bool,
    platform_keys: tuple[str, ...],
    publish: bool,
    bucket: str | None,
    allow_partial: bool,
) -> None:
    """Package a plugin for distribution.

    Compiles the plugin binary for every platform, bundles the UI once, and
    archives each platform into OUT/<os>_<arch>.tar.gz with a .sha256 file.
    """
    platforms = _parse_platforms(platform_keys)

    # Resolve the bucket before building so a missing one fails fast
    config = resolve_config(ctx, bucket) if publish else None

    options = PackageOptions(
        plugin_dir=path,
        out_dir=out_dir,
        version=version,
        clean=clean,
        platforms=platforms,
    )
    result = ctx.packager().package(options)
    stderr_console().print(format_package_summary(result))

    if config is None:
        Ensure.invariant(result.succeeded, f"{len(result.failures)} platform(s) failed to package")
        ctx.feedback.success("\nSuccessfully packaged plugin for distribution")
        return

    Ensure.invariant(
        result.succeeded or (allow_partial and bool(result.artifacts)),
        f"{len(result.failures)} platform(s) failed to package; refusing to publish an "
        "incomplete release (pass --allow-partial to publish the rest)",
    )

    ctx.feedback.info("Publishing to registry...")
    request = PublishRequest(
        plugin=result.descriptor.id,
        version=result.descriptor.version,
        descriptor_path=path / DESCRIPTOR_FILENAME,
        paths={key: str(archive.archive_path) for key, archive in result.artifacts.items()},
    )
    run_publish(ctx, config, request, result.descriptor, allow_partial)
