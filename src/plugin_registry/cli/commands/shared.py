"""Options and reporting shared by the package, publish, and index commands."""

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Any, TypeVar

import click

from plugin_registry.cli.ensure import Ensure
from plugin_registry.cli.output import machine_output, user_output
from plugin_registry.cli.rendering import format_sync_failures, stderr_console
from plugin_registry.core.config import BUCKET_ENV_VAR, RegistryConfig
from plugin_registry.core.context import RegistryContext
from plugin_registry.core.descriptor import PluginDescriptor, load_descriptor
from plugin_registry.core.indexer import SyncResult
from plugin_registry.core.types import RELEASE_ORDER, PublishRequest

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])

bucket_option = click.option(
    "-b",
    "--bucket",
    default=None,
    help=f"Registry bucket to publish to (defaults to ${BUCKET_ENV_VAR})",
)

allow_partial_option = click.option(
    "--allow-partial",
    is_flag=True,
    help="Index the artifacts that could be processed even if others failed",
)


def artifact_path_options(func: F) -> F:
    """Add one `--<os>-<arch>` artifact path option per supported platform."""
    for target in reversed(RELEASE_ORDER):
        func = click.option(
            f"--{target.os}-{target.arch}",
            f"--{target.key}",
            target.key,
            type=click.Path(dir_okay=False),
            default=None,
            help=f"path to a {target.os}/{target.arch} build",
        )(func)
    return func


def collect_artifact_paths(kwargs: dict[str, Any]) -> dict[str, str]:
    """Pop the per-platform path options out of a command's kwargs."""
    paths: dict[str, str] = {}
    for target in RELEASE_ORDER:
        value = kwargs.pop(target.key, None)
        if value:
            paths[target.key] = value
    return paths


def load_publish_descriptor(plugin: str, metadata_path: Path) -> PluginDescriptor:
    """Load and validate the descriptor whose metadata is recorded with the release."""
    descriptor = load_descriptor(metadata_path)
    descriptor.validate_required()
    if descriptor.id != plugin:
        logger.warning(
            "descriptor %s declares id '%s' but publishing plugin '%s'",
            metadata_path,
            descriptor.id,
            plugin,
        )
    return descriptor


def resolve_config(ctx: RegistryContext, bucket: str | None) -> RegistryConfig:
    try:
        return ctx.resolve_config(bucket)
    except ValueError as e:
        raise click.UsageError(str(e)) from None


def report_sync(ctx: RegistryContext, sync: SyncResult) -> None:
    """Report the synchronization outcome, exiting 1 when catalogs were not written."""
    if sync.skipped:
        for release in sync.skipped:
            ctx.feedback.error(f"skipped release that wasn't part of the plugin: {release}")

    if sync.failed:
        stderr_console().print(format_sync_failures(sync))

    Ensure.invariant(
        sync.catalogs_written,
        "catalogs were not updated; uploaded artifacts are not indexed yet. "
        "Fix the failures above and re-run `plugin-registry index`, "
        "or pass --allow-partial to index the rest.",
    )


def run_publish(
    ctx: RegistryContext,
    config: RegistryConfig,
    request: PublishRequest,
    descriptor: PluginDescriptor,
    allow_partial: bool,
) -> None:
    """Upload every artifact of the request, then index the release."""
    if ctx.dry_run:
        user_output("[DRY RUN MODE - No changes will be made]\n")

    store = ctx.open_store(config)
    result = ctx.publisher(config, store).publish(
        request, descriptor, allow_partial=allow_partial
    )
    report_sync(ctx, result.sync)

    for key in result.uploaded_keys:
        machine_output(key)
    ctx.feedback.success(f"Published new plugin version: {request.plugin}[{request.version}]")
