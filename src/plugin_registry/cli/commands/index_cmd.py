"""Index command - re-run catalog synchronization for already uploaded artifacts."""

from pathlib import Path
from typing import Any

import click

from plugin_registry.cli.commands.shared import (
    allow_partial_option,
    artifact_path_options,
    bucket_option,
    collect_artifact_paths,
    load_publish_descriptor,
    report_sync,
    resolve_config,
)
from plugin_registry.cli.ensure import Ensure
from plugin_registry.cli.error_boundary import cli_error_boundary
from plugin_registry.cli.output import user_output
from plugin_registry.core.context import RegistryContext
from plugin_registry.core.types import PublishRequest


@click.command(name="index")
@click.argument("plugin")
@click.argument("version")
@click.option(
    "-m",
    "--metadata",
    "metadata_path",
    type=click.Path(dir_okay=False, path_type=Path),
    required=True,
    help="path to plugin metadata file",
)
@bucket_option
@artifact_path_options
@allow_partial_option
@click.pass_obj
@cli_error_boundary
def index_cmd(
    ctx: RegistryContext,
    plugin: str,
    version: str,
    metadata_path: Path,
    bucket: str | None,
    allow_partial: bool,
    **artifact_paths: Any,
) -> None:
    """Update the registry indexes for an already uploaded version.

    Use this after a publish whose uploads succeeded but whose index update
    failed. The local artifacts are re-hashed; nothing is uploaded.
    """
    config = resolve_config(ctx, bucket)
    request = PublishRequest(
        plugin=plugin,
        version=version,
        descriptor_path=metadata_path,
        paths=collect_artifact_paths(artifact_paths),
    )
    releases = Ensure.truthy(
        request.to_releases(), "no artifacts supplied: pass at least one platform artifact path"
    )
    descriptor = load_publish_descriptor(plugin, metadata_path)

    if ctx.dry_run:
        user_output("[DRY RUN MODE - No changes will be made]\n")

    store = ctx.open_store(config)
    sync = ctx.indexer(config, store).synchronize(
        releases, descriptor, allow_partial=allow_partial
    )
    report_sync(ctx, sync)
    ctx.feedback.success(f"Indexed {plugin}[{version}]: {len(sync.indexed)} architecture(s)")
