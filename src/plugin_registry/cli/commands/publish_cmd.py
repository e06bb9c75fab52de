"""Publish command - upload prebuilt artifacts and update the catalogs."""

from pathlib import Path
from typing import Any

import click

from plugin_registry.cli.commands.shared import (
    allow_partial_option,
    artifact_path_options,
    bucket_option,
    collect_artifact_paths,
    load_publish_descriptor,
    resolve_config,
    run_publish,
)
from plugin_registry.cli.error_boundary import cli_error_boundary
from plugin_registry.core.context import RegistryContext
from plugin_registry.core.types import PublishRequest


@click.command(name="publish")
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
def publish_cmd(
    ctx: RegistryContext,
    plugin: str,
    version: str,
    metadata_path: Path,
    bucket: str | None,
    allow_partial: bool,
    **artifact_paths: Any,
) -> None:
    """Publish a new version of a plugin.

    Pushes each supplied platform artifact to the registry, then updates the
    plugin's version index and the registry index to show the new version.
    """
    config = resolve_config(ctx, bucket)
    request = PublishRequest(
        plugin=plugin,
        version=version,
        descriptor_path=metadata_path,
        paths=collect_artifact_paths(artifact_paths),
    )
    descriptor = load_publish_descriptor(plugin, metadata_path)
    run_publish(ctx, config, request, descriptor, allow_partial)
