import logging

import click

from plugin_registry.cli.commands.index_cmd import index_cmd
from plugin_registry.cli.commands.package_cmd import package_cmd
from plugin_registry.cli.commands.publish_cmd import publish_cmd
from plugin_registry.core.context import create_context

CONTEXT_SETTINGS = dict(help_option_names=["-h", "--help"])  # terse help flags


def configure_logging(debug: bool) -> None:
    if debug:
        logging.basicConfig(level=logging.DEBUG, format="[DEBUG %(name)s:%(lineno)d] %(message)s")
    else:
        logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")


@click.group(context_settings=CONTEXT_SETTINGS)
@click.version_option(package_name="plugin-registry")
@click.option("--debug", is_flag=True, help="Show debug logging")
@click.option("--dry-run", is_flag=True, help="Read the registry but skip every write to it")
@click.option("-q", "--quiet", is_flag=True, help="Only show errors")
@click.pass_context
def cli(ctx: click.Context, debug: bool, dry_run: bool, quiet: bool) -> None:
    """Package plugins and publish them to the plugin registry."""
    configure_logging(debug)
    # Only create context if not already provided (e.g., by tests)
    if ctx.obj is None:
        ctx.obj = create_context(dry_run=dry_run, quiet=quiet)


cli.add_command(index_cmd)
cli.add_command(package_cmd)
cli.add_command(publish_cmd)


def main() -> None:
    """CLI entry point used by the `plugin-registry` console script."""
    cli()
