"""Rich summaries printed at the end of packaging and publishing runs."""

from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from plugin_registry.core.indexer import SyncResult
from plugin_registry.core.packager import PackageResult


def stderr_console() -> Console:
    return Console(stderr=True)


def format_package_summary(result: PackageResult) -> Panel:
    """Per-platform status table, with the failure cause for every failed platform."""
    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Platform")
    table.add_column("Status")
    table.add_column("Artifact / Cause", overflow="fold")

    for key, archive in sorted(result.artifacts.items()):
        table.add_row(key, Text("packaged", style="green"), str(archive.archive_path))
    for key, error in sorted(result.failures.items()):
        table.add_row(key, Text("failed", style="red"), Text(str(error), style="red"))

    descriptor = result.descriptor
    title = f"{descriptor.id} {descriptor.version}"
    if result.succeeded:
        return Panel(table, title=f"Packaged {title}", border_style="green", padding=(1, 2))
    return Panel(
        table,
        title=f"Packaging {title}: {len(result.failures)} platform(s) failed",
        border_style="red",
        padding=(1, 2),
    )


def format_sync_failures(sync: SyncResult) -> Table:
    table = Table(show_header=True, header_style="bold red", box=None, pad_edge=False)
    table.add_column("Architecture")
    table.add_column("Artifact")
    table.add_column("Cause", overflow="fold")
    for result in sync.failed:
        table.add_row(result.release.os_arch, str(result.release.path), str(result.error))
    return table
