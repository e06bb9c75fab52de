"""Output utilities for CLI commands with clear intent."""

import click


def user_output(message: str = "", nl: bool = True) -> None:
    """Write user-facing diagnostics to stderr, keeping stdout for machine output."""
    click.echo(message, err=True, nl=nl)


def machine_output(message: str = "") -> None:
    """Write machine-readable results (e.g. published keys) to stdout."""
    click.echo(message)
