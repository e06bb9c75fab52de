"""CLI error handling utilities with styled output.

All errors use a red "Error:" prefix for visual consistency.
"""

from typing import TypeVar

import click

from plugin_registry.cli.output import user_output

T = TypeVar("T")


class Ensure:
    """Helper class for asserting invariants with consistent error handling."""

    @staticmethod
    def invariant(condition: bool, error_message: str) -> None:
        """Ensure condition is true, otherwise output styled error and exit.

        Raises:
            SystemExit: If condition is false (with exit code 1)
        """
        if not condition:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)

    @staticmethod
    def truthy(value: T, error_message: str) -> T:
        """Ensure value is truthy, otherwise output styled error and exit.

        Returns:
            The value unchanged if truthy

        Raises:
            SystemExit: If value is falsy (with exit code 1)
        """
        if not value:
            user_output(click.style("Error: ", fg="red") + error_message)
            raise SystemExit(1)
        return value
