"""User-facing diagnostic output with mode awareness."""

from abc import ABC, abstractmethod

import click

from plugin_registry.cli.output import user_output


class UserFeedback(ABC):
    """Provides user-facing diagnostic output that's mode-aware.

    Pipeline components report progress through ctx.feedback instead of
    printing directly, so quiet mode and tests need no special casing.

    Mode behavior:
        Interactive mode:
            - info() -> stderr
            - success() -> stderr, green
            - error() -> stderr, red

        Quiet mode:
            - info() and success() are suppressed
            - error() still outputs to stderr in red
    """

    @abstractmethod
    def info(self, message: str) -> None:
        """Show informational message (suppressed in quiet mode)."""

    @abstractmethod
    def success(self, message: str) -> None:
        """Show success message (suppressed in quiet mode)."""

    @abstractmethod
    def error(self, message: str) -> None:
        """Show error message (always shown)."""


class InteractiveFeedback(UserFeedback):
    """Feedback shown in interactive mode (all messages)."""

    def info(self, message: str) -> None:
        user_output(message)

    def success(self, message: str) -> None:
        user_output(click.style(message, fg="green"))

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))


class SuppressedFeedback(UserFeedback):
    """Feedback for quiet mode (only errors shown)."""

    def info(self, message: str) -> None:
        pass

    def success(self, message: str) -> None:
        pass

    def error(self, message: str) -> None:
        user_output(click.style(message, fg="red"))


class FakeUserFeedback(UserFeedback):
    """Records messages for test assertions instead of printing them."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def info(self, message: str) -> None:
        self.messages.append(f"INFO: {message}")

    def success(self, message: str) -> None:
        self.messages.append(f"SUCCESS: {message}")

    def error(self, message: str) -> None:
        self.messages.append(f"ERROR: {message}")
