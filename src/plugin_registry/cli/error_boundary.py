"""Error boundary handling for CLI commands.

Catches well-known exceptions at CLI entry points and displays clean error
messages without stack traces.
"""

import functools
import logging
from collections.abc import Callable
from typing import Any, TypeVar

import click

from plugin_registry.cli.output import user_output
from plugin_registry.core.errors import RegistryError, UploadUnconfirmedError
from plugin_registry.integrations.object_store.types import ObjectStoreError

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=Callable[..., Any])


def _fail(message: str) -> None:
    user_output(click.style("Error: ", fg="red") + message)


def cli_error_boundary(func: T) -> T:
    """Decorator that catches well-known exceptions and displays clean error messages.

    Catches:
        - RegistryError: Pipeline failures (descriptor, build, archive, upload, catalog)
        - ObjectStoreError: Store failures outside the pipeline, e.g. missing AWS setup
        - FileNotFoundError: Missing files/directories
        - ValueError: Invalid input or configuration
        - PermissionError: Permission denied errors
        - KeyboardInterrupt: Exits with 130

    All other exceptions bubble up normally with full stack traces.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return func(*args, **kwargs)
        except UploadUnconfirmedError as e:
            _fail(str(e))
            user_output(f"  The object at {e.key} may exist; check the bucket before re-running.")
            raise SystemExit(1) from None
        except (
            RegistryError, ObjectStoreError, FileNotFoundError, ValueError, PermissionError
        ) as e:
            logger.debug("command failed", exc_info=True)
            _fail(str(e))
            raise SystemExit(1) from None
        except KeyboardInterrupt:
            user_output("\n✗ Interrupted by user")
            raise SystemExit(130) from None

    return wrapper  # type: ignore[return-value]
