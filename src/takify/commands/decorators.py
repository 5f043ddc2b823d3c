"""Decorators for command functions."""

import asyncio
import functools
import inspect
import time
import traceback
from collections.abc import Callable

import typer

from takify.models import SessionRequiredError, TakifyError
from takify.services.app_context import get_app_context
from takify.utils.exit_codes import ERROR_GENERAL, ERROR_NETWORK, exit_code_for
from takify.utils.logger import get_logger
from takify.utils.ui.formatters import format_error


def _require_auth() -> None:
    """Require user to be authenticated."""
    if not get_app_context().auth_service.is_authenticated():
        raise SessionRequiredError("Not logged in. Use 'takify login' to authenticate.")


async def _run_async(func: Callable, args, kwargs):
    try:
        return await func(*args, **kwargs)
    finally:
        await get_app_context().close()


def command_wrapper(_func: Callable | None = None, *, auth_required: bool = True):
    """Decorator to wrap command functions with common functionality."""

    def decorator(func: Callable):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger()
            cmd = func.__name__
            start = time.monotonic()
            logger.info("command started: %s", cmd)
            try:
                # 1. Handle Auth
                if auth_required:
                    _require_auth()

                # 2. Run Sync or Async
                if inspect.iscoroutinefunction(func):
                    result = asyncio.run(_run_async(func, args, kwargs))
                else:
                    result = func(*args, **kwargs)

                elapsed = time.monotonic() - start
                logger.info("command completed: %s (%.3fs)", cmd, elapsed)
                return result

            except TakifyError as e:
                elapsed = time.monotonic() - start
                logger.error("command failed: %s (%.3fs) - %s", cmd, elapsed, str(e))
                format_error(str(e))
                raise typer.Exit(code=exit_code_for(e)) from e

            except TimeoutError as e:
                elapsed = time.monotonic() - start
                logger.error("command timed out: %s (%.3fs)", cmd, elapsed)
                format_error("Timed out waiting for the server")
                raise typer.Exit(code=ERROR_NETWORK) from e

            except typer.Exit:
                # Re-raise Typer's own exits (like --help or explicit Exit(0))
                raise

            except Exception as e:
                elapsed = time.monotonic() - start
                logger.error(
                    "command failed: %s (%.3fs) - %s\n%s",
                    cmd,
                    elapsed,
                    str(e),
                    traceback.format_exc(),
                )
                # Generic fallback for unexpected crashes
                format_error(f"An unexpected error occurred: {str(e)}")
                raise typer.Exit(code=ERROR_GENERAL) from e

        return wrapper

    if _func is None:
        return decorator
    return decorator(_func)
