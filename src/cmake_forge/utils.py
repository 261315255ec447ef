"""
General utility functions for cmake-forge.

Provides the logger factory used across modules (which makes sure logging is
configured before the first record is emitted) and a small helper for
running cleanup callables whose failure must not mask the primary error.
"""

import logging
import pathlib
from typing import Any, Callable, TypeVar

from cmake_forge import config

T = TypeVar("T")


def logger(name: str | None = None, validate_name: bool = True) -> logging.Logger:
    """
    Get a configured logger instance.

    Args:
        name: Name of the logger. Defaults to the application name.
              File paths (as passed via ``__file__``) are reduced to their stem.
        validate_name: Whether to validate and potentially shorten the logger name.

    Returns:
        A configured logging.Logger instance.
    """
    config.init()
    if not name:
        name = config.APP_NAME
    elif validate_name:
        name_file = run_catching(pathlib.Path, name)
        if name_file and name_file.suffix == ".py":
            name = name_file.stem
    return logging.getLogger(name)


def _logger():
    return logger("utils", validate_name=False)


def _run_catching_handler(e: Exception, message: str = None) -> T:
    """Default handler for run_catching that logs errors at DEBUG level."""
    _logger().debug("%s: %s", message or "Exception suppressed", e)
    return None


def run_catching(
    fn: Callable[..., T],
    *args: Any,
    exception_handler: Callable[[Exception], T] | None = _run_catching_handler,
    **kwargs: Any,
) -> T:
    """
    Execute a function and catch exceptions with a handler.

    Used for best-effort operations such as closing pipes or removing a
    temporary file after a failed write.

    Args:
        fn: Function to call.
        *args: Positional arguments for the function.
        exception_handler: Callback to handle exceptions. Defaults to logging and returning None.
        **kwargs: Keyword arguments for the function.

    Returns:
        The function result, or the result of the exception handler on failure.
    """
    try:
        return fn(*args, **kwargs)
    except Exception as e:
        if exception_handler is not None:
            return exception_handler(e)
