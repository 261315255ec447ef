import functools
import logging
import os
import sys
from typing import Callable, TextIO

"""
Configuration and logging initialization for cmake-forge.

Holds the application constants that determine where the per-workspace
document lives, and sets up logging so that INFO status lines reach stdout
unadorned while every other level goes to stderr with source details.
"""

APP_NAME = "CMakeForge"
VERSION = "0.2"
CACHE_DIR_NAME = ".cache"
DOCUMENT_SUFFIX = ".json"
HOME_ENV = "HOME"
LOG_LEVEL_ENV = "LOG_LEVEL"


@functools.cache
def init():
    """
    Initialize the logging configuration for the application.

    Handlers are split between stdout (INFO only, message text) and stderr
    (all other levels, timestamped). The LOG_LEVEL environment variable
    selects the global level, defaulting to INFO.
    """
    date_format = "%Y-%m-%d %H:%M:%S"
    format_stdout = "%(message)s"
    format_stderr = (
        "%(asctime)s.%(msecs)03d | %(levelname)s | %(name)s:%(lineno)d - %(message)s"
    )
    log_level_env = os.getenv(LOG_LEVEL_ENV, "").upper()
    log_level = logging.getLevelNamesMapping().get(log_level_env, logging.INFO)

    def _create_handler(
        stream: TextIO,
        level: int,
        format: str,
        filter_fn: Callable[[logging.LogRecord], bool] | None = None,
    ) -> logging.Handler:
        handler = _StdStreamHandler(stream)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(format, datefmt=date_format))
        if filter_fn is not None:
            handler.addFilter(filter_fn)
        return handler

    handlers = [
        _create_handler(
            sys.stdout,
            logging.INFO,
            format_stdout,
            lambda record: record.levelno == logging.INFO,
        ),
        _create_handler(
            sys.stderr,
            logging.DEBUG,
            format_stderr,
            lambda record: record.levelno != logging.INFO,
        ),
    ]

    logging.basicConfig(
        level=log_level,
        datefmt=date_format,
        handlers=handlers,
        force=True,
    )


class _StdStreamHandler(logging.StreamHandler):
    """
    Stream handler that resolves sys.stdout / sys.stderr on every emit.

    Test runners and CliRunner swap the standard streams after logging has
    been configured; looking the stream up by name keeps output flowing to
    whichever stream is current.
    """

    def __init__(self, stream: TextIO):
        self._stream_name: str | None = None
        self._stream: TextIO | None = None
        super().__init__(stream)

    @property
    def stream(self) -> TextIO:
        if self._stream_name is not None:
            return getattr(sys, self._stream_name)
        return self._stream

    @stream.setter
    def stream(self, value: TextIO):
        if value is sys.stdout:
            self._stream_name = "stdout"
        elif value is sys.stderr:
            self._stream_name = "stderr"
        else:
            self._stream_name = None
        self._stream = value
