"""
Interactive input for cmake-forge.

Operations that ask the user something take a ``LineReader``: a callable that
returns one raw line of input. The default reads from whatever ``sys.stdin``
is at call time, so tests can pass a plain function or drive the CLI with
typer's CliRunner.
"""

import sys
from typing import Callable

import typer

LineReader = Callable[[], str]

_YES = ("y", "yes")


def read_line() -> str:
    """Read one line from stdin without the trailing newline; EOF reads as ''."""
    return sys.stdin.readline().rstrip("\r\n")


def confirm(question: str, reader: LineReader | None = None) -> bool:
    """
    Ask a yes/no question, defaulting to no.

    Only ``y`` or ``yes`` (any case, surrounding whitespace ignored) confirm.
    """
    typer.echo(question)
    answer = (reader or read_line)()
    return answer.strip().lower() in _YES
