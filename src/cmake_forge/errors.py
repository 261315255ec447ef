"""
Exception types used across cmake-forge.

The CLI reports any CMakeForgeError as a one-line message and exits with a
failure status; other exceptions are treated as bugs and propagate.
"""

from __future__ import annotations

from typing import Sequence


class CMakeForgeError(Exception):
    """Base class for all cmake-forge specific errors."""


class EnvironmentConfigError(CMakeForgeError):
    """Raised when the home directory, cache directory or project name is unusable."""


class DocumentNotFoundError(CMakeForgeError):
    """Raised when an operation needs the workspace document and it does not exist."""


class DocumentValidationError(CMakeForgeError):
    """Raised when the workspace document is not valid JSON or does not match the schema."""


class TargetNotFoundError(CMakeForgeError):
    """Raised when the current target has no entry in the catalog being used."""

    def __init__(self, kind: str, name: str):
        self.kind = kind
        self.name = name
        super().__init__(f"{kind.capitalize()} target not found: {name}")


class SelectionError(CMakeForgeError):
    """Raised when an interactive target selection is not a valid index."""


class CommandError(CMakeForgeError):
    """Raised when a command cannot be started or exits with a non-zero status."""

    def __init__(
        self,
        command: str,
        args: Sequence[str],
        returncode: int | None = None,
        reason: str | None = None,
        message: str | None = None,
    ):
        self.command = command
        self.args_list = list(args)
        self.returncode = returncode
        self.reason = reason
        if message is None and returncode is None:
            message = f"Failed to start command {command!r}: {reason}"
        elif message is None:
            message = f"Command failed with status: {returncode}"
        super().__init__(message)


class BuildFailedError(CommandError):
    """Raised when the build that precedes a run fails."""

    def __init__(self, name: str, cause: CommandError):
        self.name = name
        super().__init__(
            cause.command,
            cause.args_list,
            returncode=cause.returncode,
            reason=cause.reason,
            message=f"Build failed for {name}: {cause}",
        )
