"""
Data model of the per-workspace configuration document.

The document holds three independent catalogs (configurations, builds and
runs) whose entries share names with one another, plus a single selector,
``current_build_target``, that is used to look an entry up in whichever
catalog an operation needs.
"""

from typing import Iterable, TypeVar

from pydantic import BaseModel, ConfigDict


class CommandSpec(BaseModel):
    """
    A named external command.

    Attributes:
        name: Target name the entry is looked up by
        command: Executable path or name (not shell-split)
        args: Arguments passed to the executable, in order
    """

    model_config = ConfigDict(strict=True)

    name: str
    command: str
    args: list[str]


class BuildSpec(CommandSpec):
    pass


class ConfigureSpec(CommandSpec):
    pass


class RunSpec(CommandSpec):
    """A run entry; ``pre_build`` requests a build of the same target first."""

    pre_build: bool


class Document(BaseModel):
    """The whole persisted state for one workspace."""

    model_config = ConfigDict(strict=True)

    workspace: str
    build_targets: list[str]
    current_build_target: str
    builds: list[BuildSpec]
    runs: list[RunSpec]
    configurations: list[ConfigureSpec]


S = TypeVar("S", bound=CommandSpec)


def find_by_name(catalog: Iterable[S], name: str) -> S | None:
    """
    Return the first entry whose name equals ``name`` exactly.

    Duplicate names are allowed; the earliest entry wins.
    """
    for entry in catalog:
        if entry.name == name:
            return entry
    return None
