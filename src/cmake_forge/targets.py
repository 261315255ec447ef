"""
Selection of the current target.

One name, ``current_build_target``, selects the entry used from each of the
configure, build and run catalogs. ``build_targets`` is the ordered list of
names offered when the selection is changed.
"""

from os import PathLike

import typer

from cmake_forge import prompt, store
from cmake_forge.errors import SelectionError
from cmake_forge.models import Document
from cmake_forge.utils import logger

LOG = logger(__file__)


def select(path: PathLike | str, document: Document, index: int) -> Document:
    """
    Make ``build_targets[index]`` the current target and persist the document.

    The document is left unchanged if the index is out of range.

    Raises:
        SelectionError: If ``index`` is not a valid position in ``build_targets``.
    """
    if index < 0 or index >= len(document.build_targets):
        raise SelectionError("Invalid index")
    document.current_build_target = document.build_targets[index]
    store.save(path, document)
    LOG.info("Selected build target: %s", document.current_build_target)
    return document


def parse_index(text: str) -> int:
    """Parse a zero-based index typed by the user."""
    try:
        index = int(text.strip())
    except ValueError:
        raise SelectionError("Invalid input") from None
    if index < 0:
        raise SelectionError("Invalid input")
    return index


def select_interactive(
    path: PathLike | str, reader: prompt.LineReader | None = None
) -> Document:
    """
    List the selectable targets, read an index and select it.

    A bad answer ends the operation; there is no re-prompt.
    """
    document = store.load(path)
    LOG.info("Current build target: %s", document.current_build_target)
    for i, target in enumerate(document.build_targets):
        typer.echo(f"{i}: {target}")
    typer.echo("Enter the index of the build target you want to select:")
    index = parse_index((reader or prompt.read_line)())
    return select(path, document, index)
