"""
Persistence of the per-workspace configuration document.

The document for a workspace lives at ``$HOME/.cache/CMakeForge/<name>.json``
where ``<name>`` is the base name of the workspace directory. This module
resolves that location, loads and validates the document, writes it back
pretty-printed, and scaffolds a starter document on ``init``.
"""

import os
import pathlib
import stat
from dataclasses import dataclass
from os import PathLike
from tempfile import NamedTemporaryFile

from pydantic import ValidationError

from cmake_forge import config, prompt
from cmake_forge.errors import (
    DocumentNotFoundError,
    DocumentValidationError,
    EnvironmentConfigError,
)
from cmake_forge.models import BuildSpec, ConfigureSpec, Document, RunSpec
from cmake_forge.utils import logger, run_catching

LOG = logger(__file__)


@dataclass(frozen=True)
class Paths:
    """
    Locations used by a single invocation.

    Attributes:
        workspace: Directory commands run in
        cache_dir: Directory holding all workspace documents
        document: JSON document for this workspace
    """

    workspace: pathlib.Path
    cache_dir: pathlib.Path
    document: pathlib.Path


def home_dir() -> pathlib.Path:
    """Return the user's home directory from the environment, which must exist."""
    home = os.environ.get(config.HOME_ENV)
    if not home:
        raise EnvironmentConfigError(
            f"{config.HOME_ENV} environment variable not found."
        )
    path = pathlib.Path(home)
    if not path.is_dir():
        raise EnvironmentConfigError(f"{config.HOME_ENV} directory does not exist.")
    return path


def resolve_paths(workspace: PathLike | str | None = None) -> Paths:
    """
    Resolve the workspace, cache directory and document path.

    The cache directory is created if it is missing.

    Args:
        workspace: Workspace directory. Defaults to the current working directory.
    """
    workspace = pathlib.Path(workspace or pathlib.Path.cwd()).absolute()
    LOG.debug("Executable Path: %s", workspace)
    cache_dir = home_dir() / config.CACHE_DIR_NAME / config.APP_NAME
    if not cache_dir.exists():
        try:
            cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise EnvironmentConfigError(f"Failed to create directory: {e}") from e
        LOG.info("Directory created: %s", cache_dir)
    if not workspace.name:
        raise EnvironmentConfigError("Failed to deduce project name.")
    document = cache_dir / f"{workspace.name}{config.DOCUMENT_SUFFIX}"
    return Paths(workspace=workspace, cache_dir=cache_dir, document=document)


def resolve_path(workspace: PathLike | str | None = None) -> pathlib.Path:
    return resolve_paths(workspace).document


def load(path: PathLike | str) -> Document:
    """
    Read and validate a document.

    Raises:
        DocumentNotFoundError: If the file does not exist.
        DocumentValidationError: If the file cannot be read or is not a valid document.
    """
    path = pathlib.Path(path)
    try:
        content = path.read_bytes()
    except FileNotFoundError as e:
        raise DocumentNotFoundError(f"Json file does not exist: {path}") from e
    except OSError as e:
        raise DocumentValidationError(f"Cannot read json file {path}: {e}") from e
    try:
        return Document.model_validate_json(content)
    except ValidationError as e:
        raise DocumentValidationError(f"Invalid json file {path}: {e}") from e


def save(path: PathLike | str, document: Document):
    """
    Write a document pretty-printed, replacing any existing file.

    The content is written to a temporary file beside the target and then
    moved into place.
    """
    path = pathlib.Path(path)
    LOG.debug("Persisting: %s", path)
    with NamedTemporaryFile(
        "w",
        encoding="utf-8",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    ) as f:
        temp_path = pathlib.Path(f.name)
        f.write(document.model_dump_json(indent=2))
    try:
        os.chmod(temp_path, _file_mode(path))
        os.replace(temp_path, path)
    except OSError:
        run_catching(temp_path.unlink)
        raise


def _file_mode(path: pathlib.Path) -> int:
    """Mode for a saved document: the existing file's, else the umask default."""
    try:
        return stat.S_IMODE(path.stat().st_mode)
    except FileNotFoundError:
        umask = os.umask(0)
        os.umask(umask)
        return 0o666 & ~umask


def default_document(workspace: PathLike | str) -> Document:
    """Starter document written by ``init``; meant to be edited by the user."""
    return Document(
        workspace=str(workspace),
        build_targets=["test1", "test2"],
        current_build_target="test1",
        builds=[
            BuildSpec(
                name="test1",
                command="cmake",
                args=["--build", "build"],
            )
        ],
        runs=[
            RunSpec(
                name="test1",
                command="/my/super/app",
                args=["--arg1", "--arg2"],
                pre_build=True,
            ),
            RunSpec(
                name="test2",
                command="/my/super/app",
                args=["--arg1", "--arg2"],
                pre_build=True,
            ),
        ],
        configurations=[
            ConfigureSpec(
                name="test1",
                command="cmake",
                args=[
                    "-S",
                    ".",
                    "-B",
                    "build",
                    "-DCMAKE_BUILD_TYPE=Debug",
                    "-DCMAKE_EXPORT_COMPILE_COMMANDS=ON",
                    "-G",
                    "Ninja",
                ],
            )
        ],
    )


def initialize(
    path: PathLike | str,
    workspace: PathLike | str,
    reader: prompt.LineReader | None = None,
) -> bool:
    """
    Write the starter document for a workspace.

    If the file already exists the user is asked before it is overwritten;
    declining leaves the file untouched.

    Returns:
        True if the document was written, False if the user declined.
    """
    path = pathlib.Path(path)
    if path.exists() and not prompt.confirm(
        "File already exists. Do you want to overwrite it?[y/n](Empty 'no')",
        reader=reader,
    ):
        LOG.debug("Overwrite declined: %s", path)
        return False
    LOG.info("Creating json file config for cmake in: %s", path)
    save(path, default_document(workspace))
    return True
