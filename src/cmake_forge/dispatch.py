"""
Operations behind the cmake-forge subcommands.

Every operation loads the workspace document, looks the current target up in
the catalog it needs and hands the entry to the command runner. Only target
selection writes the document back.
"""

from os import PathLike
from typing import Iterable

from cmake_forge import process, store, targets
from cmake_forge.errors import BuildFailedError, CommandError, TargetNotFoundError
from cmake_forge.models import CommandSpec, Document, S, find_by_name
from cmake_forge.prompt import LineReader
from cmake_forge.process import Runner
from cmake_forge.utils import logger

LOG = logger(__file__)


def _current(document: Document, label: str) -> str:
    name = document.current_build_target
    LOG.info("Current %s target: %s", label, name)
    if name not in document.build_targets:
        LOG.warning(
            "Current target is not listed in build_targets - target:%s build_targets:%s",
            name,
            document.build_targets,
        )
    return name


def _lookup(catalog: Iterable[S], kind: str, name: str) -> S:
    entry = find_by_name(catalog, name)
    if entry is None:
        raise TargetNotFoundError(kind, name)
    return entry


def _execute(workspace: PathLike | str, spec: CommandSpec, runner: Runner | None):
    (runner or process.run)(workspace, spec.command, spec.args)


def configure(
    path: PathLike | str, workspace: PathLike | str, runner: Runner | None = None
):
    """Run the configure command of the current target."""
    document = store.load(path)
    name = _current(document, "build")
    spec = _lookup(document.configurations, "configure", name)
    LOG.info("Configuring %s", spec.name)
    _execute(workspace, spec, runner)


def build(
    path: PathLike | str, workspace: PathLike | str, runner: Runner | None = None
):
    """Run the build command of the current target."""
    document = store.load(path)
    name = _current(document, "build")
    spec = _lookup(document.builds, "build", name)
    LOG.info("Building %s", spec.name)
    _execute(workspace, spec, runner)


def run(path: PathLike | str, workspace: PathLike | str, runner: Runner | None = None):
    """
    Run the run command of the current target.

    When the entry has ``pre_build`` set, the target is built first and a
    failed build stops the run.
    """
    document = store.load(path)
    name = _current(document, "run")
    spec = _lookup(document.runs, "run", name)
    if spec.pre_build:
        try:
            build(path, workspace, runner=runner)
        except CommandError as e:
            raise BuildFailedError(name, e) from e
    LOG.info("Running %s", spec.name)
    _execute(workspace, spec, runner)


def select_current_build(
    path: PathLike | str, reader: LineReader | None = None
) -> Document:
    """Interactively change the current target."""
    return targets.select_interactive(path, reader=reader)


def init(
    path: PathLike | str,
    workspace: PathLike | str,
    reader: LineReader | None = None,
) -> bool:
    """Write the starter document, asking before overwriting an existing one."""
    return store.initialize(path, workspace, reader=reader)
