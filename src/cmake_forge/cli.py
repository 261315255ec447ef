"""
Main entry point for the cmake-forge CLI.

The CLI resolves the workspace (the current directory) and its cached JSON
document, then runs one of:
- init: create the starter document for this workspace
- configure: run the configure command of the current target
- select-current-build: choose the current target interactively
- build: run the build command of the current target
- run: run the run command of the current target, building first if asked
"""

import contextlib
from typing import Annotated, Iterator

import typer

from cmake_forge import config, dispatch, store
from cmake_forge.errors import CMakeForgeError
from cmake_forge.store import Paths
from cmake_forge.utils import logger

LOG = logger(__file__)

app = typer.Typer(
    name=config.APP_NAME,
    help="A simple CLI for build management.",
    no_args_is_help=True,
    add_completion=False,
    pretty_exceptions_enable=False,
)


def _version_callback(value: bool):
    if value:
        typer.echo(f"{config.APP_NAME} {config.VERSION}")
        raise typer.Exit()


@app.callback()
def callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = False,
):
    """
    Manage configure, build and run targets for the current workspace.
    """


@contextlib.contextmanager
def _reported() -> Iterator[None]:
    """Turn cmake-forge errors into a logged message and a failing exit status."""
    try:
        yield
    except CMakeForgeError as e:
        LOG.error("error: %s", e)
        raise typer.Exit(code=1) from e
    except KeyboardInterrupt:
        raise typer.Exit(code=130) from None


def _paths() -> Paths:
    paths = store.resolve_paths()
    if paths.document.exists():
        LOG.info("Loading json: %s", paths.document)
    return paths


@app.command()
def init():
    """Initialize the project."""
    with _reported():
        paths = _paths()
        dispatch.init(paths.document, paths.workspace)


@app.command()
def configure():
    """Call the configure command."""
    with _reported():
        paths = _paths()
        dispatch.configure(paths.document, paths.workspace)


@app.command(name="select-current-build")
def select_current_build():
    """Select current build target."""
    with _reported():
        paths = _paths()
        dispatch.select_current_build(paths.document)


@app.command()
def build():
    """Build the current build target."""
    with _reported():
        paths = _paths()
        dispatch.build(paths.document, paths.workspace)


@app.command()
def run():
    """Run the current build target."""
    with _reported():
        paths = _paths()
        dispatch.run(paths.document, paths.workspace)


def main():
    app()


if __name__ == "__main__":
    main()
