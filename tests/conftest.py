import pathlib
import sys

import pytest

from cmake_forge import store
from cmake_forge.models import BuildSpec, ConfigureSpec, Document, RunSpec


@pytest.fixture
def home(tmp_path, monkeypatch) -> pathlib.Path:
    home_dir = tmp_path / "home"
    home_dir.mkdir()
    monkeypatch.setenv("HOME", str(home_dir))
    return home_dir


@pytest.fixture
def workspace(tmp_path, monkeypatch) -> pathlib.Path:
    ws = tmp_path / "demo-project"
    ws.mkdir()
    monkeypatch.chdir(ws)
    return ws


@pytest.fixture
def paths(home, workspace) -> store.Paths:
    return store.resolve_paths(workspace)


def python_spec(cls, name: str, code: str, **kwargs):
    return cls(name=name, command=sys.executable, args=["-c", code], **kwargs)


@pytest.fixture
def document(workspace) -> Document:
    return Document(
        workspace=str(workspace),
        build_targets=["t1", "t2"],
        current_build_target="t1",
        builds=[BuildSpec(name="t1", command="cmake", args=["--build", "."])],
        runs=[RunSpec(name="t1", command="./app", args=[], pre_build=True)],
        configurations=[
            ConfigureSpec(name="t2", command="cmake", args=["-G", "Ninja"])
        ],
    )


class RecordingRunner:
    """Runner that records invocations and fails for chosen commands."""

    def __init__(self, fail_on: dict[str, int] | None = None):
        self.calls: list[tuple[str, str, list[str]]] = []
        self.fail_on = fail_on or {}

    def __call__(self, cwd, command, args):
        from cmake_forge.errors import CommandError

        self.calls.append((str(cwd), command, list(args)))
        if command in self.fail_on:
            raise CommandError(command, args, returncode=self.fail_on[command])


@pytest.fixture
def recording_runner() -> RecordingRunner:
    return RecordingRunner()
