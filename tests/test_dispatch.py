import logging

import pytest

from cmake_forge import dispatch, store
from cmake_forge.errors import (
    BuildFailedError,
    CommandError,
    DocumentNotFoundError,
    TargetNotFoundError,
)
from cmake_forge.models import BuildSpec, ConfigureSpec, RunSpec

from conftest import RecordingRunner, python_spec


@pytest.fixture
def saved(paths, document):
    store.save(paths.document, document)
    return paths


def test_run_builds_first_when_pre_build(saved, recording_runner):
    dispatch.run(saved.document, saved.workspace, runner=recording_runner)
    assert recording_runner.calls == [
        (str(saved.workspace), "cmake", ["--build", "."]),
        (str(saved.workspace), "./app", []),
    ]


def test_failed_pre_build_prevents_run(saved):
    runner = RecordingRunner(fail_on={"cmake": 2})
    with pytest.raises(
        BuildFailedError, match="Build failed for t1: Command failed with status: 2"
    ) as exc_info:
        dispatch.run(saved.document, saved.workspace, runner=runner)
    assert exc_info.value.returncode == 2
    assert [call[1] for call in runner.calls] == ["cmake"]


def test_failed_run_command_is_not_a_build_failure(saved):
    runner = RecordingRunner(fail_on={"./app": 1})
    with pytest.raises(CommandError) as exc_info:
        dispatch.run(saved.document, saved.workspace, runner=runner)
    assert not isinstance(exc_info.value, BuildFailedError)


def test_run_without_pre_build_skips_build(saved, document, recording_runner):
    document.runs = [RunSpec(name="t1", command="./app", args=["-v"], pre_build=False)]
    store.save(saved.document, document)
    dispatch.run(saved.document, saved.workspace, runner=recording_runner)
    assert recording_runner.calls == [(str(saved.workspace), "./app", ["-v"])]


def test_run_pre_build_without_build_entry_fails_before_running(
    saved, document, recording_runner
):
    document.builds = []
    store.save(saved.document, document)
    with pytest.raises(TargetNotFoundError, match="Build target not found: t1"):
        dispatch.run(saved.document, saved.workspace, runner=recording_runner)
    assert recording_runner.calls == []


def test_configure_missing_target_spawns_nothing(saved, recording_runner):
    with pytest.raises(TargetNotFoundError, match="Configure target not found: t1"):
        dispatch.configure(saved.document, saved.workspace, runner=recording_runner)
    assert recording_runner.calls == []


def test_configure_uses_current_target(saved, document, recording_runner):
    document.current_build_target = "t2"
    store.save(saved.document, document)
    dispatch.configure(saved.document, saved.workspace, runner=recording_runner)
    assert recording_runner.calls == [
        (str(saved.workspace), "cmake", ["-G", "Ninja"])
    ]


def test_build_missing_target(saved, document, recording_runner):
    document.current_build_target = "t2"
    store.save(saved.document, document)
    with pytest.raises(TargetNotFoundError) as exc_info:
        dispatch.build(saved.document, saved.workspace, runner=recording_runner)
    assert exc_info.value.kind == "build"
    assert exc_info.value.name == "t2"


def test_run_missing_target(saved, document, recording_runner):
    document.runs = []
    store.save(saved.document, document)
    with pytest.raises(TargetNotFoundError, match="Run target not found: t1"):
        dispatch.run(saved.document, saved.workspace, runner=recording_runner)


def test_build_uses_first_duplicate(saved, document, recording_runner):
    document.builds = [
        BuildSpec(name="t1", command="first", args=[]),
        BuildSpec(name="t1", command="second", args=[]),
    ]
    store.save(saved.document, document)
    dispatch.build(saved.document, saved.workspace, runner=recording_runner)
    assert [call[1] for call in recording_runner.calls] == ["first"]


def test_operations_need_a_document(paths, recording_runner):
    for operation in (dispatch.configure, dispatch.build, dispatch.run):
        with pytest.raises(DocumentNotFoundError):
            operation(paths.document, paths.workspace, runner=recording_runner)
    assert recording_runner.calls == []


def test_unlisted_current_target_warns_and_dispatches(
    saved, document, recording_runner, caplog
):
    document.build_targets = ["t2"]
    store.save(saved.document, document)
    with caplog.at_level(logging.WARNING):
        dispatch.build(saved.document, saved.workspace, runner=recording_runner)
    assert "not listed in build_targets" in caplog.text
    assert len(recording_runner.calls) == 1


def test_dispatch_does_not_rewrite_document(saved, recording_runner):
    before = saved.document.read_bytes()
    dispatch.run(saved.document, saved.workspace, runner=recording_runner)
    assert saved.document.read_bytes() == before


def test_run_with_real_processes(paths, document, capfd):
    marker = paths.workspace / "built.txt"
    document.builds = [
        python_spec(BuildSpec, "t1", f"open({str(marker)!r}, 'w').write('ok')")
    ]
    document.runs = [
        python_spec(
            RunSpec,
            "t1",
            f"print(open({str(marker)!r}).read())",
            pre_build=True,
        )
    ]
    document.configurations = [python_spec(ConfigureSpec, "t1", "pass")]
    store.save(paths.document, document)
    dispatch.run(paths.document, paths.workspace)
    assert "ok" in capfd.readouterr().out


def test_real_build_failure_stops_run(paths, document, capfd):
    document.builds = [python_spec(BuildSpec, "t1", "import sys; sys.exit(4)")]
    document.runs = [python_spec(RunSpec, "t1", "print('ran')", pre_build=True)]
    store.save(paths.document, document)
    with pytest.raises(CommandError) as exc_info:
        dispatch.run(paths.document, paths.workspace)
    assert exc_info.value.returncode == 4
    assert "ran" not in capfd.readouterr().out


def test_init_delegates_to_store(paths):
    assert dispatch.init(paths.document, paths.workspace) is True
    assert dispatch.init(paths.document, paths.workspace, reader=lambda: "") is False


def test_select_current_build_persists(saved):
    dispatch.select_current_build(saved.document, reader=lambda: "1")
    assert store.load(saved.document).current_build_target == "t2"
