"""
Command runner for configure, build and run targets.

Spawns an external command in the workspace directory and forwards its
output line by line: child stdout to the caller's stdout, child stderr to the
caller's stderr. Both pipes are drained at the same time (stderr on a helper
thread) so a child that fills one pipe while the other is being read cannot
block forever.
"""

import os
import subprocess
import sys
import threading
from collections import deque
from os import PathLike
from typing import Callable, Sequence, TextIO

from cmake_forge.errors import CommandError
from cmake_forge.utils import logger, run_catching

LOG = logger(__file__)

Runner = Callable[[PathLike | str, str, Sequence[str]], None]


def run(
    cwd: PathLike | str,
    command: str,
    args: Sequence[str],
    stdout: TextIO | None = None,
    stderr: TextIO | None = None,
) -> None:
    """
    Execute a command and wait for it to exit.

    Args:
        cwd: Working directory of the child process.
        command: Executable path or name. It is not split on whitespace.
        args: Arguments passed to the executable.
        stdout: Stream that receives the child's stdout lines. Defaults to sys.stdout.
        stderr: Stream that receives the child's stderr lines. Defaults to sys.stderr.

    Raises:
        CommandError: If the command cannot be started or exits with a non-zero status.
    """
    stdout = sys.stdout if stdout is None else stdout
    stderr = sys.stderr if stderr is None else stderr
    process_args = [command, *(os.fspath(arg) for arg in args)]
    LOG.debug("Executing command - cwd:%s args:%s", cwd, process_args)
    try:
        proc = subprocess.Popen(
            process_args,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            errors="replace",
            bufsize=1,
        )
    except OSError as e:
        raise CommandError(command, args, reason=str(e)) from e

    thread_errors: list[Exception] = []
    thread = threading.Thread(
        target=_drain_stream,
        args=(proc.stderr, stderr, thread_errors),
        daemon=True,
    )
    thread.start()
    completed = False
    try:
        _forward_stream(proc.stdout, stdout)
        completed = True
    finally:
        run_catching(proc.stdout.close)
        if not completed:
            # stdout is no longer read; stop the child so stderr reaches EOF
            run_catching(proc.kill)
        thread.join()
        run_catching(proc.stderr.close)
        ret = proc.wait()
    LOG.debug("Command exited - args:%s status:%s", process_args, ret)
    if thread_errors:
        raise thread_errors[0]
    if ret != 0:
        raise CommandError(command, args, returncode=ret)


def _drain_stream(in_stream: TextIO, out_stream: TextIO, errors: list[Exception]):
    """
    Forward a child pipe on a helper thread.

    If forwarding fails the pipe is still read to EOF so the child never
    blocks on it; the failure is handed back through ``errors``.
    """
    try:
        _forward_stream(in_stream, out_stream)
    except Exception as e:
        errors.append(e)
        run_catching(deque, iter(in_stream.readline, ""), maxlen=0)


def _forward_stream(in_stream: TextIO, out_stream: TextIO):
    """Copy lines from a child pipe to an output stream until EOF."""
    for line in iter(in_stream.readline, ""):
        out_stream.write(line.rstrip("\r\n") + "\n")
        out_stream.flush()
