"""Run parsed commands: builtins in the shell, other programs as child processes."""

from __future__ import annotations

import copy
import io
import os
import signal
import subprocess
import sys
import tempfile
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from typing import IO

from .builtins import ShellExit, run_builtin
from .environment import ShellState
from .parser import Command
from .redirections import ReadLine, RedirectionError, open_redirections


class CommandError(Exception):
    """A command that cannot be started; carries the status the shell reports."""

    def __init__(self, name: str, message: str, exit_status: int) -> None:
        super().__init__(f"{name}: {message}")
        self.name = name
        self.message = message
        self.exit_status = exit_status


def _report(message: str) -> None:
    print(f"minishell: {message}", file=sys.stderr)


def is_path(name: str) -> bool:
    """Return True if *name* names a file directly rather than a PATH lookup."""
    return name[:1] in ("/", ".")


def resolve_command_path(state: ShellState, name: str) -> str:
    """Return the file to run for *name*, searching PATH for bare names.

    Raises CommandError with status 127 when nothing is found and 126 when
    the file cannot be run.
    """
    if is_path(name):
        if not os.path.exists(name):
            raise CommandError(name, "No such file or directory", 127)
        if not os.access(name, os.X_OK):
            raise CommandError(name, "Permission denied", 126)
        if os.path.isdir(name):
            raise CommandError(name, "is a directory", 126)
        return name
    for directory in state.env.path_dirs():
        candidate = f"{directory}/{name}"
        if os.path.exists(candidate):
            return candidate
    raise CommandError(name, "command not found", 127)


def _status(returncode: int) -> int:
    return 128 - returncode if returncode < 0 else returncode


@contextmanager
def _ignoring_sigint() -> Iterator[None]:
    if threading.current_thread() is not threading.main_thread():
        yield
        return
    previous = signal.signal(signal.SIGINT, signal.SIG_IGN)
    try:
        yield
    finally:
        signal.signal(
            signal.SIGINT, previous if previous is not None else signal.default_int_handler
        )


def _child_env(state: ShellState) -> dict[str, str]:
    return {key: value for key, value in state.env.items() if value is not None}


def _spawn(
    state: ShellState, command: Command, path: str, stdin: object, stdout: object
) -> subprocess.Popen[bytes]:
    return subprocess.Popen(
        command.argv,
        executable=path,
        stdin=stdin,
        stdout=stdout,
        env=_child_env(state),
    )


def _bytes_stream(data: bytes) -> IO[bytes]:
    stream = tempfile.TemporaryFile()
    stream.write(data)
    stream.seek(0)
    return stream


def _close(stream: IO[bytes] | None) -> None:
    if stream is not None:
        stream.close()


def _run_single(state: ShellState, command: Command, read_line: ReadLine | None) -> None:
    try:
        opened = open_redirections(command, state, read_line)
    except RedirectionError as exc:
        _report(exc.message)
        state.exit_status = RedirectionError.exit_status
        return
    with opened:
        out = opened.stdout if opened.stdout is not None else sys.stdout
        if run_builtin(state, command, out):
            out.flush()
            return
        assert command.name is not None
        try:
            path = resolve_command_path(state, command.name)
        except CommandError as exc:
            _report(str(exc))
            state.exit_status = exc.exit_status
            return
        sys.stdout.flush()
        try:
            process = _spawn(state, command, path, opened.stdin, opened.stdout)
        except OSError as exc:
            _report(f"{command.name}: {exc.strerror or exc}")
            state.exit_status = 126
            return
        with _ignoring_sigint():
            returncode = process.wait()
        state.exit_status = _status(returncode)


def _start_stage(
    state: ShellState,
    command: Command,
    upstream: IO[bytes] | None,
    last: bool,
    read_line: ReadLine | None,
) -> tuple[IO[bytes] | None, subprocess.Popen[bytes] | int]:
    """Start one pipeline stage; return the next stage's input and a process or status."""
    empty = None if last else _bytes_stream(b"")
    child = copy.deepcopy(state)
    try:
        opened = open_redirections(command, child, read_line)
    except RedirectionError as exc:
        _report(exc.message)
        _close(upstream)
        return empty, RedirectionError.exit_status
    with opened:
        buffer = io.StringIO()
        if opened.stdout is not None:
            out = opened.stdout
        else:
            out = sys.stdout if last else buffer
        try:
            handled = run_builtin(child, command, out)
        except ShellExit as exc:
            child.exit_status = exc.status
            handled = True
        if handled:
            out.flush()
            _close(upstream)
            if empty is not None:
                empty.close()
                empty = _bytes_stream(buffer.getvalue().encode("utf-8"))
            return empty, child.exit_status
        assert command.name is not None
        try:
            path = resolve_command_path(child, command.name)
        except CommandError as exc:
            _report(str(exc))
            _close(upstream)
            return empty, exc.exit_status
        stdin = opened.stdin if opened.stdin is not None else upstream
        if opened.stdout is not None:
            stdout: object = opened.stdout
        else:
            stdout = None if last else subprocess.PIPE
        try:
            process = _spawn(child, command, path, stdin, stdout)
        except OSError as exc:
            _report(f"{command.name}: {exc.strerror or exc}")
            return empty, 126
        finally:
            _close(upstream)
    if process.stdout is not None:
        _close(empty)
        return process.stdout, process
    return empty, process


def _run_pipeline(
    state: ShellState, commands: list[Command], read_line: ReadLine | None
) -> None:
    sys.stdout.flush()
    upstream: IO[bytes] | None = None
    outcomes: list[subprocess.Popen[bytes] | int] = []
    last_index = len(commands) - 1
    for position, command in enumerate(commands):
        upstream, outcome = _start_stage(
            state, command, upstream, position == last_index, read_line
        )
        outcomes.append(outcome)
    _close(upstream)
    with _ignoring_sigint():
        for outcome in outcomes:
            if isinstance(outcome, subprocess.Popen):
                outcome.wait()
    final = outcomes[-1]
    if isinstance(final, subprocess.Popen):
        state.exit_status = _status(final.returncode)
    else:
        state.exit_status = final


def run_commands(
    state: ShellState, commands: list[Command], read_line: ReadLine | None = None
) -> int:
    """Run *commands* as a pipeline and return the resulting exit status.

    A single command runs builtins in the shell itself, so ``cd`` or
    ``export`` change the shell's state and ``exit`` raises ShellExit. In a
    pipeline every stage works on its own copy of the state.
    """
    if not commands:
        return state.exit_status
    if len(commands) == 1:
        _run_single(state, commands[0], read_line)
    else:
        _run_pipeline(state, commands, read_line)
    return state.exit_status