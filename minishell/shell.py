"""The interactive loop: read a line, analyse it, run it."""

from __future__ import annotations

import os
import signal
import sys
from collections.abc import Sequence

from .analyser import analyse
from .builtins import ShellExit
from .environment import Environment, ShellState
from .executor import run_commands
from .parser import parse
from .syntax import ShellSyntaxError

PROMPT = "minishell[$]~>: "


def run_line(state: ShellState, line: str) -> int:
    """Run one command line against *state* and return the new exit status.

    Syntax errors are reported on standard error and give status 2; the
    exit builtin raises ShellExit.
    """
    try:
        tokens = analyse(line, state)
        if not tokens:
            return state.exit_status
        commands = parse(tokens)
    except ShellSyntaxError as exc:
        print(f"minishell: {exc.message}", file=sys.stderr)
        state.exit_status = ShellSyntaxError.exit_status
        return state.exit_status
    return run_commands(state, commands)


def _ignore_quit(signum: int, frame: object) -> None:
    """Swallow SIGQUIT at the prompt; children get the default action."""


def _loop(state: ShellState) -> int:
    while True:
        try:
            line = input(PROMPT)
        except EOFError:
            return state.exit_status
        except KeyboardInterrupt:
            print()
            state.exit_status = 1
            continue
        if not line:
            continue
        try:
            run_line(state, line)
        except ShellExit as exc:
            return exc.status


def main(argv: Sequence[str] | None = None) -> int:
    """Start the interactive shell; return the status it ends with."""
    args = sys.argv[1:] if argv is None else list(argv)
    if args:
        return 1
    try:
        import readline  # noqa: F401  (line editing and history for input())
    except ImportError:
        pass
    state = ShellState(Environment(os.environ))
    quit_signal = getattr(signal, "SIGQUIT", None)
    previous = signal.signal(quit_signal, _ignore_quit) if quit_signal else None
    try:
        return _loop(state)
    finally:
        if quit_signal and previous is not None:
            signal.signal(quit_signal, previous)