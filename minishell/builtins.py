"""Commands the shell runs itself: echo, env, pwd, cd, export, unset and exit."""

from __future__ import annotations

import os
import sys
from typing import TextIO

from .environment import ShellState
from .expand import lookup_words
from .parser import Command
from .textutils import atoi, is_alnum, is_alpha, is_digit

_EXPORT_ESCAPES = str.maketrans({'"': '\\"', "$": "\\$"})


class ShellExit(Exception):
    """Raised by the exit builtin; carries the status the shell ends with."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status & 0xFF


def _error(message: str) -> None:
    print(f"minishell: {message}", file=sys.stderr)


def _cwd() -> str:
    try:
        return os.getcwd()
    except OSError:
        return ""


def is_option(arg: str) -> bool:
    """Return True for an echo option: a dash followed only by ``n``s."""
    return len(arg) > 1 and arg[0] == "-" and set(arg[1:]) == {"n"}


def is_valid_identifier(word: str) -> bool:
    """Return True if the name part of *word* (before any ``=``) is a valid name."""
    if not word or not (is_alpha(word[0]) or word[0] == "_"):
        return False
    name = word[1:].partition("=")[0]
    return all(is_alnum(char) or char == "_" for char in name)


def echo(state: ShellState, command: Command, out: TextIO) -> None:
    """Write the arguments separated by blanks; leading ``-n`` options drop the newline."""
    args = command.args
    skipped = 0
    while skipped < len(args) and is_option(args[skipped]):
        skipped += 1
    words = args[skipped:]
    # A blank goes before each following word that is not empty.
    text = "".join(
        word + (" " if following else "")
        for word, following in zip(words, words[1:] + [""])
    )
    out.write(text if skipped else text + "\n")
    state.exit_status = 0


def env_command(state: ShellState, command: Command, out: TextIO) -> None:
    """List the variables that have a value; arguments are refused."""
    if command.args:
        out.write("env: incorrect number of argumments\n")
        state.exit_status = 1
        return
    for key, value in state.env.items():
        if value is not None:
            out.write(f"{key}={value}\n")
    state.exit_status = 0


def pwd(state: ShellState, out: TextIO) -> None:
    """Write the current working directory."""
    try:
        cwd = os.getcwd()
    except OSError:
        print("minishell: pwd: failed", file=sys.stderr)
        state.exit_status = 1
        return
    out.write(cwd + "\n")
    state.exit_status = 0


def _record_move(state: ShellState, old: str) -> None:
    state.env.set_from_assignment(f"PWD={_cwd()}")
    state.env.set_from_assignment(f"OLDPWD={old}")


def _go_home(state: ShellState, old: str) -> None:
    home = lookup_words("HOME", state.env)
    if not home or not home[0]:
        _error("cd: HOME not set")
        return
    try:
        os.chdir(home[0])
    except OSError:
        return
    _record_move(state, old)


def cd(state: ShellState, command: Command) -> None:
    """Change directory to the first argument, or to HOME without one."""
    old = _cwd()
    if not command.args:
        _go_home(state, old)
        return
    target = command.args[0]
    try:
        os.chdir(target)
    except OSError:
        _error(f"cd: {target}: No such file or directory")
        state.exit_status = 1
        return
    _record_move(state, old)
    state.exit_status = 0


def _print_export(state: ShellState, out: TextIO) -> None:
    for key, value in state.env.items():
        if value is None:
            out.write(f"declare -x {key}\n")
        else:
            out.write(f'declare -x {key}="{value.translate(_EXPORT_ESCAPES)}"\n')


def export(state: ShellState, command: Command, out: TextIO) -> None:
    """Set each ``key=value`` argument, or list every variable without arguments."""
    if not command.args:
        _print_export(state, out)
        state.exit_status = 0
        return
    failed = False
    for arg in command.args:
        if is_valid_identifier(arg):
            state.env.set_from_assignment(arg)
        else:
            _error(f"`{arg}': not a valid identifier")
            failed = True
    state.exit_status = int(failed)


def unset(state: ShellState, command: Command) -> None:
    """Remove each named variable."""
    failed = False
    for arg in command.args:
        if is_valid_identifier(arg):
            state.env.unset(arg)
        else:
            _error(f"`{arg}': not a valid identifier")
            failed = True
    state.exit_status = int(failed)


def _is_numeric(arg: str) -> bool:
    digits = arg[1:] if arg[:1] in ("-", "+") else arg
    return all(is_digit(char) for char in digits)


def exit_builtin(state: ShellState, command: Command) -> None:
    """Raise ShellExit, except when given more than one numeric argument."""
    args = command.args
    if not args:
        raise ShellExit(state.exit_status)
    if not _is_numeric(args[0]):
        _error(f"exit: {args[0]}: numeric argument required")
        status = 255
    elif len(args) > 1:
        _error("exit: too many arguments")
        state.exit_status = 1
        return
    else:
        status = atoi(args[0])
    state.exit_status = status & 0xFF
    raise ShellExit(status)


def run_builtin(state: ShellState, command: Command, out: TextIO) -> bool:
    """Run *command* if it is a builtin and return True; return False otherwise.

    A stage without a command word has nothing to run and counts as handled.
    """
    match command.name:
        case None:
            pass
        case "echo":
            echo(state, command, out)
        case "env":
            env_command(state, command, out)
        case "pwd":
            pwd(state, out)
        case "cd":
            cd(state, command)
        case "export":
            export(state, command, out)
        case "unset":
            unset(state, command)
        case "exit":
            exit_builtin(state, command)
        case _:
            return False
    return True