"""Open the files and here-documents a command's redirections name."""

from __future__ import annotations

import os
import tempfile
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import IO

from .environment import ShellState
from .expand import expand_variables
from .parser import Command, Redirection
from .tokens import Token, TokenType

ReadLine = Callable[[str], "str | None"]

_OUTPUTS = frozenset({TokenType.REDIR_OUT, TokenType.AREDIR_OUT})


class RedirectionError(Exception):
    """A redirection file could not be opened; the shell's status becomes 1."""

    exit_status = 1

    def __init__(self, message: str, filename: str = "") -> None:
        super().__init__(message)
        self.message = message
        self.filename = filename


@dataclass
class OpenedRedirections:
    """Streams that replace a command's standard input and output."""

    stdin: IO[bytes] | None = None
    stdout: IO[str] | None = None

    def close(self) -> None:
        """Close the streams that were opened."""
        for stream in (self.stdin, self.stdout):
            if stream is not None:
                stream.close()

    def __enter__(self) -> OpenedRedirections:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()


def has_input(redirections: Iterable[Redirection]) -> bool:
    """Return True if any redirection reads from a file with ``<``."""
    return any(r.type is TokenType.REDIR_IN for r in redirections)


def has_output(redirections: Iterable[Redirection]) -> bool:
    """Return True if any redirection writes to a file with ``>`` or ``>>``."""
    return any(r.type in _OUTPUTS for r in redirections)


def _prompt(prompt: str) -> str | None:
    try:
        return input(prompt)
    except EOFError:
        return None


def _expand_line(line: str, state: ShellState) -> str:
    # The whole line is taken as one variable reference, as the shell always has.
    return expand_variables([Token(line, TokenType.VAR)], state)[0].content


def read_heredoc(delimiter: str, state: ShellState, read_line: ReadLine) -> str:
    """Read lines until *delimiter* or end of input and return them joined.

    A line holding ``$`` is replaced by the value of the variable named by
    the line after its first character (``$?`` and ``$<digit>`` included).
    """
    lines: list[str] = []
    while True:
        line = read_line("> ")
        if line is None or line == delimiter:
            break
        if "$" in line:
            line = _expand_line(line, state)
        lines.append(line + "\n")
    return "".join(lines)


def _failure(exc: OSError, path: str) -> RedirectionError:
    return RedirectionError(exc.strerror or str(exc), path)


def _open_input(path: str) -> IO[bytes]:
    try:
        return open(path, "rb")
    except OSError as exc:
        raise _failure(exc, path) from exc


def _open_output(path: str, mode_flag: int) -> IO[str]:
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | mode_flag, 0o644)
    except OSError as exc:
        raise _failure(exc, path) from exc
    return os.fdopen(fd, "a" if mode_flag == os.O_APPEND else "w", encoding="utf-8")


def _heredoc_stream(text: str) -> IO[bytes]:
    stream = tempfile.TemporaryFile()
    stream.write(text.encode("utf-8"))
    stream.seek(0)
    return stream


def open_redirections(
    command: Command, state: ShellState, read_line: ReadLine | None = None
) -> OpenedRedirections:
    """Apply *command*'s redirections in order and return the resulting streams.

    A later redirection of the same stream replaces an earlier one; output
    files named earlier are still created or truncated. Raises
    RedirectionError when a file cannot be opened.
    """
    reader = read_line or _prompt
    opened = OpenedRedirections()
    try:
        for redirection in command.redirections:
            match redirection.type:
                case TokenType.REDIR_IN:
                    new_in = _open_input(redirection.file)
                case TokenType.HERE_DOC:
                    new_in = _heredoc_stream(read_heredoc(redirection.file, state, reader))
                case TokenType.REDIR_OUT | TokenType.AREDIR_OUT:
                    flag = os.O_TRUNC if redirection.type is TokenType.REDIR_OUT else os.O_APPEND
                    new_out = _open_output(redirection.file, flag)
                    if opened.stdout is not None:
                        opened.stdout.close()
                    opened.stdout = new_out
                    continue
                case _:
                    continue
            if opened.stdin is not None:
                opened.stdin.close()
            opened.stdin = new_in
    except BaseException:
        opened.close()
        raise
    return opened