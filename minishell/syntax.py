"""Syntax checks run on token lists before a line is parsed."""

from __future__ import annotations

from itertools import pairwise

from .tokens import Token, TokenType


class ShellSyntaxError(Exception):
    """A command line that cannot be run; the shell's status becomes 2."""

    exit_status = 2

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


def _unexpected(text: str) -> ShellSyntaxError:
    return ShellSyntaxError(f"syntax error near unexpected token `{text}'")


def check_quotes(tokens: list[Token]) -> list[Token]:
    """Raise if a single or double quote is left unmatched; return *tokens*."""
    quotes = sum(1 for token in tokens if token.type is TokenType.QUOTE)
    dquotes = sum(1 for token in tokens if token.type is TokenType.DQUOTE)
    if quotes % 2 or dquotes % 2:
        raise ShellSyntaxError("unexpected EOF while looking for matching.")
    return tokens


def check_redirections(tokens: list[Token]) -> list[Token]:
    """Raise unless every redirection is followed by a word; return *tokens*."""
    for current, following in pairwise(tokens):
        if current.is_redirection() and following.type not in (
            TokenType.WORD,
            TokenType.VAR,
        ):
            raise _unexpected(following.content)
    if tokens and tokens[-1].is_redirection():
        raise _unexpected("newline")
    return tokens


def check_pipes(tokens: list[Token]) -> list[Token]:
    """Raise on a leading, trailing or doubled pipe; return *tokens*."""
    if tokens and tokens[0].type is TokenType.PIPE:
        raise _unexpected(tokens[0].content)
    for current, following in pairwise(tokens):
        if current.type is TokenType.PIPE and following.type is TokenType.PIPE:
            raise _unexpected(following.content)
    if tokens and tokens[-1].type is TokenType.PIPE:
        raise _unexpected(tokens[-1].content)
    return tokens