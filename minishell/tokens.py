"""Token kinds, quoting states and the token record used by the lexer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class TokenType(Enum):
    """Kind of a lexical element of a command line."""

    QUOTE = "'"
    DQUOTE = '"'
    SPACE = " "
    VAR = "$"
    PIPE = "|"
    REDIR_IN = "<"
    REDIR_OUT = ">"
    WORD = "word"
    HERE_DOC = "<<"
    AREDIR_OUT = ">>"


class State(Enum):
    """Quoting context a token was read in."""

    IN_DQUOTE = "in_dquote"
    IN_QUOTE = "in_quote"
    DEFAULT = "default"


_REDIRECTIONS = frozenset(
    {TokenType.REDIR_IN, TokenType.REDIR_OUT, TokenType.HERE_DOC, TokenType.AREDIR_OUT}
)


@dataclass
class Token:
    """One lexical element: its text, kind and quoting state."""

    content: str
    type: TokenType
    state: State = State.DEFAULT

    def is_redirection(self) -> bool:
        """Return True for <, >, << and >> tokens."""
        return self.type in _REDIRECTIONS