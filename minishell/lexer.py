"""Split a command line into tokens and mark their quoting context."""

from __future__ import annotations

import re
from collections.abc import Iterator

from .tokens import State, Token, TokenType

_SPACES = " \t\v"
_SPECIAL = "'\"<>|$\n\0" + _SPACES

# Group names are TokenType member names; anything else is skipped.
_TOKEN_RE = re.compile(
    "|".join(
        [
            r"(?P<VAR>\$(?:[?@0-9]|[A-Za-z_][A-Za-z0-9_]*)?)",
            r"(?P<WORD>[^'\"<>|$ \t\v\n\0]+)",
            r"(?P<HERE_DOC><<)",
            r"(?P<AREDIR_OUT>>>)",
            r"(?P<REDIR_IN><)",
            r"(?P<REDIR_OUT>>)",
            r"(?P<QUOTE>')",
            r"(?P<DQUOTE>\")",
            r"(?P<SPACE>[ \t\v])",
            r"(?P<PIPE>\|)",
            r"(?P<skip>.)",
        ]
    ),
    re.DOTALL,
)


def is_space(char: str) -> bool:
    """Return True for the blanks that separate words: space, tab, vertical tab."""
    return len(char) == 1 and char in _SPACES


def is_special(char: str) -> bool:
    """Return True for characters that end a plain word."""
    return len(char) == 1 and char in _SPECIAL


def _scan(line: str) -> Iterator[Token]:
    for match in _TOKEN_RE.finditer(line):
        kind = match.lastgroup
        if kind is None or kind == "skip":
            continue
        token_type = TokenType[kind]
        text = " " if token_type is TokenType.SPACE else match.group()
        yield Token(text, token_type)


def set_state(tokens: list[Token]) -> None:
    """Mark, in place, the tokens that lie between matching quotes.

    Tokens inside single quotes also become plain words. The last token of
    the line is left alone when its quote is never closed.
    """
    closing: TokenType | None = None
    last = len(tokens) - 1
    for position, token in enumerate(tokens):
        if closing is None:
            if token.type in (TokenType.QUOTE, TokenType.DQUOTE):
                closing = token.type
        elif token.type is closing:
            closing = None
        elif position < last:
            if closing is TokenType.QUOTE:
                token.state = State.IN_QUOTE
                token.type = TokenType.WORD
            else:
                token.state = State.IN_DQUOTE


def _joinable(left: Token, right: Token) -> bool:
    if left.state is State.IN_DQUOTE and right.state is State.IN_DQUOTE:
        return TokenType.VAR not in (left.type, right.type)
    return left.state is State.IN_QUOTE and right.state is State.IN_QUOTE


def join_in_quote(tokens: list[Token]) -> list[Token]:
    """Merge neighbouring quoted tokens into single words.

    Variables inside double quotes are kept apart so they can be expanded.
    """
    joined: list[Token] = []
    for token in tokens:
        if joined and _joinable(joined[-1], token):
            previous = joined[-1]
            joined[-1] = Token(
                previous.content + token.content, TokenType.WORD, previous.state
            )
        else:
            joined.append(token)
    return joined


def tokenize(line: str) -> list[Token]:
    """Turn a command line into its list of tokens."""
    tokens = list(_scan(line))
    set_state(tokens)
    return join_in_quote(tokens)