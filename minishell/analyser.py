"""Turn a raw command line into a checked list of word, pipe and redirection tokens."""

from __future__ import annotations

from dataclasses import replace

from .environment import ShellState
from .expand import expand_variables
from .lexer import tokenize
from .syntax import ShellSyntaxError, check_pipes, check_quotes, check_redirections
from .tokens import State, Token, TokenType

_JOINABLE = frozenset({TokenType.WORD, TokenType.VAR})
_QUOTES = frozenset({TokenType.QUOTE, TokenType.DQUOTE})


def _is_quoted_text(token: Token) -> bool:
    if token.state is State.IN_QUOTE:
        return True
    return token.state is State.IN_DQUOTE and token.type is not TokenType.VAR


def type_cast(tokens: list[Token]) -> list[Token]:
    """Return *tokens* with everything inside quotes, except variables, made a word."""
    return [
        replace(token, type=TokenType.WORD) if _is_quoted_text(token) else token
        for token in tokens
    ]


def remove_quotes(tokens: list[Token]) -> list[Token]:
    """Drop the quote marks that open and close quoted text."""
    return [
        token
        for token in tokens
        if not (token.type in _QUOTES and token.state is State.DEFAULT)
    ]


def remove_spaces(tokens: list[Token]) -> list[Token]:
    """Drop blanks and tokens whose text is empty."""
    return [
        token for token in tokens if token.type is not TokenType.SPACE and token.content
    ]


def join_words(tokens: list[Token]) -> list[Token]:
    """Merge runs of adjacent word and variable tokens into one token each."""
    joined: list[Token] = []
    for token in tokens:
        if joined and joined[-1].type in _JOINABLE and token.type in _JOINABLE:
            previous = joined[-1]
            joined[-1] = replace(previous, content=previous.content + token.content)
        else:
            joined.append(token)
    return joined


def analyse(line: str, state: ShellState) -> list[Token]:
    """Tokenize, expand and check *line*; return the tokens to be parsed.

    An empty list means there is nothing to run. On a syntax error the
    state's exit status is set to 2 and ShellSyntaxError is raised.
    """
    try:
        tokens = check_quotes(tokenize(line))
        tokens = expand_variables(tokens, state)
        tokens = join_words(remove_quotes(type_cast(tokens)))
        tokens = remove_spaces(tokens)
        if not tokens:
            return []
        check_pipes(tokens)
        check_redirections(tokens)
    except ShellSyntaxError:
        state.exit_status = ShellSyntaxError.exit_status
        raise
    return tokens