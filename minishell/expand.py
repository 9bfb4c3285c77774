"""Expansion of ``$NAME`` and ``$?`` tokens against the shell state."""

from __future__ import annotations

from dataclasses import replace

from .environment import Environment, ShellState
from .textutils import is_digit, split_on
from .tokens import Token, TokenType

_BLANKS = " \t"


def lookup_words(name: str, env: Environment) -> list[str]:
    """Return the value of variable *name* split into blank-separated words.

    An unset, valueless or empty variable gives one empty word; a value made
    only of blanks gives no words at all.
    """
    value = env.get(name)
    if not value:
        return [""]
    return split_on(value, _BLANKS)


def expand_variables(tokens: list[Token], state: ShellState) -> list[Token]:
    """Return a copy of *tokens* with variable tokens replaced by their values.

    ``$?`` becomes the last exit status and ``$<digit>`` becomes empty. A lone
    ``$`` ends expansion for the rest of the line. When a value holds several
    words, the first replaces the variable and the others are appended, each
    after a blank, at the end of the line.
    """
    expanded: list[Token] = []
    trailing: list[Token] = []
    remaining = iter(tokens)
    for token in remaining:
        if token.type is not TokenType.VAR:
            expanded.append(token)
            continue
        name = token.content[1:]
        if not name:
            expanded.append(token)
            expanded.extend(remaining)
            break
        if name == "?":
            expanded.append(replace(token, content=str(state.exit_status)))
        elif is_digit(name[0]):
            expanded.append(replace(token, content=""))
        else:
            words = lookup_words(name, state.env)
            if not words:
                expanded.append(token)
                continue
            first, *rest = words
            expanded.append(replace(token, content=first, type=TokenType.WORD))
            for word in rest:
                trailing.append(Token(" ", TokenType.SPACE))
                trailing.append(Token(word, TokenType.WORD))
    return expanded + trailing