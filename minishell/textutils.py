"""Small text helpers shared by the lexer, parser and builtins."""

from __future__ import annotations

import re

_ATOI_SPACE = " \t\n\v\f\r"


def split_on(text: str, separators: str) -> list[str]:
    """Split *text* on any character of *separators*, dropping empty fields."""
    if not separators:
        return [text] if text else []
    pattern = "[" + re.escape(separators) + "]+"
    return [part for part in re.split(pattern, text) if part]


def atoi(text: str) -> int:
    """Parse a leading, optionally signed, decimal integer; 0 if there is none."""
    stripped = text.lstrip(_ATOI_SPACE)
    sign = 1
    if stripped[:1] in ("-", "+"):
        if stripped[0] == "-":
            sign = -1
        stripped = stripped[1:]
    match = re.match(r"[0-9]+", stripped)
    if match is None:
        return 0
    return sign * int(match.group())


def is_alpha(char: str) -> bool:
    """Return True if *char* is a single ASCII letter."""
    return len(char) == 1 and ("a" <= char <= "z" or "A" <= char <= "Z")


def is_digit(char: str) -> bool:
    """Return True if *char* is a single ASCII decimal digit."""
    return len(char) == 1 and "0" <= char <= "9"


def is_alnum(char: str) -> bool:
    """Return True if *char* is a single ASCII letter or digit."""
    return is_alpha(char) or is_digit(char)