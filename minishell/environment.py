"""Shell variables and the state shared across command lines."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field

from .textutils import split_on


def parse_entry(line: str) -> tuple[str, str | None]:
    """Split ``key=value`` at the first ``=``; the value is None without one."""
    key, sep, value = line.partition("=")
    return (key, value) if sep else (line, None)


class Environment:
    """Ordered shell variables; a variable may be exported without a value."""

    def __init__(self, variables: Mapping[str, str | None] | None = None) -> None:
        self._vars: dict[str, str | None] = dict(variables or {})

    @classmethod
    def from_strings(cls, entries: Iterable[str]) -> Environment:
        """Build an environment from ``key=value`` strings, first one winning."""
        env = cls()
        for entry in entries:
            key, value = parse_entry(entry)
            env._vars.setdefault(key, value)
        return env

    def get(self, key: str) -> str | None:
        """Return the value of *key*, or None if it is unset or has no value."""
        return self._vars.get(key)

    def set_from_assignment(self, var: str) -> None:
        """Apply ``key=value`` or a bare ``key`` as the export builtin does.

        A bare key is added without a value but never clears an existing one.
        """
        key, value = parse_entry(var)
        if value is None:
            self._vars.setdefault(key, None)
        else:
            self._vars[key] = value

    def unset(self, key: str) -> None:
        """Remove *key* if it is present."""
        self._vars.pop(key, None)

    def items(self) -> Iterator[tuple[str, str | None]]:
        """Yield ``(key, value)`` pairs in insertion order."""
        yield from self._vars.items()

    def to_strings(self) -> list[str]:
        """Return ``key=value`` strings for the variables that have a value."""
        return [f"{key}={value}" for key, value in self._vars.items() if value is not None]

    def path_dirs(self) -> list[str]:
        """Return the non-empty directories listed in PATH."""
        if "PATH" not in self._vars:
            return []
        return split_on(self._vars["PATH"] or "", ":")

    def __contains__(self, key: object) -> bool:
        return key in self._vars

    def __len__(self) -> int:
        return len(self._vars)


@dataclass
class ShellState:
    """Variables and last exit status carried from one line to the next."""

    env: Environment = field(default_factory=Environment)
    exit_status: int = 0