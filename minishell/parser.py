"""Build the commands of a pipeline from an analysed token list."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from .syntax import ShellSyntaxError
from .tokens import Token, TokenType


@dataclass
class Redirection:
    """One redirection of a command: its kind and the file or heredoc delimiter."""

    type: TokenType
    file: str


@dataclass
class Command:
    """One stage of a pipeline."""

    index: int
    argv: list[str] = field(default_factory=list)
    redirections: list[Redirection] = field(default_factory=list)

    @property
    def name(self) -> str | None:
        """The command word, or None when the stage holds only redirections."""
        return self.argv[0] if self.argv else None

    @property
    def args(self) -> list[str]:
        """The arguments after the command word."""
        return self.argv[1:]


def count_commands(tokens: list[Token]) -> int:
    """Return the number of pipeline stages: one more than the pipes."""
    return 1 + sum(1 for token in tokens if token.type is TokenType.PIPE)


def _stages(tokens: list[Token]) -> Iterator[list[Token]]:
    stage: list[Token] = []
    for token in tokens:
        if token.type is TokenType.PIPE:
            yield stage
            stage = []
        else:
            stage.append(token)
    yield stage


def parse(tokens: list[Token]) -> list[Command]:
    """Split *tokens* at pipes into commands with their words and redirections."""
    commands: list[Command] = []
    for index, stage in enumerate(_stages(tokens)):
        command = Command(index)
        parts = iter(stage)
        for token in parts:
            if not token.is_redirection():
                command.argv.append(token.content)
                continue
            target = next(parts, None)
            if target is None:
                raise ShellSyntaxError("syntax error near unexpected token `newline'")
            command.redirections.append(Redirection(token.type, target.content))
        commands.append(command)
    return commands