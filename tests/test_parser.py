import pytest

from minishell.analyser import analyse
from minishell.environment import Environment, ShellState
from minishell.parser import Command, Redirection, count_commands, parse
from minishell.syntax import ShellSyntaxError
from minishell.tokens import Token, TokenType

_KINDS = {
    "|": TokenType.PIPE,
    "<": TokenType.REDIR_IN,
    ">": TokenType.REDIR_OUT,
    "<<": TokenType.HERE_DOC,
    ">>": TokenType.AREDIR_OUT,
}


def toks(*items):
    return [Token(item, _KINDS.get(item, TokenType.WORD)) for item in items]


def test_count_commands():
    assert count_commands(toks("ls")) == 1
    assert count_commands(toks("a", "|", "b", "|", "c")) == 3
    assert count_commands([]) == 1


def test_parse_simple_command():
    (command,) = parse(toks("ls", "-l", "/tmp"))
    assert command.index == 0
    assert command.name == "ls"
    assert command.args == ["-l", "/tmp"]
    assert command.argv == ["ls", "-l", "/tmp"]
    assert command.redirections == []


def test_parse_pipeline_indexes_and_names():
    commands = parse(toks("ls", "|", "grep", "x", "|", "wc"))
    assert [command.index for command in commands] == [0, 1, 2]
    assert [command.name for command in commands] == ["ls", "grep", "wc"]
    assert commands[1].args == ["x"]


def test_parse_extracts_redirections_in_order():
    (command,) = parse(toks("cat", "<", "in", ">", "out", "extra"))
    assert command.argv == ["cat", "extra"]
    assert command.redirections == [
        Redirection(TokenType.REDIR_IN, "in"),
        Redirection(TokenType.REDIR_OUT, "out"),
    ]


def test_parse_heredoc_and_append():
    (command,) = parse(toks("<<", "EOF", "cat", ">>", "log"))
    assert command.name == "cat"
    assert [r.type for r in command.redirections] == [
        TokenType.HERE_DOC,
        TokenType.AREDIR_OUT,
    ]
    assert [r.file for r in command.redirections] == ["EOF", "log"]


def test_parse_stage_with_only_redirections():
    first, second = parse(toks("<", "in", "|", "wc"))
    assert first.name is None
    assert first.args == []
    assert first.redirections == [Redirection(TokenType.REDIR_IN, "in")]
    assert second == Command(1, ["wc"])


def test_parse_dangling_redirection_raises():
    with pytest.raises(ShellSyntaxError):
        parse(toks("ls", ">", "|", "wc"))


@pytest.mark.parametrize(
    "items",
    [("ls",), ("a", "|", "b"), ("<", "f", "|", "x", "|", "y", ">", "g")],
)
def test_parse_yields_one_command_per_stage(items):
    tokens = toks(*items)
    assert len(parse(tokens)) == count_commands(tokens)


def test_parse_analysed_line():
    state = ShellState(env=Environment({"F": "out.txt"}))
    commands = parse(analyse("echo 'a b' > $F | cat -e", state))
    assert commands[0].argv == ["echo", "a b"]
    assert commands[0].redirections == [Redirection(TokenType.REDIR_OUT, "out.txt")]
    assert commands[1].argv == ["cat", "-e"]