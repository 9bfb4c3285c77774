import io
import sys

import pytest

from minishell.builtins import ShellExit
from minishell.environment import Environment, ShellState
from minishell.shell import main, run_line


def _state(tmp_path):
    return ShellState(Environment({"PATH": str(tmp_path)}))


def test_export_sets_variable(tmp_path):
    state = _state(tmp_path)
    assert run_line(state, "export FOO=bar") == 0
    assert state.env.get("FOO") == "bar"


@pytest.mark.parametrize("line", ["echo |", "| echo", "echo > ", "echo 'x", "a || b"])
def test_syntax_errors_give_status_two(tmp_path, line, capsys):
    state = _state(tmp_path)
    assert run_line(state, line) == 2
    assert state.exit_status == 2
    assert "minishell: " in capsys.readouterr().err


def test_blank_line_keeps_status(tmp_path):
    state = _state(tmp_path)
    state.exit_status = 42
    assert run_line(state, "   \t ") == 42


def test_echo_to_file(tmp_path):
    target = tmp_path / "out.txt"
    run_line(_state(tmp_path), f"echo hi   there > {target}")
    assert target.read_text() == "hi there\n"


def test_exit_status_expansion(tmp_path):
    state = _state(tmp_path)
    target = tmp_path / "out.txt"
    assert run_line(state, "no_such_command_xyz") == 127
    run_line(state, f"echo $? > {target}")
    assert target.read_text() == "127\n"


def test_quoted_variable_expands(tmp_path):
    state = _state(tmp_path)
    target = tmp_path / "out.txt"
    run_line(state, "export NAME=world")
    run_line(state, f"echo \"hello $NAME\" '$NAME' > {target}")
    assert target.read_text() == "hello world $NAME\n"


def test_exit_raises(tmp_path):
    with pytest.raises(ShellExit) as info:
        run_line(_state(tmp_path), "exit 5")
    assert info.value.status == 5


def test_pipeline_line(tmp_path):
    target = tmp_path / "out.txt"
    code = "'import sys; sys.stdout.write(sys.stdin.read().upper())'"
    run_line(_state(tmp_path), f"echo hello | {sys.executable} -c {code} > {target}")
    assert target.read_text() == "HELLO\n"


def test_main_refuses_arguments():
    assert main(["extra"]) == 1


def test_main_exit_status(monkeypatch):
    monkeypatch.setattr("sys.stdin", io.StringIO("exit 7\n"))
    assert main([]) == 7


def test_main_runs_lines_until_eof(monkeypatch, capsys):
    monkeypatch.setattr("sys.stdin", io.StringIO("\necho hi\n"))
    assert main([]) == 0
    assert "hi\n" in capsys.readouterr().out