import io
import os
from pathlib import Path

import pytest

from minishell.builtins import (
    ShellExit,
    cd,
    echo,
    env_command,
    exit_builtin,
    export,
    is_option,
    is_valid_identifier,
    pwd,
    run_builtin,
    unset,
)
from minishell.environment import Environment, ShellState
from minishell.parser import Command


def make_state(variables=None, status=0):
    return ShellState(Environment(variables or {}), status)


def cmd(*argv):
    return Command(0, list(argv))


@pytest.mark.parametrize(
    "arg, expected",
    [("-n", True), ("-nnn", True), ("-", False), ("n", False), ("-na", False), ("", False)],
)
def test_is_option(arg, expected):
    assert is_option(arg) is expected


@pytest.mark.parametrize(
    "word, expected",
    [
        ("FOO", True),
        ("_x1", True),
        ("FOO=bar baz", True),
        ("1abc", False),
        ("a-b", False),
        ("=x", False),
        ("", False),
    ],
)
def test_is_valid_identifier(word, expected):
    assert is_valid_identifier(word) is expected


def test_echo_plain():
    state = make_state(status=3)
    out = io.StringIO()
    echo(state, cmd("echo", "hello", "world"), out)
    assert out.getvalue() == "hello world\n"
    assert state.exit_status == 0


def test_echo_options_drop_newline():
    out = io.StringIO()
    echo(make_state(), cmd("echo", "-nnn", "-n", "x"), out)
    assert out.getvalue() == "x"


def test_echo_option_only_at_start():
    out = io.StringIO()
    echo(make_state(), cmd("echo", "a", "-n"), out)
    assert out.getvalue() == "a -n\n"


def test_echo_no_blank_before_empty_word():
    out = io.StringIO()
    echo(make_state(), cmd("echo", "a", "", "b"), out)
    assert out.getvalue() == "a b\n"


def test_echo_without_args_prints_newline():
    out = io.StringIO()
    echo(make_state(), cmd("echo"), out)
    assert out.getvalue() == "\n"


def test_env_lists_valued_variables():
    state = make_state({"A": "1", "B": None, "C": "x=y"})
    out = io.StringIO()
    env_command(state, cmd("env"), out)
    assert out.getvalue() == "A=1\nC=x=y\n"
    assert state.exit_status == 0


def test_env_refuses_arguments():
    state = make_state()
    out = io.StringIO()
    env_command(state, cmd("env", "x"), out)
    assert out.getvalue() == "env: incorrect number of argumments\n"
    assert state.exit_status == 1


def test_pwd_prints_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    state = make_state(status=5)
    out = io.StringIO()
    pwd(state, out)
    assert out.getvalue() == os.getcwd() + "\n"
    assert state.exit_status == 0


def test_cd_changes_directory_and_records(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    old = os.getcwd()
    (tmp_path / "sub").mkdir()
    state = make_state(status=4)
    cd(state, cmd("cd", "sub"))
    assert Path(os.getcwd()) == Path(old) / "sub"
    assert state.env.get("PWD") == os.getcwd()
    assert state.env.get("OLDPWD") == old
    assert state.exit_status == 0


def test_cd_missing_directory(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    before = os.getcwd()
    state = make_state()
    cd(state, cmd("cd", "nowhere"))
    assert state.exit_status == 1
    assert os.getcwd() == before
    assert "cd: nowhere: No such file or directory" in capsys.readouterr().err


def test_cd_home(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    home = tmp_path / "home"
    home.mkdir()
    state = make_state({"HOME": str(home)})
    cd(state, cmd("cd"))
    assert Path(os.getcwd()).resolve() == home.resolve()
    assert state.env.get("PWD") == os.getcwd()


def test_cd_home_not_set(tmp_path, monkeypatch, capsys):
    monkeypatch.chdir(tmp_path)
    before = os.getcwd()
    state = make_state(status=7)
    cd(state, cmd("cd"))
    assert os.getcwd() == before
    assert state.exit_status == 7
    assert "cd: HOME not set" in capsys.readouterr().err


def test_export_lists_with_escapes():
    state = make_state({"A": 'a"b$c', "B": None})
    out = io.StringIO()
    export(state, cmd("export"), out)
    assert out.getvalue() == 'declare -x A="a\\"b\\$c"\ndeclare -x B\n'
    assert state.exit_status == 0


def test_export_sets_and_keeps():
    state = make_state({"KEEP": "v"})
    export(state, cmd("export", "FOO=bar", "KEEP", "NEW"), io.StringIO())
    assert state.env.get("FOO") == "bar"
    assert state.env.get("KEEP") == "v"
    assert "NEW" in state.env
    assert state.exit_status == 0


def test_export_invalid_identifier(capsys):
    state = make_state()
    export(state, cmd("export", "1abc", "OK=1"), io.StringIO())
    assert state.exit_status == 1
    assert state.env.get("OK") == "1"
    assert "`1abc': not a valid identifier" in capsys.readouterr().err


def test_unset_removes():
    state = make_state({"A": "1", "B": "2"})
    unset(state, cmd("unset", "A"))
    assert "A" not in state.env
    assert state.env.get("B") == "2"
    assert state.exit_status == 0


def test_unset_invalid_sets_status():
    state = make_state({"A": "1"})
    unset(state, cmd("unset", "-x", "A"))
    assert state.exit_status == 1
    assert "A" not in state.env


def test_exit_without_args_uses_last_status():
    with pytest.raises(ShellExit) as info:
        exit_builtin(make_state(status=3), cmd("exit"))
    assert info.value.status == 3


def test_exit_numeric():
    with pytest.raises(ShellExit) as info:
        exit_builtin(make_state(), cmd("exit", "+42"))
    assert info.value.status == 42


def test_exit_non_numeric(capsys):
    state = make_state()
    with pytest.raises(ShellExit) as info:
        exit_builtin(state, cmd("exit", "abc"))
    assert info.value.status == 255
    assert "exit: abc: numeric argument required" in capsys.readouterr().err


def test_exit_too_many_arguments(capsys):
    state = make_state()
    exit_builtin(state, cmd("exit", "1", "2"))
    assert state.exit_status == 1
    assert "exit: too many arguments" in capsys.readouterr().err


def test_exit_negative_wraps():
    with pytest.raises(ShellExit) as info:
        exit_builtin(make_state(), cmd("exit", "-1"))
    assert info.value.status == 255


def test_run_builtin_dispatches_and_refuses():
    state = make_state()
    out = io.StringIO()
    assert run_builtin(state, cmd("echo", "hi"), out) is True
    assert out.getvalue() == "hi\n"
    assert run_builtin(state, cmd("ls"), out) is False
    assert out.getvalue() == "hi\n"