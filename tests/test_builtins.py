import io
import os

import pytest

from minishell.builtins import (
    ShellExit,
    builtin_cd,
    builtin_echo,
    builtin_env,
    builtin_exit,
    builtin_export,
    builtin_pwd,
    builtin_unset,
    echo_flag_count,
    invalid_export,
    is_builtin,
    is_numeric,
    resolve_cd_target,
    run_builtin,
)
from minishell.env import Environment


@pytest.mark.parametrize("name", ["echo", "cd", "pwd", "export", "unset", "env", "exit"])
def test_is_builtin_names(name):
    assert is_builtin(name) is True


@pytest.mark.parametrize("name,expected", [("ls", False), ("echoo", False), ("ec", True)])
def test_is_builtin_prefix(name, expected):
    assert is_builtin(name) is expected


@pytest.mark.parametrize(
    "args,expected",
    [(["-n", "-nnn", "x"], 2), (["-na", "x"], 0), (["-", "x"], 0), ([], 0), (["x", "-n"], 0)],
)
def test_echo_flag_count(args, expected):
    assert echo_flag_count(args) == expected


def test_echo_with_newline():
    out = io.StringIO()
    assert builtin_echo(["a", "b"], out) == 0
    assert out.getvalue() == "a b\n"


def test_echo_without_newline():
    out = io.StringIO()
    builtin_echo(["-n", "a", "-n"], out)
    assert out.getvalue() == "a -n"


def test_resolve_cd_target_variants(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = Environment(["HOME=/home/user", "OLDPWD=/old"])
    assert resolve_cd_target([], env) == "/home/user"
    assert resolve_cd_target(["~"], env) == "/home/user"
    assert resolve_cd_target(["-"], env) == "/old"
    assert resolve_cd_target(["/abs"], env) == "/abs"
    assert resolve_cd_target(["sub"], env) == os.getcwd() + "/sub"
    assert resolve_cd_target([], Environment()) is None


def test_cd_updates_pwd_and_oldpwd(tmp_path, monkeypatch):
    start = tmp_path / "start"
    target = tmp_path / "target"
    start.mkdir()
    target.mkdir()
    monkeypatch.chdir(start)
    env = Environment([f"PWD={start}"])
    out = io.StringIO()
    assert builtin_cd([str(target)], env, out) == 0
    assert env.get("OLDPWD") == str(start)
    assert env.get("PWD") == os.getcwd()
    assert os.path.samefile(os.getcwd(), target)


def test_cd_relative(tmp_path, monkeypatch):
    (tmp_path / "sub").mkdir()
    monkeypatch.chdir(tmp_path)
    env = Environment()
    assert builtin_cd(["sub"], env, io.StringIO()) == 0
    assert os.path.samefile(os.getcwd(), tmp_path / "sub")


def test_cd_without_pwd_drops_oldpwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    env = Environment(["OLDPWD=/old"])
    assert builtin_cd([str(tmp_path)], env, io.StringIO()) == 0
    assert "OLDPWD" not in env


def test_cd_missing_directory(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    missing = str(tmp_path / "missing")
    assert builtin_cd([missing], Environment(), out) == 1
    assert out.getvalue().startswith(f"minishell: cd: {missing}: ")


def test_cd_home_unset():
    out = io.StringIO()
    assert builtin_cd([], Environment(), out) == 1
    assert out.getvalue().startswith("minishell: cd: ")


def test_pwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    out = io.StringIO()
    assert builtin_pwd(out) == 0
    assert out.getvalue() == os.getcwd() + "\n"


def test_env_lists_variables():
    out = io.StringIO()
    assert builtin_env(Environment(["A=1", "B="]), out) == 0
    assert out.getvalue() == "A=1\nB=\n"


@pytest.mark.parametrize(
    "text,expected",
    [
        ("X=1", False),
        ("X_1+=2", False),
        ("Y", False),
        ("1X=2", True),
        ("=x", True),
        ("+=x", True),
        ("a-b=1", True),
        ("A+B=1", True),
        ("A+", True),
    ],
)
def test_invalid_export(text, expected):
    assert invalid_export(text) is expected


def test_export_sets_and_appends():
    env = Environment(["X=a"])
    assert builtin_export(["X+=b", "Y=c"], env, io.StringIO()) == 0
    assert env.get("X") == "ab"
    assert env.get("Y") == "c"


def test_export_invalid_stops():
    env = Environment()
    out = io.StringIO()
    assert builtin_export(["A=1", "1B=2", "C=3"], env, out) == 1
    assert env.get("A") == "1"
    assert "C" not in env
    assert out.getvalue() == "minishell: export: `1B=2': not a valid identifier\n"


def test_export_without_equals_stops_quietly():
    env = Environment()
    assert builtin_export(["Y", "Z=1"], env, io.StringIO()) == 0
    assert len(env) == 0


def test_unset_removes():
    env = Environment(["A=1", "B=2"])
    assert builtin_unset(["A", "missing"], env) == 0
    assert "A" not in env
    assert env.get("B") == "2"


@pytest.mark.parametrize(
    "text,expected",
    [("42", True), ("  -7  ", True), ("+", False), ("", False), ("   ", False), ("12a", False), ("1 2", False)],
)
def test_is_numeric(text, expected):
    assert is_numeric(text) is expected


def test_exit_without_args_keeps_status():
    with pytest.raises(ShellExit) as caught:
        builtin_exit([], 5)
    assert caught.value.status == 5


def test_exit_too_many_args():
    with pytest.raises(ShellExit) as caught:
        builtin_exit(["1", "2"], 0)
    assert caught.value.status == 127


def test_exit_non_numeric():
    with pytest.raises(ShellExit) as caught:
        builtin_exit(["abc"], 0)
    assert caught.value.status == 2


def test_exit_numeric_value():
    with pytest.raises(ShellExit) as caught:
        builtin_exit(["42"], 0)
    assert caught.value.status == 42


def test_exit_value_wraps_to_byte():
    with pytest.raises(ShellExit) as caught:
        builtin_exit(["-1"], 0)
    assert caught.value.status == 255


def test_run_builtin_dispatches_echo():
    out = io.StringIO()
    assert run_builtin(["echo", "hi"], Environment(), 3, out) == 0
    assert out.getvalue() == "hi\n"


def test_run_builtin_prefix_keeps_status():
    out = io.StringIO()
    assert run_builtin(["ec", "hi"], Environment(), 3, out) == 3
    assert out.getvalue() == ""


def test_run_builtin_exit_raises():
    with pytest.raises(ShellExit) as caught:
        run_builtin(["exit"], Environment(), 7, io.StringIO())
    assert caught.value.status == 7