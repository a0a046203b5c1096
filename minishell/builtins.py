"""The commands the shell runs itself instead of starting a program."""

from __future__ import annotations

import os
from collections.abc import Sequence
from typing import TextIO

from .env import Environment, parse_leading_int
from .tokens import is_space

BUILTINS = ("echo", "cd", "pwd", "export", "unset", "env", "exit")

_EXPORT_WITHOUT_ARGS = "\nH0n3stly, w3 d0n't car3 ab0ut that, n3ith3r sh0uld y0u.\n\n"


class ShellExit(Exception):
    """Raised by ``exit`` to end the shell with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


def is_builtin(name: str) -> bool:
    """Tell whether ``name`` is a builtin or the start of one's name."""
    return any(builtin.startswith(name) for builtin in BUILTINS)


def _is_n_flag(arg: str) -> bool:
    return len(arg) >= 2 and arg[0] == "-" and set(arg[1:]) == {"n"}


def echo_flag_count(args: Sequence[str]) -> int:
    """Count the leading ``-n``, ``-nn``, ... flags of ``echo``."""
    count = 0
    for arg in args:
        if not _is_n_flag(arg):
            break
        count += 1
    return count


def builtin_echo(args: Sequence[str], out: TextIO) -> int:
    """Print the arguments separated by spaces; ``-n`` drops the newline."""
    flags = echo_flag_count(args)
    out.write(" ".join(args[flags:]))
    if flags == 0:
        out.write("\n")
    return 0


def resolve_cd_target(args: Sequence[str], env: Environment) -> str | None:
    """Work out where ``cd`` goes; None when the needed variable is unset.

    Raises OSError when the current directory cannot be read.
    """
    if not args or args[0] == "~":
        return env.get("HOME")
    arg = args[0]
    if arg.startswith("-"):
        return env.get("OLDPWD")
    if arg.startswith("/"):
        return arg
    return os.getcwd() + "/" + arg


def builtin_cd(args: Sequence[str], env: Environment, out: TextIO) -> int:
    """Change directory and keep PWD and OLDPWD up to date."""
    try:
        target = resolve_cd_target(args, env)
    except OSError as error:
        out.write(f"minishell: cd: {error.strerror}\n")
        return 1
    if target is None:
        name = "OLDPWD" if args and args[0].startswith("-") and args[0] != "~" else "HOME"
        out.write(f"minishell: cd: {name} not set\n")
        return 1
    try:
        os.chdir(target)
    except OSError as error:
        out.write(f"minishell: cd: {target}: {error.strerror}\n")
        return 1
    previous = env.get("PWD")
    if previous:
        env.export("OLDPWD=" + previous)
        env.export("PWD=" + os.getcwd())
    else:
        env.unset("OLDPWD")
    return 0


def builtin_pwd(out: TextIO) -> int:
    """Print the current working directory."""
    try:
        cwd = os.getcwd()
    except OSError as error:
        out.write(f"minishell: pwd: {error.strerror}\n")
        return 1
    out.write(cwd + "\n")
    return 0


def builtin_env(env: Environment, out: TextIO) -> int:
    """Print every variable as ``KEY=VALUE``."""
    for key, value in env.items():
        out.write(f"{key}={value or ''}\n")
    return 0


def _is_name_char(char: str) -> bool:
    return (char.isascii() and char.isalnum()) or char == "_"


def invalid_export(text: str) -> bool:
    """Tell whether ``text`` is not a valid ``export`` argument."""
    end = next((i for i, char in enumerate(text) if char in "=+"), len(text))
    if not all(_is_name_char(char) for char in text[:end]):
        return True
    if end < len(text) and text[end] == "+" and text[end + 1 : end + 2] != "=":
        return True
    return text[:1] in ("=", "+") or (text[:1].isascii() and text[:1].isdigit())


def builtin_export(args: Sequence[str], env: Environment, out: TextIO) -> int:
    """Apply each ``NAME=value`` argument, stopping at the first unusable one."""
    if not args:
        out.write(_EXPORT_WITHOUT_ARGS)
        return 0
    for arg in args:
        if invalid_export(arg):
            out.write(f"minishell: export: `{arg}': not a valid identifier\n")
            return 1
        if "=" not in arg:
            return 0
        env.export(arg)
    return 0


def builtin_unset(args: Sequence[str], env: Environment) -> int:
    """Remove each named variable."""
    for arg in args:
        env.unset(arg)
    return 0


def is_numeric(text: str) -> bool:
    """Tell whether ``text`` is a signed integer, spaces allowed around it."""
    index = 0
    length = len(text)
    while index < length and is_space(text[index]):
        index += 1
    if index < length and text[index] in "+-":
        index += 1
    if index >= length:
        return False
    while index < length and text[index].isascii() and text[index].isdigit():
        index += 1
    return all(is_space(char) for char in text[index:])


def builtin_exit(args: Sequence[str], status: int) -> None:
    """Raise ShellExit with the status ``exit`` ends the shell with."""
    if not args:
        raise ShellExit(status)
    if len(args) > 1:
        raise ShellExit(127)
    if not is_numeric(args[0]):
        raise ShellExit(2)
    raise ShellExit(parse_leading_int(args[0]) & 0xFF)


def run_builtin(
    argv: Sequence[str], env: Environment, status: int, out: TextIO
) -> int:
    """Run the builtin named by ``argv[0]`` and return the new status.

    A name that matches no builtin exactly leaves ``status`` unchanged.
    """
    if not argv:
        return status
    name, args = argv[0], list(argv[1:])
    if name == "echo":
        return builtin_echo(args, out)
    if name == "cd":
        return builtin_cd(args, env, out)
    if name == "pwd":
        return builtin_pwd(out)
    if name == "export":
        return builtin_export(args, env, out)
    if name == "unset":
        return builtin_unset(args, env)
    if name == "env":
        return builtin_env(env, out)
    if name == "exit":
        builtin_exit(args, status)
    return status