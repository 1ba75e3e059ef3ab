"""The shell's builtin commands other than ``export``."""

from __future__ import annotations

import os
import sys
from collections.abc import Sequence
from typing import Optional, TextIO

from minishell.environment import Environment
from minishell.exporting import is_valid_var
from minishell.status import exit_status

_LONG_MAX = 2**63 - 1
_LONG_MIN = -(2**63)


class ShellExit(Exception):
    """Raised when the shell is asked to terminate with ``status``."""

    def __init__(self, status: int) -> None:
        super().__init__(status)
        self.status = status


class _CwdCache:
    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value: Optional[str] = None


_CWD = _CwdCache()


def _error(message: str, err: TextIO) -> int:
    err.write(message)
    return 1


def _is_n_flag(arg: str) -> bool:
    return arg.startswith("-n") and set(arg[1:]) == {"n"}


def echo(args: Sequence[str], out: Optional[TextIO] = None) -> int:
    """Print the operands separated by spaces; ``-n`` flags drop the newline."""
    out = sys.stdout if out is None else out
    operands = list(args[1:])
    no_newline = False
    while operands and _is_n_flag(operands[0]):
        no_newline = True
        operands.pop(0)
    out.write(" ".join(operands))
    if not no_newline:
        out.write("\n")
    return 0


def update_cwd(new_pwd: Optional[str]) -> Optional[str]:
    """Remember ``new_pwd`` as the working directory; return the remembered one."""
    if new_pwd is not None and _CWD.value != new_pwd:
        _CWD.value = new_pwd
    return _CWD.value


def get_pwd() -> Optional[str]:
    """Return the working directory, falling back to the last one remembered."""
    try:
        return os.getcwd()
    except OSError:
        return update_cwd(None)


def pwd(out: Optional[TextIO] = None, err: Optional[TextIO] = None) -> int:
    """Print the working directory."""
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    current = get_pwd()
    if current is None:
        return _error("pwd: cannot determine current directory\n", err)
    out.write(current + "\n")
    return 0


def _change_to_home(env: Environment, err: TextIO) -> int:
    home = env.get("HOME")
    if home is None:
        return _error("cd: HOME not set\n", err)
    try:
        os.chdir(home)
    except OSError:
        pass
    env.insert("OLDPWD", home)
    env.insert("PWD", get_pwd())
    return 0


def _change_dir(path: str, env: Environment, err: TextIO) -> int:
    if not os.access(path, os.F_OK):
        return _error("cd: No such file or directory\n", err)
    if not os.access(path, os.R_OK):
        return _error("cd: Permission denied\n", err)
    current = get_pwd()
    if current is None:
        return _error("cd: cannot determine current directory\n", err)
    try:
        os.chdir(path)
    except OSError as exc:
        return _error(f"cd: {exc.strerror}\n", err)
    env.insert("OLDPWD", current)
    env.insert("PWD", get_pwd())
    update_cwd(get_pwd())
    return 0


def cd(args: Sequence[str], env: Environment, err: Optional[TextIO] = None) -> int:
    """Change directory, updating ``PWD`` and ``OLDPWD`` in ``env``."""
    err = sys.stderr if err is None else err
    operands = list(args[1:])
    if not operands or (len(operands) == 1 and operands[0] == "~"):
        return _change_to_home(env, err)
    if len(operands) > 1:
        return _error("cd: too many arguments\n", err)
    return _change_dir(operands[0], env, err)


def env_builtin(
    args: Sequence[str],
    env: Environment,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Print every variable that has a value; arguments are refused."""
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    if len(args) > 1:
        return _error("env doesn't accept arguments or flag\n", err)
    for line in env:
        key, sep, _ = line.partition("=")
        if sep and env.get(key) is not None:
            out.write(line + "\n")
    return 0


def unset(args: Sequence[str], env: Environment, err: Optional[TextIO] = None) -> int:
    """Remove each named variable; invalid names are reported."""
    err = sys.stderr if err is None else err
    status = 0
    for name in args[1:]:
        if is_valid_var(name):
            env.delete(name)
        else:
            status = _error("unset: not a valid identifier\n", err)
    return status


def check_exit_argument(arg: str) -> int:
    """Return the exit code ``arg`` asks for, or raise ValueError if not numeric.

    Leading spaces and one sign are allowed; the value must fit a signed
    64-bit integer.
    """
    text = arg.lstrip(" ")
    sign = 1
    if text[:1] in ("+", "-"):
        if text[:1] == "-":
            sign = -1
        text = text[1:]
    if not text or not all("0" <= char <= "9" for char in text):
        raise ValueError(f"{arg}: numeric argument required")
    value = sign * int(text)
    if not _LONG_MIN <= value <= _LONG_MAX:
        raise ValueError(f"{arg}: numeric argument required")
    return value % 256


def exit_builtin(args: Sequence[str], err: Optional[TextIO] = None) -> int:
    """Leave the shell by raising ShellExit.

    Returns 1 without exiting when given more than one numeric argument.
    """
    err = sys.stderr if err is None else err
    err.write("exit\n")
    operands = list(args[1:])
    if not operands:
        raise ShellExit(exit_status())
    try:
        code = check_exit_argument(operands[0])
    except ValueError:
        err.write(f"exit: {operands[0]}: numeric argument required\n")
        raise ShellExit(2) from None
    if len(operands) > 1:
        return _error("exit: too many arguments\n", err)
    raise ShellExit(code)