"""Locating executables on ``PATH`` and reporting why a command cannot run."""

from __future__ import annotations

import os
import stat
import sys
from collections.abc import Sequence
from typing import Optional, TextIO

from minishell.builtins import ShellExit
from minishell.tokens import FORK, AccessResult


def _stream(err: Optional[TextIO]) -> TextIO:
    return sys.stderr if err is None else err


def find_paths(cmd: Optional[str], env) -> Optional[list[str]]:
    """Return the directories listed in ``PATH``, or None when it is unset or empty.

    ``env`` is anything with a ``get`` method, such as an Environment or a dict.
    Empty entries of ``PATH`` are dropped.
    """
    path = env.get("PATH")
    if cmd is not None and not path:
        return None
    return [entry for entry in (path or "").split(":") if entry]


def check_bin_access(path_name: str) -> AccessResult:
    """Classify ``path_name`` as a directory, a runnable file, or missing."""
    if os.path.isdir(path_name):
        return AccessResult.IS_DIR
    if os.access(path_name, os.F_OK):
        if os.access(path_name, os.X_OK):
            return AccessResult.FOUND
        return AccessResult.X_NOK
    return AccessResult.NOT_FOUND


def check_paths(
    paths: Optional[Sequence[str]], cmd: str, err: Optional[TextIO] = None
) -> str:
    """Return the first runnable ``<dir>/<cmd>`` among ``paths``.

    With no search path the command is returned unchanged. When nothing is
    found the error is reported and ShellExit is raised.
    """
    if paths is None:
        return cmd
    status = AccessResult.NOT_FOUND
    for directory in paths:
        path_name = f"{directory}/{cmd}"
        status = check_bin_access(path_name)
        if status == AccessResult.FOUND:
            return path_name
    error_status(status, cmd, FORK, err)
    return cmd


def get_error_status(
    error: AccessResult, variable: str, err: Optional[TextIO] = None
) -> int:
    """Report ``error`` for ``variable`` and return the matching exit status."""
    out = _stream(err)
    status = 127
    if error == AccessResult.IS_DIR:
        out.write(f"{variable}: Is a directory\n")
        status = 126
    elif error == AccessResult.X_NOK:
        out.write(f"{variable}: Permission denied\n")
        status = 126
    elif error == AccessResult.NOT_FOUND and "/" in variable:
        out.write(f"{variable}: No such file or directory\n")
    elif error == AccessResult.NOT_FOUND:
        out.write(f"{variable}: command not found\n")
    elif error == AccessResult.EXEC_ERROR:
        out.write(f"{variable}: No such file or directory\n")
    return status


def error_status(
    error: AccessResult, variable: str, is_fork: int, err: Optional[TextIO] = None
) -> int:
    """Report ``error``; inside a child (``is_fork == FORK``) raise ShellExit."""
    status = get_error_status(error, variable, err)
    if is_fork == FORK:
        raise ShellExit(status)
    return status


def specific_errors(cmd: str, err: Optional[TextIO] = None) -> None:
    """Refuse the command names ``.``, ``..`` and the empty string with ShellExit."""
    out = _stream(err)
    if cmd == ".":
        out.write(f"{cmd}: filename argument required\n")
        raise ShellExit(2)
    if cmd in ("..", ""):
        out.write(f"{cmd}: command not found\n")
        raise ShellExit(127)


def check_file_status(
    status: int, cmd: str, mode: int, err: Optional[TextIO] = None
) -> int:
    """Return the status for running ``cmd`` whose file has ``mode``.

    A directory gives 126 when named by path and 127 otherwise; anything
    else leaves ``status`` unchanged.
    """
    out = _stream(err)
    if stat.S_ISDIR(mode) and "/" in cmd:
        out.write(f"{cmd}: Is a directory\n")
        return 126
    if stat.S_ISDIR(mode):
        out.write(f"{cmd}: command not found\n")
        return 127
    return status