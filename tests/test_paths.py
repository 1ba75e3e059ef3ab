import io
import os
import stat

import pytest

from minishell.builtins import ShellExit
from minishell.environment import Environment
from minishell.paths import (
    check_bin_access,
    check_file_status,
    check_paths,
    error_status,
    find_paths,
    get_error_status,
    specific_errors,
)
from minishell.tokens import CONSULT, FORK, AccessResult


def _make_file(directory, name, mode):
    path = directory / name
    path.write_text("#!/bin/sh\n")
    os.chmod(path, mode)
    return path


def test_find_paths_splits_path():
    env = Environment({"PATH": "/bin:/usr/bin"})
    assert find_paths("ls", env) == ["/bin", "/usr/bin"]


def test_find_paths_drops_empty_entries():
    assert find_paths("ls", {"PATH": "/a::/b:"}) == ["/a", "/b"]


@pytest.mark.parametrize("env", [{}, {"PATH": ""}])
def test_find_paths_without_path(env):
    assert find_paths("ls", env) is None


def test_check_bin_access_directory(tmp_path):
    assert check_bin_access(str(tmp_path)) == AccessResult.IS_DIR


def test_check_bin_access_executable(tmp_path):
    path = _make_file(tmp_path, "tool", 0o755)
    assert check_bin_access(str(path)) == AccessResult.FOUND


def test_check_bin_access_not_executable(tmp_path):
    path = _make_file(tmp_path, "data", 0o644)
    assert check_bin_access(str(path)) == AccessResult.X_NOK


def test_check_bin_access_missing(tmp_path):
    assert check_bin_access(str(tmp_path / "nothing")) == AccessResult.NOT_FOUND


def test_check_paths_without_search_path_returns_command():
    assert check_paths(None, "prog") == "prog"


def test_check_paths_finds_executable(tmp_path):
    empty = tmp_path / "empty"
    empty.mkdir()
    full = tmp_path / "full"
    full.mkdir()
    _make_file(full, "tool", 0o755)
    assert check_paths([str(empty), str(full)], "tool") == f"{full}/tool"


def test_check_paths_not_found_exits(tmp_path):
    err = io.StringIO()
    with pytest.raises(ShellExit) as info:
        check_paths([str(tmp_path)], "nosuchprog", err)
    assert info.value.status == 127
    assert err.getvalue() == "nosuchprog: command not found\n"


def test_check_paths_permission_denied(tmp_path):
    _make_file(tmp_path, "tool", 0o644)
    err = io.StringIO()
    with pytest.raises(ShellExit) as info:
        check_paths([str(tmp_path)], "tool", err)
    assert info.value.status == 126
    assert err.getvalue() == "tool: Permission denied\n"


@pytest.mark.parametrize(
    "error, variable, status, message",
    [
        (AccessResult.IS_DIR, "/etc", 126, "/etc: Is a directory\n"),
        (AccessResult.X_NOK, "prog", 126, "prog: Permission denied\n"),
        (AccessResult.NOT_FOUND, "./prog", 127, "./prog: No such file or directory\n"),
        (AccessResult.NOT_FOUND, "prog", 127, "prog: command not found\n"),
        (AccessResult.EXEC_ERROR, "prog", 127, "prog: No such file or directory\n"),
    ],
)
def test_get_error_status(error, variable, status, message):
    err = io.StringIO()
    assert get_error_status(error, variable, err) == status
    assert err.getvalue() == message


def test_error_status_consult_returns():
    err = io.StringIO()
    assert error_status(AccessResult.IS_DIR, "/etc", CONSULT, err) == 126


def test_error_status_fork_raises():
    err = io.StringIO()
    with pytest.raises(ShellExit) as info:
        error_status(AccessResult.NOT_FOUND, "prog", FORK, err)
    assert info.value.status == 127


@pytest.mark.parametrize(
    "cmd, status, message",
    [
        (".", 2, ".: filename argument required\n"),
        ("..", 127, "..: command not found\n"),
        ("", 127, ": command not found\n"),
    ],
)
def test_specific_errors(cmd, status, message):
    err = io.StringIO()
    with pytest.raises(ShellExit) as info:
        specific_errors(cmd, err)
    assert info.value.status == status
    assert err.getvalue() == message


def test_specific_errors_accepts_ordinary_command():
    err = io.StringIO()
    specific_errors("ls", err)
    assert err.getvalue() == ""


def test_check_file_status_directory_by_path():
    err = io.StringIO()
    assert check_file_status(0, "./dir", stat.S_IFDIR | 0o755, err) == 126
    assert err.getvalue() == "./dir: Is a directory\n"


def test_check_file_status_directory_by_name():
    err = io.StringIO()
    assert check_file_status(0, "dir", stat.S_IFDIR | 0o755, err) == 127
    assert err.getvalue() == "dir: command not found\n"


def test_check_file_status_regular_file_keeps_status():
    err = io.StringIO()
    assert check_file_status(5, "./prog", stat.S_IFREG | 0o755, err) == 5
    assert err.getvalue() == ""