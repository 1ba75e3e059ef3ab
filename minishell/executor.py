"""Running a command tree: operators, pipes, subshells, redirections and commands."""

from __future__ import annotations

import os
import subprocess
from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from typing import Optional, TextIO

from minishell.builtins import (
    ShellExit,
    cd,
    echo,
    env_builtin,
    exit_builtin,
    pwd,
    unset,
)
from minishell.environment import Environment
from minishell.exporting import export
from minishell.paths import (
    check_bin_access,
    check_paths,
    error_status,
    find_paths,
    get_error_status,
    specific_errors,
)
from minishell.status import update_exit_status
from minishell.tokens import (
    ERR,
    FORK,
    IN,
    OUT,
    AccessResult,
    Token,
    TokenType,
    Tree,
    list_to_array,
)
from minishell.wordsplit import string_to_matrix

TreeBuilder = Callable[[list[Token]], Optional[Tree]]

_BUILTINS = frozenset({"echo", "cd", "pwd", "export", "unset", "env", "exit"})
_INTERRUPTED = 130
_QUIT = 131


def check_status(kind: TokenType, status: int) -> bool:
    """Return True if the right operand of ``&&`` / ``||`` should run.

    An interrupted left side (status 130) stops the chain.
    """
    if status == _INTERRUPTED:
        return False
    if kind == TokenType.AND and status != 0:
        return False
    if kind == TokenType.OR and status == 0:
        return False
    return True


def remove_parentheses(tokens: Sequence[Token]) -> list[Token]:
    """Return the tokens between the opening and the closing parenthesis."""
    if len(tokens) < 2:
        raise ValueError("a parenthesised group needs both parentheses")
    return list(tokens[1:-1])


@contextmanager
def saved_fds() -> Iterator[tuple[int, int, int]]:
    """Save the standard descriptors and restore them when the block ends."""
    saved = (os.dup(IN), os.dup(OUT), os.dup(ERR))
    try:
        yield saved
    finally:
        for target, copy in zip((IN, OUT, ERR), saved):
            os.dup2(copy, target)
            os.close(copy)


def _fd_writer(fd: int) -> TextIO:
    return open(fd, "w", encoding="utf-8", closefd=False)


def _write_err(text: str) -> None:
    os.write(ERR, text.encode("utf-8", "replace"))


def _decode_wait(wait_status: int) -> int:
    code = os.waitstatus_to_exitcode(wait_status)
    return 128 - code if code < 0 else code


def _decode_returncode(code: int) -> int:
    return 128 - code if code < 0 else code


class Executor:
    """Runs command trees against an environment.

    ``build_tree`` turns the tokens inside parentheses into a tree; without
    it the group is run as one simple command.
    """

    def __init__(
        self,
        env: Optional[Environment] = None,
        build_tree: Optional[TreeBuilder] = None,
    ) -> None:
        self.env = Environment() if env is None else env
        self.build_tree = build_tree

    def execute(self, tree: Optional[Tree]) -> int:
        """Run ``tree``, record its exit status and return it."""
        if tree is None:
            return 1
        try:
            status = self.execute_tree(tree)
        except KeyboardInterrupt:
            status = _INTERRUPTED
        if update_exit_status(status) == _QUIT:
            _write_err("Quit (core dumped)\n")
        return status

    def execute_tree(self, tree: Tree) -> int:
        """Dispatch on the kind of the tree's leading token."""
        kind = tree.kind()
        if kind.is_logical:
            return self.execute_and_or(tree)
        if kind == TokenType.PIPE:
            return self.execute_pipe(tree)
        if kind.is_redirection:
            return self.execute_redir(tree)
        if kind == TokenType.OPEN_PAR:
            return self.execute_par(tree)
        return self.execute_command(tree)

    def execute_and_or(self, tree: Tree) -> int:
        """Run the left side, then the right one if the operator allows it."""
        status = self.execute_tree(tree.left)
        if check_status(tree.kind(), status):
            status = self.execute_tree(tree.right)
        return status

    def _fork(self, body: Callable[[], int]) -> int:
        pid = os.fork()
        if pid == 0:
            status = 1
            try:
                status = body()
            except ShellExit as exc:
                status = exc.status
            except BaseException:
                status = 1
            finally:
                os._exit(status & 0xFF)
        return pid

    def execute_pipe(self, tree: Tree) -> int:
        """Run both sides in child processes joined by a pipe."""
        read_fd, write_fd = os.pipe()

        def writer() -> int:
            os.dup2(write_fd, OUT)
            os.close(write_fd)
            os.close(read_fd)
            return self.execute_tree(tree.left)

        def reader() -> int:
            os.dup2(read_fd, IN)
            os.close(read_fd)
            return self.execute_tree(tree.right)

        left_pid = self._fork(writer)
        os.close(write_fd)
        right_pid = self._fork(reader)
        os.close(read_fd)
        _, left_status = os.waitpid(left_pid, 0)
        _, right_status = os.waitpid(right_pid, 0)
        if _decode_wait(left_status) == _INTERRUPTED:
            return _INTERRUPTED
        return _decode_wait(right_status)

    def execute_par(self, tree: Tree) -> int:
        """Run the parenthesised group in a child process."""
        inner_tokens = remove_parentheses(tree.tokens)
        if self.build_tree is not None:
            inner = self.build_tree(inner_tokens)
        else:
            inner = Tree(tokens=inner_tokens)
        pid = self._fork(lambda: self.execute(inner))
        _, wait_status = os.waitpid(pid, 0)
        return _decode_wait(wait_status)

    @staticmethod
    def _redirect_target(target: Optional[Tree]) -> Optional[str]:
        value = target.tokens[0].value if target is not None and target.tokens else ""
        words = string_to_matrix(value or "")
        if len(words) > 1:
            return None
        return words[0] if words else ""

    @staticmethod
    def _apply_redirection(kind: TokenType, name: str) -> int:
        if kind in (TokenType.IN_REDIR, TokenType.HEREDOC):
            flags, target = os.O_RDONLY, IN
        elif kind == TokenType.OUT_REDIR:
            flags, target = os.O_WRONLY | os.O_CREAT | os.O_TRUNC, OUT
        else:
            flags, target = os.O_WRONLY | os.O_CREAT | os.O_APPEND, OUT
        try:
            fd = os.open(name, flags, 0o664)
        except OSError as exc:
            _write_err(f"{name}: {exc.strerror}\n")
            return 1
        try:
            os.dup2(fd, target)
        finally:
            os.close(fd)
        return 0

    def execute_redir(self, tree: Tree) -> int:
        """Redirect a standard descriptor to a file and run the left side."""
        kind = tree.kind()
        name = self._redirect_target(tree.right)
        if name is None:
            _write_err("ambiguous redirect\n")
            return 1
        if kind != TokenType.HEREDOC and not name:
            _write_err(" : No such file or directory\n")
            return 1
        with saved_fds():
            status = self._apply_redirection(kind, name)
            if tree.left is not None and status == 0:
                status = self.execute_tree(tree.left)
        return status

    def _run_builtin(self, args: list[str]) -> int:
        name = args[0]
        with _fd_writer(OUT) as out, _fd_writer(ERR) as err:
            if name == "echo":
                return echo(args, out)
            if name == "cd":
                return cd(args, self.env, err)
            if name == "pwd":
                return pwd(out, err)
            if name == "export":
                return export(args, self.env, out, err)
            if name == "unset":
                return unset(args, self.env, err)
            if name == "env":
                return env_builtin(args, self.env, out, err)
            return exit_builtin(args, err)

    def _resolve(self, name: str) -> str:
        with _fd_writer(ERR) as err:
            specific_errors(name, err)
            if "/" in name:
                access = check_bin_access(name)
                if access != AccessResult.FOUND:
                    error_status(access, name, FORK, err)
                return name
            return check_paths(find_paths(name, self.env), name, err)

    def execute_command(self, tree: Tree) -> int:
        """Run a simple command: a builtin in-process, anything else as a program."""
        args = [value or "" for value in list_to_array(tree.tokens)]
        if args[0] in _BUILTINS:
            return self._run_builtin(args)
        try:
            path_name = self._resolve(args[0])
        except ShellExit as exc:
            return exc.status
        executable = path_name if "/" in path_name else os.path.join(".", path_name)
        try:
            completed = subprocess.run(
                args, executable=executable, env=self.env.as_dict(), check=False
            )
        except OSError:
            with _fd_writer(ERR) as err:
                return get_error_status(AccessResult.EXEC_ERROR, path_name, err)
        return _decode_returncode(completed.returncode)