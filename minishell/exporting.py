"""The ``export`` builtin and the helpers it uses."""

from __future__ import annotations

import string
import sys
from collections.abc import Iterable, Sequence
from typing import Optional, TextIO

from minishell.environment import Environment

_NAME_START = frozenset(string.ascii_letters + "_")
_NAME_REST = frozenset(string.ascii_letters + string.digits + "_")


def is_valid_var(text: str) -> bool:
    """Return True if ``text`` is a valid shell variable name."""
    if not text or text[0] not in _NAME_START:
        return False
    return all(char in _NAME_REST for char in text[1:])


def is_there_equal(text: str) -> bool:
    """Return True if ``text`` contains an ``=``."""
    return "=" in text


def find_key_value(text: str) -> Optional[tuple[str, str]]:
    """Split ``text`` at its first ``=`` into name and value, or return None."""
    if not is_there_equal(text):
        return None
    key, _, value = text.partition("=")
    return key, value


def add_quote_and_join(line: str) -> str:
    """Render ``KEY=VALUE`` as ``KEY="VALUE"``; bare names are left alone."""
    pair = find_key_value(line)
    if pair is None:
        return line
    key, value = pair
    return f'{key}="{value}"'


def current_is_first(current: str, following: str) -> bool:
    """Return True if the name of ``current`` sorts no later than that of ``following``."""
    return current.partition("=")[0] <= following.partition("=")[0]


def ordenate_table(lines: Iterable[str]) -> list[str]:
    """Return the lines sorted by variable name."""
    return sorted(lines, key=lambda line: line.partition("=")[0])


def print_detail_table(env: Iterable[str], out: Optional[TextIO] = None) -> None:
    """Write every variable as a sorted ``declare -x`` listing."""
    out = sys.stdout if out is None else out
    for line in ordenate_table(add_quote_and_join(line) for line in env):
        out.write(f"declare -x {line}\n")


def export(
    args: Sequence[str],
    env: Environment,
    out: Optional[TextIO] = None,
    err: Optional[TextIO] = None,
) -> int:
    """Run ``export``; ``args`` is the full argument vector including the name.

    Returns 0, or 1 if any argument was not a valid identifier.
    """
    out = sys.stdout if out is None else out
    err = sys.stderr if err is None else err
    status = 0
    operands = list(args[1:])
    if not operands:
        print_detail_table(env, out)
    for arg in operands:
        pair = find_key_value(arg)
        if pair is not None:
            key, value = pair
            if is_valid_var(key):
                env.insert(key, value)
                continue
        elif is_valid_var(arg):
            env.insert(arg, None)
            continue
        err.write("export: not a valid identifier\n")
        status = 1
    return status