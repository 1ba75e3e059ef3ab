"""The shell's environment table: ordered ``KEY=VALUE`` or bare ``KEY`` lines."""

from __future__ import annotations

import os
from collections.abc import Iterable, Iterator, Mapping
from typing import Optional, Union

EnvSource = Union[Mapping[str, str], Iterable[str], None]


def _key_of(line: str) -> str:
    return line.partition("=")[0]


def compare_var(s1: str, s2: str) -> bool:
    """Return True when both lines name the same variable.

    The name of a line is everything before its first ``=``, or the whole
    line when it has none.
    """
    return _key_of(s1) == _key_of(s2)


def find_key(key: str, table: Iterable[str]) -> bool:
    """Return True if any line of ``table`` names ``key``."""
    return any(compare_var(key, line) for line in table)


def get_env_table(environ: EnvSource = None) -> list[str]:
    """Build a fresh environment table.

    ``environ`` may be a mapping of names to values, an iterable of lines,
    or None to copy the process environment.
    """
    if environ is None:
        environ = os.environ
    if isinstance(environ, Mapping):
        return [f"{key}={value}" for key, value in environ.items()]
    return [str(line) for line in environ]


class Environment:
    """A mutable, ordered environment table.

    A variable exported without a value is kept as a bare name: it is listed
    by ``export`` but has no value and is not passed to child programs.
    """

    def __init__(self, environ: EnvSource = None) -> None:
        self.lines: list[str] = get_env_table(environ)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __repr__(self) -> str:
        return f"Environment({self.lines!r})"

    def insert(self, key: str, value: Optional[str] = None) -> None:
        """Set ``key`` to ``value``, or declare it without a value.

        An existing variable keeps its position. Declaring a name that already
        exists without a value leaves it untouched.
        """
        if value is None:
            if not self.has_key(key):
                self.lines.append(key)
            return
        new_line = f"{key}={value}"
        if self.has_key(key):
            self.lines = [
                new_line if compare_var(key, line) else line for line in self.lines
            ]
        else:
            self.lines.append(new_line)

    def delete(self, key: str) -> None:
        """Remove ``key`` from the table; unknown names are ignored."""
        self.lines = [line for line in self.lines if not compare_var(key, line)]

    def get(self, key: str) -> Optional[str]:
        """Return the value of ``key``, or None if it is unset or has no value."""
        for line in self.lines:
            name, sep, value = line.partition("=")
            if sep and name == key:
                return value
        return None

    def has_key(self, key: str) -> bool:
        """Return True if ``key`` is declared, with or without a value."""
        return find_key(key, self.lines)

    def as_dict(self) -> dict[str, str]:
        """Return the variables that have a value, as a mapping."""
        result: dict[str, str] = {}
        for line in self.lines:
            name, sep, value = line.partition("=")
            if sep and name not in result:
                result[name] = value
        return result