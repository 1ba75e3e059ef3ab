"""The shell's last exit status, shared across the process."""

from __future__ import annotations


class _ExitStatus:
    __slots__ = ("value",)

    def __init__(self) -> None:
        self.value = 0


_STATUS = _ExitStatus()


def exit_status() -> int:
    """Return the most recently recorded exit status."""
    return _STATUS.value


def update_exit_status(status: int) -> int:
    """Record ``status`` as the last exit status and return it."""
    _STATUS.value = int(status)
    return _STATUS.value