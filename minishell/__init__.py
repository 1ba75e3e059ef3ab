"""Core pieces of a small POSIX-style shell."""

__version__ = "0.1.0"