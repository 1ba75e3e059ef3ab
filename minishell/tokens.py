"""Token and syntax-tree types shared by the parser and the executor."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Iterable, Optional

READ = 0
WRITE = 1

FORK = 1
CONSULT = -1

IN = 0
OUT = 1
ERR = 2


class TokenType(IntEnum):
    """Kinds of token, ordered so that operators and redirections come first."""

    AND = 1
    OR = 2
    PIPE = 3
    IN_REDIR = 4
    OUT_REDIR = 5
    APPEND = 6
    HEREDOC = 7
    WORD = 8
    EXPAND = 9
    SING_QUOTE = 10
    DOUB_QUOTE = 11
    OPEN_PAR = 12
    CLOSE_PAR = 13

    @property
    def is_redirection(self) -> bool:
        return self in (
            TokenType.IN_REDIR,
            TokenType.OUT_REDIR,
            TokenType.APPEND,
            TokenType.HEREDOC,
        )

    @property
    def is_logical(self) -> bool:
        return self in (TokenType.AND, TokenType.OR)


class AccessResult(IntEnum):
    """Outcome of looking up an executable."""

    FOUND = 1
    NOT_FOUND = 2
    X_NOK = 3
    IS_DIR = 4
    EXEC_ERROR = 5


@dataclass
class Token:
    """One lexical unit of a command line.

    ``next_char`` is the character that followed the token in the input,
    or an empty string at the end of the line.
    """

    value: Optional[str]
    type: TokenType = TokenType.WORD
    next_char: str = ""


@dataclass
class Tree:
    """A node of the command tree: its tokens plus optional children."""

    tokens: list[Token] = field(default_factory=list)
    left: Optional[Tree] = None
    right: Optional[Tree] = None

    def kind(self) -> TokenType:
        """Type of the node's leading token."""
        if not self.tokens:
            raise ValueError("tree node has no tokens")
        return self.tokens[0].type


def list_to_array(tokens: Iterable[Token]) -> list[Optional[str]]:
    """Return the values of the tokens, in order, as an argument vector."""
    return [token.value for token in tokens]