"""Reading here-documents into temporary files."""

from __future__ import annotations

import itertools
import os
import string
import sys
import tempfile
from collections.abc import Callable
from typing import Optional, TextIO

from minishell.status import exit_status, update_exit_status
from minishell.tokens import Token, TokenType
from minishell.wordsplit import string_to_matrix

_NAME_CHARS = frozenset(string.ascii_letters + "_")
_BLANKS = (" ", "\n", "\t")
_QUOTED = (TokenType.SING_QUOTE, TokenType.DOUB_QUOTE)
_EOF_WARNING = (
    "minishell (\u25d5\u203f\u25d5): warning: "
    "here-document delimited by end of file\n"
)

_counter = itertools.count()

ReadLine = Callable[[str], Optional[str]]


def expand_heredoc(text: str, env=None) -> str:
    """Expand ``$NAME`` and ``$?`` in one here-document line.

    Names are made of letters and underscores; unknown names expand to
    nothing. A ``$`` not followed by a name or ``?`` is kept as is.
    """
    if env is None:
        env = os.environ
    parts: list[str] = []
    i = 0
    length = len(text)
    while i < length:
        char = text[i]
        if char != "$":
            parts.append(char)
            i += 1
            continue
        i += 1
        if i < length and text[i] == "?":
            parts.append(str(exit_status()))
            i += 1
        elif i < length and text[i] in _NAME_CHARS:
            start = i
            while i < length and text[i] in _NAME_CHARS:
                i += 1
            value = env.get(text[start:i])
            if value is not None:
                parts.append(value)
        else:
            parts.append("$")
    return "".join(parts)


def check_quote_delimiter(token: Token) -> str:
    """Return the delimiter named by ``token``, with its quotes trimmed."""
    if token.type == TokenType.SING_QUOTE:
        return (token.value or "").strip("'")
    if token.type == TokenType.DOUB_QUOTE:
        return (token.value or "").strip('"')
    return token.value or ""


def _unquoted(value: Optional[str]) -> str:
    words = string_to_matrix(value or "")
    return words[0] if words else ""


def join_delimiter(tokens: list[Token], index: int) -> Token:
    """Merge the delimiter at ``index`` with the word pieces glued to it.

    Adjacent word or quote tokens with no blank between them form one
    delimiter with quotes removed; it is marked quoted if any piece was.
    ``tokens`` is changed in place and the delimiter token is returned.
    """
    first = tokens[index]
    has_quote = first.type in _QUOTED
    pieces = [_unquoted(first.value)]
    end = index
    while (
        end + 1 < len(tokens)
        and tokens[end].next_char not in _BLANKS
        and tokens[end + 1].type > TokenType.HEREDOC
    ):
        following = tokens[end + 1]
        if following.type in _QUOTED:
            has_quote = True
        pieces.append(_unquoted(following.value))
        end += 1
    if end == index:
        return first
    joined = Token(
        value="".join(pieces),
        type=TokenType.DOUB_QUOTE if has_quote else first.type,
        next_char=" ",
    )
    tokens[index : end + 1] = [joined]
    return joined


def create_heredoc_temp(token: Token, directory: Optional[str] = None) -> TextIO:
    """Create the next ``.here_N`` file, point ``token`` at it and open it for writing."""
    directory = tempfile.gettempdir() if directory is None else directory
    path = os.path.join(directory, f".here_{next(_counter)}")
    token.value = path
    return open(path, "w", encoding="utf-8")


def _read_stdin(prompt: str) -> Optional[str]:
    try:
        return input(prompt)
    except EOFError:
        return None


def check_heredoc(
    tokens: list[Token],
    env=None,
    read_line: Optional[ReadLine] = None,
    err: Optional[TextIO] = None,
) -> bool:
    """Read the body of every here-document in ``tokens`` into a temporary file.

    ``read_line`` returns one line, or None at end of input. Each delimiter
    token is replaced by the path of its file. Returns False if reading was
    interrupted, in which case the exit status becomes 130.
    """
    read_line = _read_stdin if read_line is None else read_line
    err = sys.stderr if err is None else err
    index = 0
    while index + 1 < len(tokens):
        if tokens[index].type == TokenType.HEREDOC:
            target = join_delimiter(tokens, index + 1)
            delimiter = check_quote_delimiter(target)
            expand = target.type not in _QUOTED
            with create_heredoc_temp(target) as body:
                try:
                    line = read_line("> ")
                    while line is not None and line != delimiter:
                        if expand:
                            line = expand_heredoc(line, env)
                        body.write(line + "\n")
                        line = read_line("> ")
                except KeyboardInterrupt:
                    update_exit_status(130)
                    return False
            if line is None:
                err.write(_EOF_WARNING)
                update_exit_status(0)
        index += 1
    return True