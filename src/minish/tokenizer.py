"""Split a command line into words.

Words are separated by whitespace. Single and double quotes group text
containing whitespace and backslash escapes the next character, following
POSIX shell quoting. No other shell syntax is recognized: `|`, `<`, `>`,
`&`, `$` and `#` are ordinary characters.
"""

from __future__ import annotations

import shlex
from typing import Iterator, Optional

from .errors import TokenizeError


class Tokens:
    """Ordered words of one input line.

    Index 0, if present, is the command name.
    """

    __slots__ = ("_words",)

    def __init__(self, words=()):
        self._words: tuple[str, ...] = tuple(words)

    def __len__(self) -> int:
        return len(self._words)

    def __iter__(self) -> Iterator[str]:
        return iter(self._words)

    def __repr__(self) -> str:
        return f"Tokens({list(self._words)!r})"

    def __eq__(self, other) -> bool:
        if isinstance(other, Tokens):
            return self._words == other._words
        return NotImplemented

    def get(self, index: int) -> Optional[str]:
        """Return the word at index, or None when there is no such word."""
        if 0 <= index < len(self._words):
            return self._words[index]
        return None

    @property
    def command(self) -> Optional[str]:
        return self.get(0)

    @property
    def words(self) -> list[str]:
        return list(self._words)

    def release(self) -> None:
        """Drop the words; the loop calls this before reading the next line."""
        self._words = ()


def tokenize(line: str) -> Tokens:
    """Split line into Tokens.

    Raises:
        TokenizeError: if a quote is left open or the line ends in a
            dangling backslash.
    """
    lexer = shlex.shlex(line, posix=True)
    lexer.whitespace_split = True
    lexer.commenters = ""
    try:
        return Tokens(lexer)
    except ValueError as e:
        raise TokenizeError(str(e).lower()) from e
