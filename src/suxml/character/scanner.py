"""Character cursor used by the tree builder.

The scanner walks decoded input one character at a time, supports a single
level of pushback for one-character lookahead, and keeps a running line
count so that parse errors can report where they happened.
"""

from typing import Container, Optional

from suxml.shared.errors import EarlyEofError

WHITESPACE = " \t\n\r"


class Scanner:
    """Single-pass cursor over a string with one character of pushback.

    Attributes:
        line: 1-based line of the cursor, incremented on every consumed newline
        char: The last character read (empty before the first read)
    """

    def __init__(self, text: str) -> None:
        self._text = text
        self._position = 0
        self._pushed_back = False
        self.line = 1
        self.char = ""

    @property
    def position(self) -> int:
        """Offset of the next character to be read."""
        return self._position

    @property
    def at_eof(self) -> bool:
        return self._position >= len(self._text)

    def read_char(self) -> str:
        """Consume and return the next character.

        Raises:
            EarlyEofError: If the input is exhausted
        """
        if self._position >= len(self._text):
            raise EarlyEofError(self.line)
        c = self._text[self._position]
        self._position += 1
        self._pushed_back = False
        if c == "\n":
            self.line += 1
        self.char = c
        return c

    def unread_one(self) -> None:
        """Push the last read character back onto the input.

        Raises:
            RuntimeError: If nothing was read since the last pushback
        """
        if self._pushed_back or self._position == 0:
            raise RuntimeError("only one character of pushback is supported")
        self._position -= 1
        self._pushed_back = True
        if self._text[self._position] == "\n":
            self.line -= 1

    def read_until(self, stop_chars: Container[str]) -> str:
        """Read up to and including the first character in ``stop_chars``.

        The stop character is consumed and left in ``char`` but is not part of
        the returned string.

        Raises:
            EarlyEofError: If the input ends before a stop character
        """
        start = self._position
        while True:
            c = self.read_char()
            if c in stop_chars:
                return self._text[start:self._position - 1]

    def read_whitespace(self, eof_ok: bool = False) -> Optional[str]:
        """Skip whitespace and return the first other character (consumed).

        Returns None at end of input when ``eof_ok`` is set.
        """
        while True:
            if eof_ok and self._position >= len(self._text):
                return None
            c = self.read_char()
            if c not in WHITESPACE:
                return c
