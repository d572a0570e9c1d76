"""Error taxonomy for suxml.

Every fatal parse condition is a ``ParseError`` carrying a ``ParseErrorKind``
and the 1-based input line at the point of failure. Parsing aborts on the
first error; the partially built tree stays attached to the document.
"""

from enum import Enum
from typing import Optional


class ParseErrorKind(Enum):
    """Fatal parse conditions and their user-facing messages."""

    CANNOT_OPEN_FILE = "cannot open file"
    CONTENT_BEFORE_ROOT = "content before root tag"
    INVALID_DECLARATION = "invalid xml declaration"
    INVALID_DOCTYPE_KEYWORD = "invalid doctype keyword"
    CONTENT_BETWEEN_PROLOG_AND_ROOT = "content between prolog and root tag"
    INVALID_FIRST_NAME_CHARACTER = "invalid first character of name"
    INVALID_NAME_CHARACTER = "invalid character in name"
    ATTRIBUTE_LACKS_VALUE = "attribute lacks value"
    ATTRIBUTE_VALUE_NOT_QUOTED = "attribute value not in quotes"
    INVALID_ATTRIBUTE_VALUE = "attribute value contains a double quote"
    MALFORMED_COMMENT = "malformed comment, contains --"
    MISMATCHED_END_TAG = "mismatched end tag"
    MALFORMED_EMPTY_ELEMENT_TAG = "characters after / in empty-element tag"
    EARLY_EOF = "early eof"
    TRAILING_CONTENT_AFTER_ROOT = "root tag isn't alone"

    @property
    def message(self) -> str:
        """Human readable description of the condition."""
        return self.value


class SuxmlError(Exception):
    """Base exception for all suxml errors."""


class ParseError(SuxmlError):
    """Fatal error raised by the parser.

    Attributes:
        kind: Which condition aborted the parse
        line: 1-based input line where parsing stopped (0 when no input was read)
        detail: Optional extra context such as the offending name
    """

    def __init__(
        self,
        kind: ParseErrorKind,
        line: int,
        detail: Optional[str] = None,
    ) -> None:
        self.kind = kind
        self.line = line
        self.detail = detail
        message = f"line {line}: {kind.message}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


class EarlyEofError(ParseError):
    """Input ended in the middle of a structure."""

    def __init__(self, line: int, detail: Optional[str] = None) -> None:
        super().__init__(ParseErrorKind.EARLY_EOF, line, detail)
