"""Public parsing API and library adapters for suxml."""

from .adapters import AdapterError, from_lxml, is_lxml_available, to_lxml
from .parser import (
    InputType,
    ParseResult,
    SuxmlParser,
    parse,
    parse_file,
    parse_string,
)

__all__ = [
    "AdapterError",
    "from_lxml",
    "is_lxml_available",
    "to_lxml",
    "InputType",
    "ParseResult",
    "SuxmlParser",
    "parse",
    "parse_file",
    "parse_string",
]
