"""suxml: an in-memory XML document model for interactive editing.

Parses a practical subset of XML into an editable tree, keeps whatever was
built when the input turns out to be malformed, and writes the tree back in
one canonical, tab-indented form.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured parser - SuxmlParser class
- Level 3: Document editing - XMLDocument and its line projection
"""

__version__ = "0.1.0"
__author__ = "suxml developers"

from .api import SuxmlParser, parse, parse_file, parse_string
from .api.parser import ParseResult
from .shared.config import EditorConfig
from .shared.errors import EarlyEofError, ParseError, ParseErrorKind
from .tree import (
    DisplayLine,
    XMLAttribute,
    XMLComment,
    XMLContent,
    XMLDeclaration,
    XMLDoctype,
    XMLDocument,
    XMLTag,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",

    # Level 2: Configured parser
    "SuxmlParser",
    "EditorConfig",

    # Result objects and data structures
    "ParseResult",
    "XMLDocument",
    "DisplayLine",
    "XMLAttribute",
    "XMLComment",
    "XMLContent",
    "XMLDeclaration",
    "XMLDoctype",
    "XMLTag",

    # Errors
    "EarlyEofError",
    "ParseError",
    "ParseErrorKind",
]
