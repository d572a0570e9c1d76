"""Tree building for suxml.

``XMLTreeBuilder`` drives a ``Scanner`` through the prolog (optional
declaration and doctype), the root tag and then a depth-first push/pop over an
explicit stack of open tags, writing nodes straight into the target document.

Parsing is strict: the first fatal condition raises ``ParseError`` with the
current line number. Because nodes are attached as soon as they are created,
whatever was built up to that point remains on the document and can still be
edited and saved.
"""

import time
from enum import Enum, auto
from typing import TYPE_CHECKING, List, Optional, Tuple

from suxml.character.scanner import WHITESPACE, Scanner
from suxml.shared.errors import ParseError, ParseErrorKind
from suxml.shared.logging import get_logger
from suxml.shared.result import ParseStatistics
from suxml.tree.nodes import (
    INVALID_FIRST_NAME_CHARS,
    RESERVED_NAME_CHARS,
    XMLAttribute,
    XMLComment,
    XMLContent,
    XMLDeclaration,
    XMLDoctype,
    XMLTag,
)

if TYPE_CHECKING:
    from suxml.tree.document import XMLDocument

DOCTYPE_KEYWORD = "DOCTYPE"
_NAME_STOP_CHARS = WHITESPACE + "/>" + RESERVED_NAME_CHARS


class BuilderState(Enum):
    """Where in the document the builder currently is."""

    BEFORE_DECLARATION = auto()
    BEFORE_DOCTYPE = auto()
    BEFORE_ROOT = auto()
    IN_TREE = auto()
    DONE = auto()


class XMLTreeBuilder:
    """Builds a document tree from source text.

    A builder is bound to one document; every call to ``build`` replaces that
    document's declaration, doctype and root.
    """

    def __init__(
        self,
        document: "XMLDocument",
        correlation_id: Optional[str] = None
    ) -> None:
        self.document = document
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")

        self.state = BuilderState.BEFORE_DECLARATION
        self.statistics = ParseStatistics()
        self._scanner = Scanner("")
        self._tag_stack: List[XMLTag] = []

    @property
    def line(self) -> int:
        return self._scanner.line

    def build(self, text: str) -> ParseStatistics:
        """Parse ``text`` into the bound document.

        Returns:
            Statistics about the nodes that were created

        Raises:
            ParseError: On the first fatal condition; the partial tree is kept
        """
        start_time = time.time()
        self._reset_state(text)

        self.logger.info(
            "Starting tree building",
            extra={"characters": len(text)}
        )

        try:
            self._build_document()
        except ParseError as e:
            self.logger.warning(
                "Tree building aborted",
                extra={"line": e.line, "kind": e.kind.name, "state": self.state.name}
            )
            raise
        finally:
            self._finalize_statistics(start_time)

        self.logger.info(
            "Tree building completed",
            extra={
                "nodes": self.statistics.nodes_created,
                "lines": self.statistics.lines_processed,
            }
        )
        return self.statistics

    def _reset_state(self, text: str) -> None:
        self._scanner = Scanner(text)
        self._tag_stack = []
        self.state = BuilderState.BEFORE_DECLARATION
        self.statistics = ParseStatistics()

        self.document.declaration = None
        self.document.doctype = None
        self.document.root = XMLTag("")

    def _finalize_statistics(self, start_time: float) -> None:
        self.document.last_parsed_line = self._scanner.line
        self.statistics.processing_time_ms = (time.time() - start_time) * 1000
        self.statistics.characters_processed = self._scanner.position
        self.statistics.lines_processed = self._scanner.line

    def _error(self, kind: ParseErrorKind, detail: Optional[str] = None) -> ParseError:
        return ParseError(kind, self._scanner.line, detail)

    def _build_document(self) -> None:
        scanner = self._scanner

        if scanner.read_whitespace() != "<":
            raise self._error(ParseErrorKind.CONTENT_BEFORE_ROOT)

        c = scanner.read_char()
        if c == "?":
            self._read_declaration()
            self._expect_only_whitespace_before_tag()
            c = scanner.read_char()
        self.state = BuilderState.BEFORE_DOCTYPE

        if c == "!":
            self._read_doctype()
            self._expect_only_whitespace_before_tag()
            c = scanner.read_char()
        self.state = BuilderState.BEFORE_ROOT

        root, open_ = self._read_start_tag(c, parent=None)
        if open_:
            self._tag_stack.append(root)
            self.state = BuilderState.IN_TREE
            self._build_tree()
        self.state = BuilderState.DONE

        if scanner.read_whitespace(eof_ok=True) is not None:
            raise self._error(ParseErrorKind.TRAILING_CONTENT_AFTER_ROOT)

    def _expect_only_whitespace_before_tag(self) -> None:
        if self._scanner.read_whitespace() != "<":
            raise self._error(ParseErrorKind.CONTENT_BETWEEN_PROLOG_AND_ROOT)

    def _read_declaration(self) -> None:
        scanner = self._scanner
        name = scanner.read_until(WHITESPACE + "?")
        if name != "xml":
            raise self._error(ParseErrorKind.INVALID_DECLARATION, name)

        declaration = XMLDeclaration()
        self.document.declaration = declaration
        scanner.unread_one()
        self._read_attributes(declaration.attributes, declaration=True)

        if scanner.char != "?" or scanner.read_char() != ">":
            raise self._error(ParseErrorKind.INVALID_DECLARATION)

    def _read_doctype(self) -> None:
        scanner = self._scanner
        keyword = scanner.read_until(WHITESPACE + ">")
        if keyword != DOCTYPE_KEYWORD:
            raise self._error(ParseErrorKind.INVALID_DOCTYPE_KEYWORD, keyword)
        if scanner.char == ">":
            self.document.doctype = XMLDoctype("")
            return

        # An internal subset may hold nested <...> declarations
        parts = []
        nesting = 0
        while True:
            c = scanner.read_char()
            if c == "<":
                nesting += 1
            elif c == ">":
                if nesting == 0:
                    break
                nesting -= 1
            parts.append(c)
        self.document.doctype = XMLDoctype("".join(parts).strip(WHITESPACE))

    def _read_start_tag(self, c: str, parent: Optional[XMLTag]) -> Tuple[XMLTag, bool]:
        """Read a start tag whose first name character ``c`` was just consumed.

        Returns the new tag and whether it was left open (not self-closed).
        """
        scanner = self._scanner
        if c in INVALID_FIRST_NAME_CHARS or c in WHITESPACE or c in "/>":
            raise self._error(ParseErrorKind.INVALID_FIRST_NAME_CHARACTER, c)
        scanner.unread_one()

        element = scanner.read_until(_NAME_STOP_CHARS)
        if scanner.char in RESERVED_NAME_CHARS:
            raise self._error(ParseErrorKind.INVALID_NAME_CHARACTER, scanner.char)
        scanner.unread_one()

        tag = XMLTag(element)
        if parent is None:
            self.document.root = tag
        else:
            parent.children.append(tag)
        self.statistics.tags_created += 1
        self.statistics.max_depth = max(self.statistics.max_depth, len(self._tag_stack))

        self._read_attributes(tag.attributes)
        if scanner.char == ">":
            return tag, True
        if scanner.read_char() != ">":
            raise self._error(ParseErrorKind.MALFORMED_EMPTY_ELEMENT_TAG)
        return tag, False

    def _read_attributes(
        self,
        attributes: List[XMLAttribute],
        declaration: bool = False
    ) -> None:
        """Append name="value" pairs to ``attributes`` until the tag ends.

        Stops with the terminating character (``>``, ``/`` or, for the
        declaration, ``?``) consumed and available as ``scanner.char``.
        """
        scanner = self._scanner
        while True:
            c = scanner.read_whitespace()
            if c in ">/" or (declaration and c == "?"):
                return
            scanner.unread_one()

            name = scanner.read_until(_NAME_STOP_CHARS)
            if scanner.char == "=":
                if not name:
                    raise self._error(ParseErrorKind.INVALID_FIRST_NAME_CHARACTER, "=")
            elif scanner.char in RESERVED_NAME_CHARS:
                raise self._error(ParseErrorKind.INVALID_NAME_CHARACTER, scanner.char)
            else:
                raise self._error(ParseErrorKind.ATTRIBUTE_LACKS_VALUE, name)

            quote = scanner.read_char()
            if quote not in "\"'":
                raise self._error(ParseErrorKind.ATTRIBUTE_VALUE_NOT_QUOTED, name)
            value = scanner.read_until(quote)
            if '"' in value:
                raise self._error(ParseErrorKind.INVALID_ATTRIBUTE_VALUE, name)

            attributes.append(XMLAttribute(name, value))
            self.statistics.attributes_read += 1

    def _build_tree(self) -> None:
        scanner = self._scanner
        while self._tag_stack:
            top = self._tag_stack[-1]

            scanner.read_whitespace()
            scanner.unread_one()
            text = scanner.read_until("<").rstrip(WHITESPACE)
            if text:
                top.children.append(XMLContent(text))
                self.statistics.content_nodes_created += 1

            c = scanner.read_char()
            if c == "!":
                top.children.append(self._read_comment())
                self.statistics.comments_created += 1
            elif c == "/":
                element = scanner.read_until(">")
                if element != top.element:
                    raise self._error(
                        ParseErrorKind.MISMATCHED_END_TAG,
                        f"expected </{top.element}>, got </{element}>"
                    )
                self._tag_stack.pop()
            else:
                tag, open_ = self._read_start_tag(c, parent=top)
                if open_:
                    self._tag_stack.append(tag)

    def _read_comment(self) -> XMLComment:
        scanner = self._scanner
        for _ in range(2):
            if scanner.read_char() != "-":
                raise self._error(ParseErrorKind.MALFORMED_COMMENT, "expected <!--")

        parts = []
        while True:
            parts.append(scanner.read_until("-"))
            if scanner.read_char() == "-":
                break
            parts.append("-")
            scanner.unread_one()

        # Line of the "--" itself
        line = scanner.line
        if scanner.read_char() != ">":
            raise ParseError(ParseErrorKind.MALFORMED_COMMENT, line)
        return XMLComment("".join(parts))
