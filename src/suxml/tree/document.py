"""The suxml document: prolog, root tree and the operations an editor needs.

One ``XMLDocument`` is created per edited file. ``parse`` fills it
destructively; on a fatal error the partially built tree is kept so the user
can still edit and save it. All other operations act in place on the live
tree, addressing nodes by identity.
"""

from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Tuple, Union

from suxml.shared.config import EditorConfig
from suxml.shared.errors import ParseError, ParseErrorKind
from suxml.shared.logging import get_logger
from suxml.shared.result import FieldEditResult, ParseStatistics
from suxml.tree import editing
from suxml.tree.builder import XMLTreeBuilder
from suxml.tree.lines import DisplayLine, edit_line, render_lines
from suxml.tree.nodes import (
    ChildNode,
    Node,
    XMLDeclaration,
    XMLDoctype,
    XMLTag,
    depth_of,
    iter_nodes,
    node_to_dict,
)
from suxml.tree.serializer import serialize_document

PathType = Union[str, Path]


class XMLDocument:
    """Aggregate root holding the optional prolog and the mandatory root tag.

    Attributes:
        declaration: The ``<?xml ...?>`` prolog, if present
        doctype: The ``<!DOCTYPE ...>`` entry, if present
        root: Root tag; an empty placeholder until the first parse
        last_parsed_line: Line the most recent parse stopped at
        statistics: Counters from the most recent parse
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or EditorConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_document")

        self.declaration: Optional[XMLDeclaration] = None
        self.doctype: Optional[XMLDoctype] = None
        self.root = XMLTag("")
        self.last_parsed_line = 0
        self.statistics = ParseStatistics()

    # Parsing

    def parse(self, path: PathType) -> ParseStatistics:
        """Parse the file at ``path`` into this document.

        Raises:
            ParseError: ``CANNOT_OPEN_FILE`` if the file cannot be read, or the
                first fatal syntax error (the partial tree is kept)
        """
        try:
            data = Path(path).read_bytes()
        except OSError as e:
            self.logger.error(
                "Cannot open file",
                extra={"path": str(path), "error": str(e)}
            )
            raise ParseError(ParseErrorKind.CANNOT_OPEN_FILE, 0, str(path)) from e
        return self.parse_bytes(data)

    def parse_bytes(self, data: bytes) -> ParseStatistics:
        scanner_config = self.config.scanner
        return self.parse_string(data.decode(scanner_config.encoding, scanner_config.errors))

    def parse_string(self, text: str) -> ParseStatistics:
        """Parse ``text`` into this document, replacing any previous tree."""
        builder = XMLTreeBuilder(self, self.correlation_id)
        try:
            builder.build(text)
        finally:
            self.statistics = builder.statistics
            if self.config.projection.expand_root_on_parse:
                self.root.expanded = True
        return self.statistics

    # Output

    def serialize(self) -> str:
        return serialize_document(self, self.config.serializer)

    def to_bytes(self) -> bytes:
        scanner_config = self.config.scanner
        return self.serialize().encode(scanner_config.encoding, scanner_config.errors)

    def write(self, path: PathType) -> bool:
        """Write the canonical serialization to ``path`` in a single write.

        Returns False (and leaves the tree untouched) if the write fails, so
        the caller can simply retry.
        """
        try:
            data = self.to_bytes()
            with open(path, "wb", buffering=0) as f:
                f.write(data)
        except (OSError, UnicodeEncodeError) as e:
            self.logger.error(
                "Failed to write document",
                extra={"path": str(path), "error": str(e)}
            )
            return False
        self.logger.info("Document written", extra={"path": str(path), "bytes": len(data)})
        return True

    def render_lines(self) -> List[DisplayLine]:
        return render_lines(self, self.config.projection)

    def edit_line(self, node: Node, cursor: int, edit_buffer: str) -> Tuple[str, int]:
        return edit_line(node, cursor, edit_buffer)

    # Field edits

    def set_field(self, node: Node, index: int, text: str) -> FieldEditResult:
        return editing.set_field(node, index, text)

    def delete_field(self, node: Node, index: int) -> bool:
        return editing.delete_field(node, index)

    # Structural edits

    def delete_node(self, target: Node) -> bool:
        """Remove ``target`` and its subtree. The root can never be deleted.

        Deleting the declaration or doctype node drops it from the document.
        """
        if target is self.root:
            return False
        if target is self.declaration:
            self.declaration = None
            return True
        if target is self.doctype:
            self.doctype = None
            return True
        deleted = editing.delete_node(self.root, target)
        self.logger.debug(
            "Delete node",
            extra={"node_type": type(target).__name__, "deleted": deleted}
        )
        return deleted

    def insert_node(self, anchor: Node, force_after: bool, new_node: ChildNode) -> bool:
        """Insert ``new_node`` into or after ``anchor``.

        The root only accepts insertion as its first child; it has no siblings.

        Raises:
            TypeError: If ``new_node`` is not a tag, content or comment
            ValueError: If ``new_node`` or any node below it is already in the tree
        """
        editing.check_insertable(new_node, self.root)
        if anchor is self.root and force_after:
            return False
        inserted = editing.insert_node(self.root, anchor, force_after, new_node)
        self.logger.debug(
            "Insert node",
            extra={
                "node_type": type(new_node).__name__,
                "force_after": force_after,
                "inserted": inserted,
            }
        )
        return inserted

    def find(self, query: str) -> bool:
        return editing.find(self.root, query)

    def expand_all(self) -> None:
        editing.expand_all(self.root)

    # Navigation

    def iter_nodes(self) -> Iterator[ChildNode]:
        return iter_nodes(self.root)

    def find_all(self, element: str) -> List[XMLTag]:
        return [
            node for node in iter_nodes(self.root)
            if isinstance(node, XMLTag) and node.element == element
        ]

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"root": node_to_dict(self.root)}
        if self.declaration is not None:
            result["declaration"] = node_to_dict(self.declaration)
        if self.doctype is not None:
            result["doctype"] = node_to_dict(self.doctype)
        result["max_depth"] = depth_of(self.root)
        return result

    def __str__(self) -> str:
        return self.serialize()
