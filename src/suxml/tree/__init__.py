"""Tree layer for suxml.

Key Components:
    XMLDocument: Aggregate root with prolog, root tag and editing operations
    XMLTreeBuilder: Strict parser writing straight into a document
    XMLTag, XMLContent, XMLComment, XMLDeclaration, XMLDoctype: Node kinds
    DisplayLine: One row of the line projection
"""

from .builder import BuilderState, XMLTreeBuilder
from .document import XMLDocument
from .lines import DisplayLine, edit_line, render_lines
from .nodes import (
    ChildNode,
    Node,
    XMLAttribute,
    XMLComment,
    XMLContent,
    XMLDeclaration,
    XMLDoctype,
    XMLTag,
    iter_nodes,
)
from .serializer import serialize_document, serialize_node

__all__ = [
    "BuilderState",
    "XMLTreeBuilder",
    "XMLDocument",
    "DisplayLine",
    "edit_line",
    "render_lines",
    "ChildNode",
    "Node",
    "XMLAttribute",
    "XMLComment",
    "XMLContent",
    "XMLDeclaration",
    "XMLDoctype",
    "XMLTag",
    "iter_nodes",
    "serialize_document",
    "serialize_node",
]
