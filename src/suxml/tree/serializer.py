"""Canonical serialization of suxml trees.

Output is normalized: every child sits on its own line indented by one indent
unit per depth level, children whose serialization is pure whitespace are
dropped, childless tags are self-closed and text is written verbatim (no
escaping is ever performed).
"""

from typing import TYPE_CHECKING, List, Optional

from suxml.character.scanner import WHITESPACE
from suxml.shared.config import SerializerConfig
from suxml.tree.nodes import (
    XMLAttribute,
    XMLComment,
    XMLContent,
    XMLDeclaration,
    XMLDoctype,
    XMLTag,
    Node,
)

if TYPE_CHECKING:
    from suxml.tree.document import XMLDocument

DEFAULT_INDENT = "\t"


def is_whitespace(text: str) -> bool:
    """True for empty strings and strings made only of whitespace."""
    return all(c in WHITESPACE for c in text)


def attributes_str(attributes: List[XMLAttribute]) -> str:
    return "".join(f' {a.name}="{a.value}"' for a in attributes)


def start_tag_str(tag: XMLTag) -> str:
    """``<name attrs>``, or ``<name attrs />`` when the tag has no children."""
    closing = " />" if not tag.children else ">"
    return f"<{tag.element}{attributes_str(tag.attributes)}{closing}"


def end_tag_str(tag: XMLTag) -> str:
    return f"</{tag.element}>"


def serialize_node(node: Node, depth: int = 0, indent: str = DEFAULT_INDENT) -> str:
    """Serialize one node (and its subtree) as it appears at ``depth``."""
    if isinstance(node, XMLTag):
        if not node.children:
            return start_tag_str(node)
        parts = [start_tag_str(node)]
        for child in node.children:
            child_str = serialize_node(child, depth + 1, indent)
            if not is_whitespace(child_str):
                parts.append("\n" + indent * (depth + 1) + child_str)
        parts.append("\n" + indent * depth + end_tag_str(node))
        return "".join(parts)
    if isinstance(node, XMLContent):
        return node.text
    if isinstance(node, XMLComment):
        return f"<!--{node.text}-->"
    if isinstance(node, XMLDeclaration):
        return f"<?xml{attributes_str(node.attributes)}?>"
    if isinstance(node, XMLDoctype):
        return f"<!DOCTYPE {node.text}>" if node.text else "<!DOCTYPE>"
    raise TypeError(f"Cannot serialize {type(node).__name__}")


def serialize_document(
    document: "XMLDocument",
    config: Optional[SerializerConfig] = None
) -> str:
    """Render the declaration, doctype and root tree as canonical text."""
    config = config or SerializerConfig()
    out = []
    if document.declaration is not None:
        out.append(serialize_node(document.declaration) + "\n")
    if document.doctype is not None:
        out.append(serialize_node(document.doctype) + "\n")
    out.append(serialize_node(document.root, 0, config.indent))
    if config.trailing_newline:
        out.append("\n")
    return "".join(out)
