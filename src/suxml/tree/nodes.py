"""Node model for suxml documents.

The tree is made of three child node kinds (tags, text content, comments)
below one mandatory root tag; the optional declaration and doctype live on
the document next to the root. Nodes compare by identity so that edit
operations can target one specific occurrence even when two nodes hold the
same text. Behavior is dispatched over the closed set of node classes by the
functions in ``suxml.tree.editing``, ``suxml.tree.serializer`` and
``suxml.tree.lines``.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional, Union

from suxml.character.scanner import WHITESPACE

INVALID_FIRST_NAME_CHARS = "-.0123456789"
RESERVED_NAME_CHARS = "!\"#$%&'()*+,;<=?@[\\]^`{|}~"
# Characters that may never appear inside an element or attribute name
INVALID_NAME_CHARS = WHITESPACE + RESERVED_NAME_CHARS + ">/"


@dataclass(eq=False)
class XMLAttribute:
    """One name="value" pair. Order on the owner is significant."""

    name: str
    value: str = ""


@dataclass(eq=False)
class XMLTag:
    """An element with attributes and owned, ordered children."""

    element: str
    attributes: List[XMLAttribute] = field(default_factory=list)
    children: List["ChildNode"] = field(default_factory=list)
    expanded: bool = False
    found: bool = False

    def add_child(self, child: "ChildNode") -> None:
        self.children.append(child)

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Value of the first attribute called ``name``."""
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute.value
        return default


@dataclass(eq=False)
class XMLContent:
    """A run of text between tags. Never contains ``<``."""

    text: str
    expanded: bool = False
    found: bool = False


@dataclass(eq=False)
class XMLComment:
    """Comment body between ``<!--`` and ``-->``. Never contains ``--``."""

    text: str
    expanded: bool = False
    found: bool = False


@dataclass(eq=False)
class XMLDeclaration:
    """The ``<?xml ...?>`` prolog."""

    attributes: List[XMLAttribute] = field(default_factory=list)
    expanded: bool = False
    found: bool = False


@dataclass(eq=False)
class XMLDoctype:
    """The ``<!DOCTYPE ...>`` prolog entry, kept as opaque text."""

    text: str = ""
    expanded: bool = False
    found: bool = False


ChildNode = Union[XMLTag, XMLContent, XMLComment]
Node = Union[XMLTag, XMLContent, XMLComment, XMLDeclaration, XMLDoctype]

CHILD_NODE_TYPES = (XMLTag, XMLContent, XMLComment)


def iter_nodes(root: XMLTag) -> Iterator[ChildNode]:
    """Yield ``root`` and every node below it in document order."""
    stack: List[ChildNode] = [root]
    while stack:
        node = stack.pop()
        yield node
        if isinstance(node, XMLTag):
            stack.extend(reversed(node.children))


def contains(root: XMLTag, node: object) -> bool:
    """Whether ``node`` (by identity) is ``root`` or one of its descendants."""
    return any(candidate is node for candidate in iter_nodes(root))


def is_expandable(node: Node) -> bool:
    """Only tags with at least one child can be expanded or collapsed."""
    return isinstance(node, XMLTag) and len(node.children) >= 1


def depth_of(root: XMLTag) -> int:
    """Depth of the deepest node below ``root`` (root alone is 0)."""
    deepest = 0
    stack = [(root, 0)]
    while stack:
        tag, depth = stack.pop()
        deepest = max(deepest, depth)
        for child in tag.children:
            if isinstance(child, XMLTag):
                stack.append((child, depth + 1))
            else:
                deepest = max(deepest, depth + 1)
    return deepest


def node_to_dict(node: Node) -> Dict[str, Any]:
    """Plain dictionary view of a node and its subtree."""
    if isinstance(node, XMLTag):
        result: Dict[str, Any] = {
            "type": "tag",
            "element": node.element,
            "attributes": [[a.name, a.value] for a in node.attributes],
        }
        if node.children:
            result["children"] = [node_to_dict(child) for child in node.children]
        return result
    if isinstance(node, XMLContent):
        return {"type": "content", "text": node.text}
    if isinstance(node, XMLComment):
        return {"type": "comment", "text": node.text}
    if isinstance(node, XMLDeclaration):
        return {
            "type": "declaration",
            "attributes": [[a.name, a.value] for a in node.attributes],
        }
    if isinstance(node, XMLDoctype):
        return {"type": "doctype", "text": node.text}
    raise TypeError(f"Not a document node: {type(node).__name__}")
