"""Structural and field-level edits on suxml trees.

Every node exposes a list of settable fields (see ``settable_parts``):

* tag: ``0`` is the element name, ``2k+1``/``2k+2`` are the name and value of
  attribute *k*, and one trailing empty slot adds a new attribute;
* declaration: like a tag without the element name;
* content, comment and doctype: a single field ``0``.

Field edits validate with the same character rules as the parser and report
the offset of the first rejected character instead of raising, so a caller
can highlight it and let the user retry. Structural edits (insert, delete,
find) are depth-first searches that address nodes by identity.
"""

from typing import List, Optional, Tuple

from suxml.shared.logging import get_logger
from suxml.shared.result import FieldEditResult
from suxml.tree.nodes import (
    CHILD_NODE_TYPES,
    INVALID_FIRST_NAME_CHARS,
    INVALID_NAME_CHARS,
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

logger = get_logger(__name__, component="editing")


def first_invalid_offset(text: str, invalid_chars: str) -> int:
    """Offset of the first character of ``text`` found in ``invalid_chars``, or -1."""
    for offset, c in enumerate(text):
        if c in invalid_chars:
            return offset
    return -1


def validate_element_name(text: str) -> FieldEditResult:
    if not text:
        return FieldEditResult.rejected()
    if text[0] in INVALID_FIRST_NAME_CHARS:
        return FieldEditResult.rejected(0)
    return validate_attribute_name(text)


def validate_attribute_name(text: str) -> FieldEditResult:
    if not text:
        return FieldEditResult.rejected()
    offset = first_invalid_offset(text, INVALID_NAME_CHARS)
    if offset != -1:
        return FieldEditResult.rejected(offset)
    return FieldEditResult.ok()


def validate_attribute_value(text: str) -> FieldEditResult:
    offset = first_invalid_offset(text, '"')
    return FieldEditResult.rejected(offset) if offset != -1 else FieldEditResult.ok()


def validate_content(text: str) -> FieldEditResult:
    offset = first_invalid_offset(text, "<")
    return FieldEditResult.rejected(offset) if offset != -1 else FieldEditResult.ok()


def validate_comment(text: str) -> FieldEditResult:
    """Comment bodies may not contain ``--`` nor end with ``-`` (it would form ``--->``)."""
    offset = text.find("--")
    if offset != -1:
        return FieldEditResult.rejected(offset)
    if text.endswith("-"):
        return FieldEditResult.rejected(len(text) - 1)
    return FieldEditResult.ok()


def validate_doctype(text: str) -> FieldEditResult:
    """Doctype text may nest balanced ``<...>`` pairs and nothing else."""
    open_offsets: List[int] = []
    for offset, c in enumerate(text):
        if c == "<":
            open_offsets.append(offset)
        elif c == ">":
            if not open_offsets:
                return FieldEditResult.rejected(offset)
            open_offsets.pop()
    if open_offsets:
        return FieldEditResult.rejected(open_offsets[0])
    return FieldEditResult.ok()


def settable_parts(node: Node) -> List[str]:
    """Current text of every settable field, in field index order."""
    if isinstance(node, (XMLTag, XMLDeclaration)):
        parts = [node.element] if isinstance(node, XMLTag) else []
        for attribute in node.attributes:
            parts.append(attribute.name)
            parts.append(attribute.value)
        parts.append("")  # new attribute slot
        return parts
    if isinstance(node, (XMLContent, XMLComment, XMLDoctype)):
        return [node.text]
    raise TypeError(f"Not a document node: {type(node).__name__}")


def num_settable(node: Node) -> int:
    return len(settable_parts(node))


def _attribute_slot(node: Node, index: int) -> Tuple[int, bool]:
    """Map a field index of a tag or declaration to (attribute index, is_value)."""
    attribute_index = index - 1 if isinstance(node, XMLTag) else index
    return attribute_index // 2, attribute_index % 2 == 1


def _check_index(node: Node, index: int) -> None:
    if not 0 <= index < num_settable(node):
        raise IndexError(
            f"{type(node).__name__} has no settable field {index}"
        )


def set_field(node: Node, index: int, text: str) -> FieldEditResult:
    """Replace field ``index`` of ``node`` with ``text`` if it is valid.

    Raises:
        IndexError: If ``index`` is not one of the node's fields
    """
    _check_index(node, index)

    if isinstance(node, (XMLTag, XMLDeclaration)):
        result = _set_attribute_field(node, index, text)
        if result and isinstance(node, XMLTag):
            node.found = False
    elif isinstance(node, XMLContent):
        result = validate_content(text)
        if result:
            node.text = text
    elif isinstance(node, XMLComment):
        result = validate_comment(text)
        if result:
            node.text = text
    else:
        result = validate_doctype(text)
        if result:
            node.text = text

    logger.debug(
        "Field edit",
        extra={"node_type": type(node).__name__, "field": index, "success": result.success}
    )
    return result


def _set_attribute_field(node: Node, index: int, text: str) -> FieldEditResult:
    if isinstance(node, XMLTag) and index == 0:
        result = validate_element_name(text)
        if result:
            node.element = text
        return result

    attributes: List[XMLAttribute] = node.attributes  # type: ignore[union-attr]
    position, is_value = _attribute_slot(node, index)
    if position >= len(attributes):
        # Trailing slot: an empty submission adds nothing
        if not text:
            return FieldEditResult.ok()
        result = validate_attribute_name(text)
        if result:
            attributes.append(XMLAttribute(text, ""))
        return result

    if is_value:
        result = validate_attribute_value(text)
        if result:
            attributes[position].value = text
    else:
        result = validate_attribute_name(text)
        if result:
            attributes[position].name = text
    return result


def delete_field(node: Node, index: int) -> bool:
    """Clear a value field or drop an attribute pair.

    Deleting an attribute's name removes the whole attribute; deleting its
    value empties it. The element name and the new-attribute slot cannot be
    deleted.
    """
    if isinstance(node, (XMLTag, XMLDeclaration)):
        if isinstance(node, XMLTag) and index == 0:
            return False
        if index < 0:
            return False
        position, is_value = _attribute_slot(node, index)
        if position >= len(node.attributes):
            return False
        if is_value:
            node.attributes[position].value = ""
        else:
            del node.attributes[position]
        return True

    if index != 0:
        return False
    if isinstance(node, (XMLContent, XMLComment, XMLDoctype)):
        node.text = ""
        return True
    return False


def insert_node(
    tag: XMLTag,
    anchor: Node,
    force_after: bool,
    new_node: ChildNode
) -> bool:
    """Insert ``new_node`` relative to ``anchor`` somewhere below ``tag``.

    When ``anchor`` is ``tag`` itself and ``force_after`` is false the new node
    becomes its first child. When ``anchor`` is one of the children the new
    node goes first inside it (if it is a tag and ``force_after`` is false) or
    right after it.
    """
    if anchor is tag and not force_after:
        tag.children.insert(0, new_node)
        return True

    for i, child in enumerate(tag.children):
        if child is anchor:
            inserted = False
            if not force_after and isinstance(child, XMLTag):
                inserted = insert_node(child, anchor, force_after, new_node)
            if not inserted:
                tag.children.insert(i + 1, new_node)
            return True
        if isinstance(child, XMLTag) and insert_node(child, anchor, force_after, new_node):
            return True
    return False


def delete_node(tag: XMLTag, target: Node) -> bool:
    """Remove the first descendant of ``tag`` that is ``target``."""
    for i, child in enumerate(tag.children):
        if child is target:
            del tag.children[i]
            return True
        if isinstance(child, XMLTag) and delete_node(child, target):
            return True
    return False


def find(node: Node, query: str) -> bool:
    """Highlight every tag named ``query`` and expand the path down to it.

    Flags from any earlier search are cleared as the tree is walked. Returns
    whether ``node`` or anything below it matched.
    """
    node.expanded = False
    node.found = False
    if not isinstance(node, XMLTag):
        return False

    for child in node.children:
        if find(child, query):
            node.expanded = True
    if node.element == query:
        node.found = True
        node.expanded = True
    return node.expanded


def expand_all(node: Node) -> None:
    """Expand ``node`` and every tag below it that has children."""
    if isinstance(node, XMLTag) and node.children:
        node.expanded = True
        for child in node.children:
            expand_all(child)


def check_insertable(node: object, root: Optional[XMLTag] = None) -> None:
    """Reject nodes that cannot be placed in a tree.

    Raises:
        TypeError: If ``node`` is not a tag, content or comment
        ValueError: If ``node`` or any node below it is already part of the
            tree under ``root``
    """
    if not isinstance(node, CHILD_NODE_TYPES):
        raise TypeError(f"Cannot insert {type(node).__name__} into a tree")
    if root is None:
        return
    candidates = iter_nodes(node) if isinstance(node, XMLTag) else [node]
    live = {id(n) for n in iter_nodes(root)}
    for candidate in candidates:
        if id(candidate) in live:
            raise ValueError("Node is already part of the tree")
