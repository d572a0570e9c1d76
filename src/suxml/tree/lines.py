"""Line projection of a suxml document for a presentation layer.

``render_lines`` flattens the expansion-aware view of the tree into display
records; ``edit_line`` renders one node while a field is being edited. Neither
carries any rendering state beyond plain strings and depths.
"""

from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple

from suxml.shared.config import ProjectionConfig
from suxml.tree.editing import settable_parts
from suxml.tree.nodes import (
    Node,
    XMLComment,
    XMLContent,
    XMLDeclaration,
    XMLDoctype,
    XMLTag,
)
from suxml.tree.serializer import end_tag_str, serialize_node, start_tag_str

if TYPE_CHECKING:
    from suxml.tree.document import XMLDocument


@dataclass(frozen=True, eq=False)
class DisplayLine:
    """One row of the projected tree.

    Attributes:
        selectable: False for the closing line of an expanded tag
        depth: Nesting level, root is 0
        text: Text to display
        node: The node this row belongs to (end lines point at their tag)
        highlighted: Whether the row belongs to a search hit
    """

    selectable: bool
    depth: int
    text: str
    node: Node
    highlighted: bool = False


def render_node(
    node: Node,
    lines: List[DisplayLine],
    depth: int = 0,
    collapsed_marker: str = " ..."
) -> None:
    """Append the rows for ``node`` (and its visible subtree) to ``lines``."""
    if isinstance(node, XMLTag):
        if node.children and node.expanded:
            lines.append(DisplayLine(True, depth, start_tag_str(node), node, node.found))
            for child in node.children:
                render_node(child, lines, depth + 1, collapsed_marker)
            lines.append(DisplayLine(False, depth, end_tag_str(node), node, node.found))
        elif node.children:
            text = start_tag_str(node) + collapsed_marker
            lines.append(DisplayLine(True, depth, text, node, node.found))
        else:
            lines.append(DisplayLine(True, depth, start_tag_str(node), node, node.found))
    elif isinstance(node, XMLContent):
        lines.append(DisplayLine(True, depth, node.text.replace("\n", " "), node))
    else:
        lines.append(DisplayLine(True, depth, serialize_node(node), node))


def render_lines(
    document: "XMLDocument",
    config: Optional[ProjectionConfig] = None
) -> List[DisplayLine]:
    """Flatten the document into display rows, prolog first."""
    config = config or ProjectionConfig()
    lines: List[DisplayLine] = []
    if config.include_prolog:
        if document.declaration is not None:
            render_node(document.declaration, lines)
        if document.doctype is not None:
            render_node(document.doctype, lines)
    render_node(document.root, lines, 0, config.collapsed_marker)
    return lines


def edit_line(node: Node, cursor: int, edit_buffer: str) -> Tuple[str, int]:
    """Render ``node`` with field ``cursor`` replaced by ``edit_buffer``.

    Returns the line and the column at which the edited field starts.
    """
    if isinstance(node, XMLContent):
        return edit_buffer, 0
    if isinstance(node, XMLComment):
        return "<!--" + edit_buffer + "-->", 4
    if isinstance(node, XMLDoctype):
        return "<!DOCTYPE " + edit_buffer + ">", 10

    # Tags start with the element name; declarations go straight to attributes
    offset = 0 if isinstance(node, XMLTag) else 1
    line = "<" if isinstance(node, XMLTag) else "<?xml"
    column = 0
    for i, part in enumerate(settable_parts(node)):
        slot = i + offset
        if slot != 0:
            line += '="' if slot % 2 == 0 else " "
        if i == cursor:
            column = len(line)
            line += edit_buffer
        else:
            line += part
        if slot != 0 and slot % 2 == 0:
            line += '"'

    if isinstance(node, XMLDeclaration):
        return line + "?>", column
    if not node.children:
        line += "/"
    return line + ">", column
