"""Conversion between suxml documents and lxml.

lxml is an optional dependency (``pip install suxml[lxml]``); it is imported
only when an adapter function is called.
"""

from typing import Any, Optional

from suxml.shared import SuxmlError, get_logger
from suxml.tree import XMLComment, XMLContent, XMLDocument, XMLTag

from .parser import ParseResult, parse_string


class AdapterError(SuxmlError):
    """Raised when a conversion cannot be performed."""


def _import_etree() -> Any:
    try:
        import lxml.etree as ET
    except ImportError as e:
        raise AdapterError(
            "lxml is not installed; install the 'lxml' extra to use this adapter"
        ) from e
    return ET


def is_lxml_available() -> bool:
    """Check if lxml is available."""
    try:
        _import_etree()
    except AdapterError:
        return False
    return True


def to_lxml(document: XMLDocument, correlation_id: Optional[str] = None) -> Any:
    """Convert the root tree of ``document`` to an ``lxml.etree`` element.

    Content nodes become ``.text`` of their parent or ``.tail`` of the
    preceding element; comments become ``etree.Comment`` nodes. The prolog is
    not carried over.

    Raises:
        AdapterError: If lxml is missing or rejects a name or comment
    """
    ET = _import_etree()
    logger = get_logger(__name__, correlation_id, "lxml_adapter")

    if not document.root.element:
        raise AdapterError("Document has no root element")
    try:
        lxml_root = _convert_tag_to_lxml(document.root, ET)
    except ValueError as e:
        logger.warning("lxml rejected the tree", extra={"error": str(e)})
        raise AdapterError(f"Failed to convert to lxml: {e}") from e

    logger.debug("Converted document to lxml", extra={"root_element": lxml_root.tag})
    return lxml_root


def _convert_tag_to_lxml(tag: XMLTag, ET: Any) -> Any:
    lxml_element = ET.Element(tag.element)
    for attribute in tag.attributes:
        lxml_element.set(attribute.name, attribute.value)

    last = None
    for child in tag.children:
        if isinstance(child, XMLContent):
            if last is None:
                lxml_element.text = (lxml_element.text or "") + child.text
            else:
                last.tail = (last.tail or "") + child.text
            continue
        if isinstance(child, XMLComment):
            last = ET.Comment(child.text)
        else:
            last = _convert_tag_to_lxml(child, ET)
        lxml_element.append(last)
    return lxml_element


def from_lxml(element: Any, correlation_id: Optional[str] = None) -> ParseResult:
    """Build a suxml document from an lxml element by reparsing its markup.

    Raises:
        AdapterError: If lxml is missing or ``element`` is not an element
    """
    ET = _import_etree()
    if not hasattr(element, "tag"):
        raise AdapterError("Target data is not a valid lxml element")
    xml_string = ET.tostring(element, encoding="unicode", with_tail=False)
    return parse_string(xml_string, correlation_id)
