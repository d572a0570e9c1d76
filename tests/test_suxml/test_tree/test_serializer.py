"""Tests for canonical serialization."""

import pytest

from suxml.shared.config import EditorConfig, SerializerConfig
from suxml.tree import XMLDocument, serialize_document, serialize_node
from suxml.tree.nodes import (
    XMLAttribute,
    XMLComment,
    XMLContent,
    XMLDeclaration,
    XMLDoctype,
    XMLTag,
)
from suxml.tree.serializer import attributes_str, end_tag_str, is_whitespace, start_tag_str


def roundtrip(text: str, config: EditorConfig = None) -> str:
    document = XMLDocument(config)
    document.parse_string(text)
    return document.serialize()


class TestTagStrings:
    """Test the pieces of a tag."""

    def test_attributes_str(self):
        """Test attributes are written with double quotes and a leading space."""
        attrs = [XMLAttribute("x", "1"), XMLAttribute("y", "it's")]
        assert attributes_str(attrs) == ' x="1" y="it\'s"'
        assert attributes_str([]) == ""

    def test_childless_tag_self_closes(self):
        """Test empty tags are written as empty-element tags."""
        assert start_tag_str(XMLTag("a")) == "<a />"
        assert start_tag_str(XMLTag("a", [XMLAttribute("x", "1")])) == '<a x="1" />'

    def test_parent_tag_and_end_tag(self):
        """Test tags with children get separate start and end tags."""
        tag = XMLTag("a", children=[XMLContent("x")])
        assert start_tag_str(tag) == "<a>"
        assert end_tag_str(tag) == "</a>"

    def test_is_whitespace(self):
        """Test whitespace detection."""
        assert is_whitespace("")
        assert is_whitespace(" \t\r\n")
        assert not is_whitespace(" x ")


class TestSerializeNode:
    """Test serialization of individual nodes."""

    def test_prolog_nodes(self):
        """Test declaration and doctype output."""
        declaration = XMLDeclaration([XMLAttribute("version", "1.0")])
        assert serialize_node(declaration) == '<?xml version="1.0"?>'
        assert serialize_node(XMLDeclaration()) == "<?xml?>"
        assert serialize_node(XMLDoctype("html")) == "<!DOCTYPE html>"
        assert serialize_node(XMLDoctype("")) == "<!DOCTYPE>"

    def test_comment(self):
        """Test comments are wrapped verbatim."""
        assert serialize_node(XMLComment(" note ")) == "<!-- note -->"

    def test_nested_indentation(self):
        """Test one indent unit per depth level."""
        root = XMLTag("a", children=[XMLTag("b", children=[XMLContent("hi")])])
        assert serialize_node(root) == "<a>\n\t<b>\n\t\thi\n\t</b>\n</a>"

    def test_whitespace_children_dropped(self):
        """Test children that serialize to whitespace are skipped."""
        root = XMLTag("a", children=[XMLContent("  "), XMLTag("b"), XMLContent("")])
        assert serialize_node(root) == "<a>\n\t<b />\n</a>"

    def test_text_is_not_escaped(self):
        """Test that content is written exactly as stored."""
        root = XMLTag("a", children=[XMLContent("1 > 0 & so on")])
        assert serialize_node(root) == "<a>\n\t1 > 0 & so on\n</a>"

    def test_unknown_node_rejected(self):
        """Test that only document nodes can be serialized."""
        with pytest.raises(TypeError):
            serialize_node(object())  # type: ignore[arg-type]


class TestSerializeDocument:
    """Test whole-document output."""

    def test_basic_scenario(self):
        """Test the canonical form of a small document."""
        assert roundtrip('<a><b x="1">hi</b></a>') == '<a>\n\t<b x="1">\n\t\thi\n\t</b>\n</a>'

    def test_prolog_lines(self):
        """Test the declaration and doctype each get their own line."""
        text = '<?xml version="1.0"?><!DOCTYPE note><note><to>Tove</to></note>'
        assert roundtrip(text) == (
            '<?xml version="1.0"?>\n'
            "<!DOCTYPE note>\n"
            "<note>\n\t<to>\n\t\tTove\n\t</to>\n</note>"
        )

    def test_single_quotes_normalized(self):
        """Test attribute values are re-quoted with double quotes."""
        assert roundtrip("<a x='1'/>") == '<a x="1" />'

    def test_custom_indent(self):
        """Test the indent unit comes from the serializer config."""
        assert roundtrip("<a><b/></a>", EditorConfig.spaces(2)) == "<a>\n  <b />\n</a>"

    def test_trailing_newline(self):
        """Test the optional final newline."""
        config = EditorConfig().override(serializer__trailing_newline=True)
        assert roundtrip("<a/>", config) == "<a />\n"

    def test_default_config(self):
        """Test serialize_document without a config uses tabs."""
        document = XMLDocument()
        document.parse_string("<a><b/></a>")
        assert serialize_document(document) == "<a>\n\t<b />\n</a>"
        assert serialize_document(document, SerializerConfig(indent="    ")) == (
            "<a>\n    <b />\n</a>"
        )

    @pytest.mark.parametrize(
        "text",
        [
            '<a><b x="1">hi</b></a>',
            "<a>\n   line one\n   line two\n</a>",
            '<?xml version="1.0"?>\n<!DOCTYPE a [<!ELEMENT a ANY>]>\n<a><!-- c --><b/>t</a>',
            "<a>  <b>  <c>deep</c>  </b>  </a>",
        ],
    )
    def test_normalization_is_idempotent(self, text):
        """Test that serializing a reparsed canonical form changes nothing."""
        once = roundtrip(text)
        assert roundtrip(once) == once
