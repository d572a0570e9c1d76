"""Tests for field edits and structural edits."""

import pytest

from suxml.tree import editing
from suxml.tree.nodes import (
    XMLAttribute,
    XMLComment,
    XMLContent,
    XMLDeclaration,
    XMLDoctype,
    XMLTag,
)


def build_tree():
    """a[b[hi], comment, d] with handles to every node."""
    hi = XMLContent("hi")
    b = XMLTag("b", [XMLAttribute("x", "1")], [hi])
    comment = XMLComment(" c ")
    d = XMLTag("d")
    root = XMLTag("a", children=[b, comment, d])
    return root, b, hi, comment, d


class TestSettableParts:
    """Test the settable field layout of each node kind."""

    def test_tag_fields(self):
        """Test tags expose the name, attribute pairs and a new slot."""
        tag = XMLTag("b", [XMLAttribute("x", "1")])
        assert editing.settable_parts(tag) == ["b", "x", "1", ""]
        assert editing.num_settable(tag) == 4

    def test_declaration_fields(self):
        """Test declarations have no element name field."""
        declaration = XMLDeclaration([XMLAttribute("version", "1.0")])
        assert editing.settable_parts(declaration) == ["version", "1.0", ""]

    def test_single_field_nodes(self):
        """Test text-only nodes have exactly one field."""
        assert editing.settable_parts(XMLContent("hi")) == ["hi"]
        assert editing.settable_parts(XMLComment(" c ")) == [" c "]
        assert editing.settable_parts(XMLDoctype("html")) == ["html"]

    def test_unknown_object_rejected(self):
        """Test non-nodes are rejected."""
        with pytest.raises(TypeError):
            editing.settable_parts("b")  # type: ignore[arg-type]


class TestSetElementName:
    """Test renaming tags."""

    @pytest.mark.parametrize(
        "text,offset",
        [
            ("", -1),
            ("1bad", 0),
            ("-x", 0),
            (".x", 0),
            ("a b", 1),
            ("a>b", 1),
            ("ab/", 2),
            ("a=b", 1),
            ("na!me", 2),
        ],
    )
    def test_invalid_names_rejected(self, text, offset):
        """Test the offset of the first rejected character is reported."""
        tag = XMLTag("old")
        result = editing.set_field(tag, 0, text)

        assert not result
        assert result.offset == offset
        assert tag.element == "old"

    @pytest.mark.parametrize("text", ["ok-name", "a.b", "x1", "ns:tag", "_u"])
    def test_valid_names_accepted(self, text):
        """Test names the parser would also accept."""
        tag = XMLTag("old")
        assert editing.set_field(tag, 0, text)
        assert tag.element == text

    def test_successful_set_clears_highlight(self):
        """Test that editing a tag drops its search highlight."""
        tag = XMLTag("c", found=True)
        editing.set_field(tag, 0, "d")
        assert tag.found is False

    def test_rejected_set_keeps_highlight(self):
        """Test a rejected edit changes nothing."""
        tag = XMLTag("c", found=True)
        editing.set_field(tag, 0, "1")
        assert tag.found is True


class TestSetAttributes:
    """Test editing attribute names and values."""

    def test_rename_attribute(self):
        """Test field 1 is the first attribute name."""
        tag = XMLTag("b", [XMLAttribute("x", "1")])
        assert editing.set_field(tag, 1, "y")
        assert tag.attributes[0].name == "y"

    def test_invalid_attribute_name(self):
        """Test attribute names use the name character rules."""
        tag = XMLTag("b", [XMLAttribute("x", "1")])
        result = editing.set_field(tag, 1, "a b")

        assert result.offset == 1
        assert tag.attributes[0].name == "x"

    def test_set_value(self):
        """Test field 2 is the first attribute value."""
        tag = XMLTag("b", [XMLAttribute("x", "1")])
        assert editing.set_field(tag, 2, "it's <fine>")
        assert tag.attributes[0].value == "it's <fine>"

    def test_value_with_double_quote_rejected(self):
        """Test values can never hold a double quote."""
        tag = XMLTag("b", [XMLAttribute("x", "1")])
        result = editing.set_field(tag, 2, 'a"b')

        assert result.offset == 1
        assert tag.attributes[0].value == "1"

    def test_new_attribute_slot(self):
        """Test the trailing slot appends an attribute with an empty value."""
        tag = XMLTag("b", [XMLAttribute("x", "1")])
        assert editing.set_field(tag, 3, "z")

        assert [(a.name, a.value) for a in tag.attributes] == [("x", "1"), ("z", "")]
        assert editing.num_settable(tag) == 6

    def test_empty_new_attribute_is_a_no_op(self):
        """Test submitting nothing in the trailing slot adds nothing."""
        tag = XMLTag("b")
        assert editing.set_field(tag, 1, "")
        assert tag.attributes == []

    def test_declaration_fields_start_at_attributes(self):
        """Test declaration field 0 is the first attribute name."""
        declaration = XMLDeclaration([XMLAttribute("version", "1.0")])
        assert editing.set_field(declaration, 1, "1.1")
        assert editing.set_field(declaration, 2, "encoding")

        assert [(a.name, a.value) for a in declaration.attributes] == [
            ("version", "1.1"),
            ("encoding", ""),
        ]

    def test_index_out_of_range(self):
        """Test that an unknown field index raises IndexError."""
        with pytest.raises(IndexError):
            editing.set_field(XMLTag("b"), 2, "x")
        with pytest.raises(IndexError):
            editing.set_field(XMLContent("x"), 1, "y")
        with pytest.raises(IndexError):
            editing.set_field(XMLContent("x"), -1, "y")


class TestSetText:
    """Test editing content, comments and doctypes."""

    def test_content(self):
        """Test content may hold anything but <."""
        content = XMLContent("old")
        assert editing.set_field(content, 0, "1 > 0 & more")
        assert content.text == "1 > 0 & more"

        result = editing.set_field(content, 0, "a<b")
        assert result.offset == 1
        assert content.text == "1 > 0 & more"

    @pytest.mark.parametrize("text,offset", [("a--b", 1), ("--", 0), ("x-", 1)])
    def test_comment_rejects_double_dash(self, text, offset):
        """Test comment bodies keep the -- free invariant."""
        comment = XMLComment("old")
        result = editing.set_field(comment, 0, text)

        assert result.offset == offset
        assert comment.text == "old"

    def test_comment_accepts_single_dashes(self):
        """Test lone dashes and angle brackets are fine in comments."""
        comment = XMLComment("old")
        assert editing.set_field(comment, 0, " a - b <c> ")
        assert comment.text == " a - b <c> "

    @pytest.mark.parametrize("text", ["html", "", "note [<!ELEMENT note ANY>]"])
    def test_doctype_accepts_balanced_text(self, text):
        """Test doctype text with balanced nested declarations."""
        doctype = XMLDoctype("old")
        assert editing.set_field(doctype, 0, text)
        assert doctype.text == text

    @pytest.mark.parametrize("text,offset", [("a>b", 1), ("x [<!E]", 3)])
    def test_doctype_rejects_unbalanced_text(self, text, offset):
        """Test doctype text that would end the doctype early or never."""
        doctype = XMLDoctype("old")
        assert editing.set_field(doctype, 0, text).offset == offset


class TestDeleteField:
    """Test clearing fields."""

    def test_delete_attribute_name_removes_pair(self):
        """Test deleting an attribute name drops the attribute."""
        tag = XMLTag("b", [XMLAttribute("x", "1"), XMLAttribute("y", "2")])
        assert editing.delete_field(tag, 1)
        assert [a.name for a in tag.attributes] == ["y"]

    def test_delete_attribute_value_empties_it(self):
        """Test deleting a value keeps the attribute."""
        tag = XMLTag("b", [XMLAttribute("x", "1")])
        assert editing.delete_field(tag, 2)
        assert tag.attributes[0].value == ""

    def test_element_name_cannot_be_deleted(self):
        """Test the element name is mandatory."""
        tag = XMLTag("b")
        assert not editing.delete_field(tag, 0)
        assert tag.element == "b"

    def test_new_slot_and_bad_indices(self):
        """Test fields that do not exist cannot be deleted."""
        tag = XMLTag("b", [XMLAttribute("x", "1")])
        assert not editing.delete_field(tag, 3)
        assert not editing.delete_field(tag, -1)
        assert len(tag.attributes) == 1

    def test_delete_declaration_attribute(self):
        """Test declaration attributes are addressed from field 0."""
        declaration = XMLDeclaration([XMLAttribute("version", "1.0")])
        assert editing.delete_field(declaration, 0)
        assert declaration.attributes == []

    def test_delete_text_fields(self):
        """Test text-only nodes are emptied."""
        for node in (XMLContent("x"), XMLComment("x"), XMLDoctype("x")):
            assert editing.delete_field(node, 0)
            assert node.text == ""
            assert not editing.delete_field(node, 1)


class TestInsertNode:
    """Test structural insertion."""

    def test_insert_into_root_as_first_child(self):
        """Test anchoring on the tree's own tag."""
        root, b, *_ = build_tree()
        new = XMLTag("new")

        assert editing.insert_node(root, root, False, new)
        assert root.children[0] is new
        assert root.children[1] is b

    def test_insert_into_tag(self):
        """Test a tag anchor without force_after takes the node as first child."""
        root, b, hi, *_ = build_tree()
        new = XMLContent("new")

        assert editing.insert_node(root, b, False, new)
        assert b.children == [new, hi]

    def test_insert_after_tag(self):
        """Test force_after places the node as the next sibling."""
        root, b, _, comment, _ = build_tree()
        new = XMLTag("new")

        assert editing.insert_node(root, b, True, new)
        assert root.children[:3] == [b, new, comment]

    def test_insert_after_non_tag(self):
        """Test non-tag anchors always get a following sibling."""
        root, _, _, comment, d = build_tree()
        new = XMLComment("new")

        assert editing.insert_node(root, comment, False, new)
        assert root.children[1:] == [comment, new, d]

    def test_insert_after_nested_node(self):
        """Test anchors deep in the tree are found."""
        root, b, hi, *_ = build_tree()
        new = XMLTag("new")

        assert editing.insert_node(root, hi, False, new)
        assert b.children == [hi, new]

    def test_missing_anchor(self):
        """Test an anchor outside the tree inserts nothing."""
        root, *_ = build_tree()
        assert not editing.insert_node(root, XMLTag("elsewhere"), False, XMLTag("new"))
        assert len(root.children) == 3

    def test_check_insertable(self):
        """Test which nodes may be inserted."""
        root, b, *_ = build_tree()

        editing.check_insertable(XMLTag("new"), root)
        with pytest.raises(TypeError):
            editing.check_insertable(XMLDoctype("html"), root)
        with pytest.raises(TypeError):
            editing.check_insertable(XMLDeclaration(), root)
        with pytest.raises(ValueError):
            editing.check_insertable(b, root)

    def test_check_insertable_rejects_live_descendants(self):
        """Test a new subtree may not reuse nodes that are still in the tree."""
        root, b, hi, *_ = build_tree()

        with pytest.raises(ValueError):
            editing.check_insertable(XMLTag("w", children=[b]), root)
        with pytest.raises(ValueError):
            editing.check_insertable(XMLTag("w", children=[XMLTag("v", children=[hi])]), root)
        editing.check_insertable(XMLTag("w", children=[XMLContent("fresh")]), root)


class TestDeleteNode:
    """Test structural deletion."""

    def test_delete_child(self):
        """Test deleting a direct child."""
        root, b, _, comment, d = build_tree()
        assert editing.delete_node(root, b)
        assert root.children == [comment, d]

    def test_delete_nested(self):
        """Test deleting a node deep in the tree."""
        root, b, hi, *_ = build_tree()
        assert editing.delete_node(root, hi)
        assert b.children == []

    def test_delete_twice(self):
        """Test a node can only be deleted once."""
        root, _, _, comment, _ = build_tree()
        assert editing.delete_node(root, comment)
        assert not editing.delete_node(root, comment)

    def test_delete_by_identity(self):
        """Test an equal-looking node outside the tree is not deleted."""
        root, *_ = build_tree()
        assert not editing.delete_node(root, XMLComment(" c "))
        assert len(root.children) == 3


class TestFind:
    """Test search highlighting."""

    def find_tree(self):
        c1 = XMLTag("c")
        c2 = XMLTag("c", children=[XMLContent("text")])
        b = XMLTag("b", children=[c1])
        d = XMLTag("d", children=[c2])
        e = XMLTag("e", children=[XMLTag("f")])
        root = XMLTag("a", children=[b, d, e])
        return root, b, c1, d, c2, e

    def test_matches_highlighted_and_paths_expanded(self):
        """Test every match is found and its ancestors expanded."""
        root, b, c1, d, c2, e = self.find_tree()

        assert editing.find(root, "c")
        assert c1.found and c2.found
        assert c1.expanded and c2.expanded
        assert b.expanded and d.expanded and root.expanded
        assert not b.found and not d.found and not root.found
        assert not e.expanded

    def test_new_search_resets_previous(self):
        """Test flags from an earlier search are cleared."""
        root, b, c1, d, c2, e = self.find_tree()
        editing.find(root, "c")

        assert editing.find(root, "d")
        assert not c1.found and not c2.found
        assert not b.expanded and not c1.expanded
        assert d.found and d.expanded
        assert not c2.expanded
        assert root.expanded

    def test_no_match(self):
        """Test a query with no match collapses everything."""
        root, b, *_ = self.find_tree()
        root.expanded = True
        b.expanded = True

        assert not editing.find(root, "zzz")
        assert not root.expanded
        assert not b.expanded

    def test_root_match(self):
        """Test the root itself can match."""
        root, *_ = self.find_tree()
        assert editing.find(root, "a")
        assert root.found

    def test_expanded_iff_match_below(self):
        """Test tags are expanded exactly when they match or contain a match."""
        root, *_ = self.find_tree()
        editing.find(root, "f")

        def has_match(tag):
            return tag.element == "f" or any(
                isinstance(c, XMLTag) and has_match(c) for c in tag.children
            )

        stack = [root]
        while stack:
            tag = stack.pop()
            assert tag.expanded == has_match(tag)
            stack.extend(c for c in tag.children if isinstance(c, XMLTag))


class TestExpandAll:
    """Test expanding the whole tree."""

    def test_expands_tags_with_children_only(self):
        """Test leaf tags stay collapsed."""
        root, b, _, _, d = build_tree()
        editing.expand_all(root)

        assert root.expanded
        assert b.expanded
        assert not d.expanded

    def test_non_tag_is_ignored(self):
        """Test expanding a non-tag does nothing."""
        content = XMLContent("x")
        editing.expand_all(content)
        assert not content.expanded
