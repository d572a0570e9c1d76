#!/usr/bin/env python3
"""
Quick Start Guide for suxml.

Walks through parsing, editing a partially parsed document, searching the
line projection and writing the canonical form back out.
"""

import sys
import tempfile
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from suxml import parse_file, parse_string
from suxml.tree import XMLComment, XMLContent, XMLTag


def show_lines(document):
    for line in document.render_lines():
        marker = "*" if line.highlighted else " "
        print(f"  {marker} {'    ' * line.depth}{line.text}")


def quick_start_example():
    """Parse, edit and serialize a small document."""

    print("🚀 QUICK START - suxml")
    print("=" * 45)

    # Step 1: Parse a well-formed document
    print("\n📄 Step 1: Parsing")
    print("-" * 30)

    result = parse_string(
        '<?xml version="1.0"?>\n'
        '<library>\n'
        '  <book id="1"><title>My Book</title></book>\n'
        '  <!-- more to come -->\n'
        '</library>\n'
    )
    document = result.document

    print(f"✅ Parse success: {result.success}")
    print(f"📊 Nodes created: {result.statistics.nodes_created}")
    print(f"📏 Max depth: {result.statistics.max_depth}")

    # Step 2: Edit fields and structure
    print("\n✏️  Step 2: Editing")
    print("-" * 30)

    book = document.root.children[0]
    document.set_field(book, 3, "lang")  # new attribute slot
    document.set_field(book, 4, "en")
    document.insert_node(book, True, XMLTag("book", children=[XMLContent("Second")]))

    rejected = document.set_field(book, 0, "9book")
    print(f"❌ Renaming to '9book' rejected at offset {rejected.offset}")

    comment = document.root.children[-1]
    if isinstance(comment, XMLComment):
        document.delete_node(comment)
        print("🗑️  Removed the trailing comment")

    # Step 3: Search and show the line projection
    print("\n🔍 Step 3: Searching")
    print("-" * 30)

    document.find("title")
    show_lines(document)

    # Step 4: Canonical output
    print("\n📝 Step 4: Serializing")
    print("-" * 30)
    print(document.serialize())

    return document


def partial_tree_example():
    """Show that a broken file can still be edited and saved."""

    print("\n\n🩹 EDIT THROUGH ERRORS")
    print("=" * 45)

    with tempfile.TemporaryDirectory() as tmp:
        source = Path(tmp) / "broken.xml"
        source.write_text("<notes>\n  <note>buy milk\n", encoding="utf-8")

        result = parse_file(source)
        print(f"❌ Parse success: {result.success}")
        print(f"📍 Error: {result.error}")

        document = result.document
        show_lines(document)

        target = Path(tmp) / "fixed.xml"
        if document.write(target):
            print(f"💾 Saved partial tree:\n{target.read_text(encoding='utf-8')}")


if __name__ == "__main__":
    quick_start_example()
    partial_tree_example()
