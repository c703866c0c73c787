#!/usr/bin/env python3
"""
Quick Start Guide for markup-tree.

Walks through parsing a document, navigating the item tree, switching
configuration presets, building from hand-written events and handling
structural errors.
"""

import sys
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from markup_tree import (
    MarkupEvent,
    MarkupTreeError,
    MarkupTreeParser,
    ParserConfig,
    parse_file,
    parse_string,
    read_xml,
)

DATA_DIR = Path(__file__).parent / "data"


def quick_start_example():
    """Parse a file and walk its tree."""

    print("🚀 QUICK START - markup-tree")
    print("=" * 45)

    print("\n📄 Step 1: Parsing a file")
    print("-" * 30)

    result = parse_file(DATA_DIR / "catalog.xml")
    print(f"✅ Built {result.element_count} elements, depth {result.max_depth}")
    print(f"📋 Declared encoding: {result.declaration.encoding}")

    print("\n🧭 Step 2: Navigating the tree")
    print("-" * 30)

    for product in result.root.find_children("product"):
        name = product.find_child("name").text
        price = product.find_child("price").text
        currency = product.get_attribute("currency", "")
        print(f"  {product.get_attribute('id')}: {name} ({currency} {price})")

    description = result.find("description")
    print(f"📝 Text of first description: {description.text!r}")
    print(f"   Its child <{description.children[0].name}>: {description.children[0].text!r}")

    print("\n📊 Step 3: Build metrics")
    print("-" * 30)
    for key, value in result.metrics.to_dict().items():
        print(f"  {key}: {value}")


def presets_example():
    """Compare the default and legacy presets on the same input."""

    print("\n\n⚙️  PRESETS EXAMPLE")
    print("=" * 40)

    xml = '<note priority="low">first<br/>second</note>'
    for preset in ("default", "legacy"):
        parser = MarkupTreeParser(ParserConfig.preset(preset))
        note = parser.parse_string(xml).root
        print(f"  {preset:<8} text={note.text!r} attributes={note.attributes}")

    shallow = MarkupTreeParser().with_config(tree__max_depth=2)
    try:
        shallow.parse_file(DATA_DIR / "catalog.xml")
    except MarkupTreeError as e:
        print(f"  max_depth=2 -> {e.kind.name}: {e.message}")


def events_example():
    """Build trees directly from event sequences."""

    print("\n\n🔗 EVENTS EXAMPLE")
    print("=" * 35)

    events = [
        MarkupEvent.start_document(),
        MarkupEvent.start_element("a", [("x", "1"), ("x", "2")]),
        MarkupEvent.characters("hello"),
        MarkupEvent.end_element("a"),
        MarkupEvent.start_element("b"),
        MarkupEvent.end_element("b"),
        MarkupEvent.end_document(),
    ]
    roots = read_xml(events)
    print(f"  Roots: {[root.name for root in roots]}")
    print(f"  First root: {roots[0].to_dict()}")

    broken = [
        MarkupEvent.start_document(),
        MarkupEvent.start_element("a"),
        MarkupEvent.end_element("b"),
        MarkupEvent.end_document(),
    ]
    try:
        read_xml(broken)
    except MarkupTreeError as e:
        print(f"  ❌ {e.kind.name}: {e.message}")

    try:
        parse_string("<unclosed>")
    except MarkupTreeError as e:
        print(f"  ❌ {e.kind.name}: {e.message}")


def main():
    """Main function."""
    try:
        quick_start_example()
        presets_example()
        events_example()
    except Exception as e:
        print(f"❌ Example failed: {e}")
        import traceback
        traceback.print_exc()
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
