"""Tree building engine for markup event streams.

Key Components:
    XMLTreeBuilder: Builds item trees from event streams
    XMLItem: One element with name, text, attributes and children
    ParseResult: Root items with document metadata and build metrics
    read_xml: Shortcut returning the list of root items
"""

from .builder import (
    ParseResult,
    XMLItem,
    XMLTreeBuilder,
    read_xml,
)

__all__ = [
    "ParseResult",
    "XMLItem",
    "XMLTreeBuilder",
    "read_xml",
]
