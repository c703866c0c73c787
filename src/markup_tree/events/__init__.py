"""Markup event model and event reader.

Key Components:
    MarkupEvent: One typed event of a tokenized markup stream
    EventType: Enumeration of event kinds
    QualifiedName: Element/attribute name with namespace metadata
    EventReader: lxml-backed source of events for XML input
"""

from .reader import EventReader, get_events, iter_events, sniff_declaration
from .types import (
    TRIVIA_TYPES,
    Attribute,
    EventType,
    MarkupEvent,
    QualifiedName,
    XMLDeclaration,
)

__all__ = [
    "TRIVIA_TYPES",
    "Attribute",
    "EventReader",
    "EventType",
    "MarkupEvent",
    "QualifiedName",
    "XMLDeclaration",
    "get_events",
    "iter_events",
    "sniff_declaration",
]
