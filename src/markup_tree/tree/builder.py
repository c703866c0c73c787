"""Core tree building implementation.

This module turns a stream of markup events into a tree of ``XMLItem``
nodes. The builder consumes the stream once, left to right, keeps a stack of
open elements, and stops at the first structural violation.
"""

import time
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, Iterator, List, Optional

from markup_tree.events import Attribute, EventType, MarkupEvent, XMLDeclaration
from markup_tree.shared import (
    BuildMetrics,
    DepthExceededError,
    DuplicateAttributePolicy,
    MarkupTreeError,
    MismatchedEndElementError,
    NestedDocumentStartError,
    PrematureEndError,
    TextOutsideElementError,
    TextPolicy,
    TreeConfig,
    UnexpectedDocumentEndError,
    UnexpectedDocumentStartError,
    UnmatchedEndElementError,
    get_logger,
)

MS_PER_SECOND = 1000


@dataclass(eq=False)
class XMLItem:
    """One markup element: local name, text, attributes and child items.

    The name is fixed at construction. ``text`` holds only the character
    data found directly inside this element, never that of its children.
    """

    name: str
    text: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["XMLItem"] = field(default_factory=list)

    def __post_init__(self) -> None:
        """Validate item name."""
        if not self.name:
            raise ValueError("Item name cannot be empty")

    def __setattr__(self, key: str, value: Any) -> None:
        if key == "name" and "name" in self.__dict__:
            raise AttributeError("Item name cannot be changed")
        super().__setattr__(key, value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, XMLItem):
            return NotImplemented
        pairs = [(self, other)]
        while pairs:
            left, right = pairs.pop()
            if (
                left.name != right.name
                or left.text != right.text
                or left.attributes != right.attributes
                or len(left.children) != len(right.children)
            ):
                return False
            pairs.extend(zip(left.children, right.children))
        return True

    def __repr__(self) -> str:
        return (
            f"XMLItem(name={self.name!r}, text={self.text!r}, "
            f"attributes={self.attributes!r}, children=<{len(self.children)} items>)"
        )

    def find_child(self, name: str) -> Optional["XMLItem"]:
        """Find first direct child with matching name."""
        for child in self.children:
            if child.name == name:
                return child
        return None

    def find_children(self, name: str) -> List["XMLItem"]:
        """Find all direct children with matching name."""
        return [child for child in self.children if child.name == name]

    def iter(self) -> Iterator["XMLItem"]:
        """Iterate over this item and all descendants in document order."""
        stack = [self]
        while stack:
            item = stack.pop()
            yield item
            stack.extend(reversed(item.children))

    def find(self, name: str) -> Optional["XMLItem"]:
        """Find first descendant (excluding self) with matching name."""
        descendants = self.iter()
        next(descendants)
        for item in descendants:
            if item.name == name:
                return item
        return None

    def find_all(self, name: str) -> List["XMLItem"]:
        """Find all descendants (excluding self) with matching name."""
        descendants = self.iter()
        next(descendants)
        return [item for item in descendants if item.name == name]

    def get_attribute(self, name: str, default: Optional[str] = None) -> Optional[str]:
        """Get attribute value with optional default."""
        return self.attributes.get(name, default)

    def has_attribute(self, name: str) -> bool:
        """Check if item has specific attribute."""
        return name in self.attributes

    @property
    def depth(self) -> int:
        """Number of levels in the subtree rooted here (a leaf is 1)."""
        deepest = 0
        stack = [(self, 1)]
        while stack:
            item, level = stack.pop()
            deepest = max(deepest, level)
            stack.extend((child, level + 1) for child in item.children)
        return deepest

    def to_dict(self) -> Dict[str, Any]:
        """Convert item to dictionary representation."""
        result = self._shallow_dict()
        stack = [(self, result)]
        while stack:
            item, data = stack.pop()
            for child in item.children:
                child_data = child._shallow_dict()
                data["children"].append(child_data)
                stack.append((child, child_data))
        return result

    def _shallow_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "text": self.text,
            "attributes": dict(self.attributes),
            "children": [],
        }


@dataclass
class ParseResult:
    """Root items of one build call with document metadata and metrics."""

    roots: List[XMLItem] = field(default_factory=list)
    declaration: Optional[XMLDeclaration] = None
    metrics: BuildMetrics = field(default_factory=BuildMetrics)
    correlation_id: Optional[str] = None

    @property
    def root(self) -> Optional[XMLItem]:
        """First root item, or None for an empty document."""
        return self.roots[0] if self.roots else None

    def iter_items(self) -> Iterator[XMLItem]:
        """Iterate over every item of every root in document order."""
        for root in self.roots:
            yield from root.iter()

    @property
    def element_count(self) -> int:
        """Total number of items in the tree."""
        return sum(1 for _ in self.iter_items())

    @property
    def max_depth(self) -> int:
        """Deepest nesting level over all roots (0 when empty)."""
        return max((root.depth for root in self.roots), default=0)

    def find(self, name: str) -> Optional[XMLItem]:
        """Find first item, roots included, with matching name."""
        return next((item for item in self.iter_items() if item.name == name), None)

    def find_all(self, name: str) -> List[XMLItem]:
        """Find all items, roots included, with matching name."""
        return [item for item in self.iter_items() if item.name == name]

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to dictionary representation."""
        result: Dict[str, Any] = {
            "roots": [root.to_dict() for root in self.roots],
            "metrics": self.metrics.to_dict(),
        }
        if self.declaration is not None:
            result["declaration"] = self.declaration.to_dict()
        if self.correlation_id is not None:
            result["correlation_id"] = self.correlation_id
        return result


class _EventCursor:
    """Single forward position in an event stream."""

    def __init__(self, events: Iterable[MarkupEvent], metrics: BuildMetrics) -> None:
        self._iterator = iter(events)
        self.metrics = metrics
        self.index = -1

    def next_event(self) -> Optional[MarkupEvent]:
        """Return the next event, or None once the stream is exhausted."""
        event = next(self._iterator, None)
        if event is not None:
            self.index += 1
            self.metrics.events_consumed += 1
        return event

    def close(self) -> None:
        """Release an event source that was abandoned before its end."""
        close = getattr(self._iterator, "close", None)
        if close is not None:
            close()


@dataclass
class _Frame:
    """An element that has been opened but not yet closed."""

    item: XMLItem
    text_runs: List[str] = field(default_factory=list)


class XMLTreeBuilder:
    """Builds ``XMLItem`` trees from markup event streams.

    A builder holds only configuration; all traversal state lives in the
    call, so one instance can be reused and gives equal trees for equal
    input.
    """

    def __init__(
        self,
        config: Optional[TreeConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        """Initialize tree builder.

        Args:
            config: Tree building configuration (defaults to TreeConfig())
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or TreeConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tree_builder")

    def build(self, events: Iterable[MarkupEvent]) -> ParseResult:
        """Build the root items of an event stream.

        Args:
            events: Events from document-start to document-end

        Returns:
            ParseResult with the root items in document order

        Raises:
            StructuralError: on the first nesting or boundary violation
            TokenizeError: if the event source fails while being read
        """
        start_time = time.time()
        metrics = BuildMetrics()
        cursor = _EventCursor(events, metrics)
        result = ParseResult(metrics=metrics, correlation_id=self.correlation_id)

        self.logger.debug("Starting tree building")

        try:
            self._build_roots(cursor, result)
        except MarkupTreeError as e:
            self.logger.warning(
                "Tree building failed",
                extra={
                    "kind": e.kind.name,
                    "error": e.message,
                    "events_consumed": metrics.events_consumed,
                }
            )
            cursor.close()
            raise

        metrics.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND
        self.logger.info(
            "Tree building completed",
            extra={
                "root_count": len(result.roots),
                "elements_built": metrics.elements_built,
                "events_consumed": metrics.events_consumed,
                "processing_time_ms": metrics.processing_time_ms,
                "events_per_second": metrics.events_per_second,
            }
        )
        return result

    def build_item(
        self, start: MarkupEvent, events: Iterable[MarkupEvent]
    ) -> XMLItem:
        """Build one element from its start event and the events after it.

        Consumes ``events`` up to and including the matching element-end and
        leaves the rest unread when ``events`` is an iterator.

        Raises:
            ValueError: if ``start`` is not an element-start event
            StructuralError: on the first nesting or boundary violation
        """
        if start.type is not EventType.START_ELEMENT:
            raise ValueError("build_item requires a START_ELEMENT event")
        return self._build_subtree(start, _EventCursor(events, BuildMetrics()))

    def _build_roots(self, cursor: _EventCursor, result: ParseResult) -> None:
        seen_document_start = False
        while True:
            event = cursor.next_event()
            if event is None:
                raise PrematureEndError(
                    "Event sequence ended without an end of document", cursor.index
                )

            event_type = event.type
            if event_type is EventType.START_ELEMENT:
                result.roots.append(self._build_subtree(event, cursor))
            elif event_type is EventType.END_DOCUMENT:
                return
            elif event_type is EventType.START_DOCUMENT:
                if seen_document_start or result.roots:
                    raise UnexpectedDocumentStartError(event_index=cursor.index)
                seen_document_start = True
                result.declaration = event.declaration
            elif event_type is EventType.END_ELEMENT:
                raise UnmatchedEndElementError(event.local_name, cursor.index)
            elif event_type is EventType.CHARACTERS:
                raise TextOutsideElementError(event.value or "", cursor.index)
            else:
                cursor.metrics.trivia_skipped += 1

    def _build_subtree(self, start: MarkupEvent, cursor: _EventCursor) -> XMLItem:
        metrics = cursor.metrics
        stack: List[_Frame] = []
        self._open_element(start, stack, cursor)

        while True:
            event = cursor.next_event()
            frame = stack[-1]
            if event is None:
                raise PrematureEndError(
                    f"Event sequence ended while <{frame.item.name}> is open",
                    cursor.index,
                )

            event_type = event.type
            if event_type is EventType.START_ELEMENT:
                self._open_element(event, stack, cursor)
            elif event_type is EventType.END_ELEMENT:
                if event.local_name != frame.item.name:
                    raise MismatchedEndElementError(
                        frame.item.name, event.local_name, cursor.index
                    )
                item = self._close_element(stack.pop())
                metrics.elements_built += 1
                if not stack:
                    return item
                stack[-1].item.children.append(item)
            elif event_type is EventType.CHARACTERS:
                metrics.text_runs += 1
                if self.config.text_policy is TextPolicy.KEEP_LAST:
                    frame.text_runs[:] = [event.value or ""]
                else:
                    frame.text_runs.append(event.value or "")
            elif event_type is EventType.START_DOCUMENT:
                raise NestedDocumentStartError(frame.item.name, cursor.index)
            elif event_type is EventType.END_DOCUMENT:
                raise UnexpectedDocumentEndError(frame.item.name, cursor.index)
            else:
                metrics.trivia_skipped += 1

    def _open_element(
        self, event: MarkupEvent, stack: List[_Frame], cursor: _EventCursor
    ) -> None:
        depth = len(stack) + 1
        max_depth = self.config.max_depth
        if max_depth is not None and depth > max_depth:
            raise DepthExceededError(max_depth, event.local_name, cursor.index)

        item = XMLItem(
            name=event.local_name,
            attributes=self._collect_attributes(event.attributes, cursor.metrics),
        )
        stack.append(_Frame(item))
        cursor.metrics.max_depth_reached = max(cursor.metrics.max_depth_reached, depth)

    @staticmethod
    def _close_element(frame: _Frame) -> XMLItem:
        frame.item.text = "".join(frame.text_runs)
        return frame.item

    def _collect_attributes(
        self, attributes: Iterable[Attribute], metrics: BuildMetrics
    ) -> Dict[str, str]:
        first_wins = (
            self.config.duplicate_attributes is DuplicateAttributePolicy.FIRST_WINS
        )
        collected: Dict[str, str] = {}
        for attribute in attributes:
            name = attribute.local_name
            if name in collected:
                metrics.duplicate_attributes_discarded += 1
                if first_wins:
                    continue
            collected[name] = attribute.value
        return collected


def read_xml(
    events: Iterable[MarkupEvent],
    config: Optional[TreeConfig] = None,
) -> List[XMLItem]:
    """Build the root items of an event stream.

    Raises:
        StructuralError: on the first nesting or boundary violation
        TokenizeError: if the event source fails while being read
    """
    return XMLTreeBuilder(config).build(events).roots
