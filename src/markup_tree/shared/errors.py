"""Error taxonomy for markup tree building.

Every failure surfaced by the reader or the builder is a ``MarkupTreeError``
carrying an ``ErrorKind``. Tokenizing failures come from the event source;
everything else is a ``StructuralError`` detected while building the tree.
"""

from enum import Enum, auto
from typing import Optional


class ErrorKind(Enum):
    """Kinds of failure a parse call can end with."""

    TOKENIZE_FAILURE = auto()
    UNEXPECTED_DOCUMENT_START = auto()
    UNEXPECTED_DOCUMENT_BOUNDARY = auto()
    TEXT_OUTSIDE_ELEMENT = auto()
    UNMATCHED_END_ELEMENT = auto()
    MISMATCHED_END_ELEMENT = auto()
    PREMATURE_END = auto()
    DEPTH_EXCEEDED = auto()


class MarkupTreeError(Exception):
    """Base exception for all markup tree failures."""

    kind: ErrorKind

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict:
        """Describe the error as a JSON-ready dictionary."""
        return {"kind": self.kind.name, "message": self.message}


class TokenizeError(MarkupTreeError):
    """The event source could not produce a well-formed event stream.

    Not retriable: the same input fails the same way.
    """

    kind = ErrorKind.TOKENIZE_FAILURE

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        super().__init__(message)
        self.line = line
        self.column = column

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.line is not None:
            result["line"] = self.line
            result["column"] = self.column
        return result


class StructuralError(MarkupTreeError):
    """Violation of nesting or document boundaries found by the builder."""

    def __init__(self, message: str, event_index: Optional[int] = None) -> None:
        super().__init__(message)
        self.event_index = event_index

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.event_index is not None:
            result["event_index"] = self.event_index
        return result


class UnexpectedDocumentStartError(StructuralError):
    """A second document-start appeared."""

    kind = ErrorKind.UNEXPECTED_DOCUMENT_START

    def __init__(
        self,
        message: str = "Encountered a second start of document",
        event_index: Optional[int] = None,
    ) -> None:
        super().__init__(message, event_index)


class UnexpectedDocumentBoundaryError(StructuralError):
    """A document-start or document-end appeared inside an open element."""

    kind = ErrorKind.UNEXPECTED_DOCUMENT_BOUNDARY

    def __init__(
        self,
        element: str,
        boundary: str = "start",
        event_index: Optional[int] = None,
    ) -> None:
        super().__init__(
            f"Encountered {boundary} of document while <{element}> is open",
            event_index,
        )
        self.element = element
        self.boundary = boundary


class TextOutsideElementError(StructuralError):
    """Character data appeared outside any element."""

    kind = ErrorKind.TEXT_OUTSIDE_ELEMENT

    def __init__(self, text: str, event_index: Optional[int] = None) -> None:
        super().__init__(
            f"Character data outside of any element: {text[:40]!r}", event_index
        )
        self.text = text


class UnmatchedEndElementError(StructuralError):
    """An element-end appeared with no element open."""

    kind = ErrorKind.UNMATCHED_END_ELEMENT

    def __init__(self, found: str, event_index: Optional[int] = None) -> None:
        super().__init__(
            f"End of element </{found}> without a matching start", event_index
        )
        self.found = found


class MismatchedEndElementError(StructuralError):
    """An element-end names a different element than the one open."""

    kind = ErrorKind.MISMATCHED_END_ELEMENT

    def __init__(
        self, expected: str, found: str, event_index: Optional[int] = None
    ) -> None:
        super().__init__(
            f"Expected </{expected}> but found </{found}>", event_index
        )
        self.expected = expected
        self.found = found

    def to_dict(self) -> dict:
        result = super().to_dict()
        result["expected"] = self.expected
        result["found"] = self.found
        return result


class PrematureEndError(StructuralError):
    """The event sequence ended too early."""

    kind = ErrorKind.PREMATURE_END

    def __init__(
        self,
        message: str = "Event sequence ended before the end of document",
        event_index: Optional[int] = None,
    ) -> None:
        super().__init__(message, event_index)


class NestedDocumentStartError(
    UnexpectedDocumentBoundaryError, UnexpectedDocumentStartError
):
    """A document-start appeared while an element was still open.

    Both a misplaced boundary and a duplicate document start.
    """

    kind = ErrorKind.UNEXPECTED_DOCUMENT_BOUNDARY

    def __init__(self, element: str, event_index: Optional[int] = None) -> None:
        UnexpectedDocumentBoundaryError.__init__(
            self, element, "start", event_index
        )


class UnexpectedDocumentEndError(UnexpectedDocumentBoundaryError, PrematureEndError):
    """The document ended while an element was still open.

    Both a misplaced boundary and a premature end, so it can be caught as
    either.
    """

    kind = ErrorKind.UNEXPECTED_DOCUMENT_BOUNDARY

    def __init__(self, element: str, event_index: Optional[int] = None) -> None:
        UnexpectedDocumentBoundaryError.__init__(
            self, element, "end", event_index
        )


class DepthExceededError(StructuralError):
    """Element nesting went deeper than the configured limit."""

    kind = ErrorKind.DEPTH_EXCEEDED

    def __init__(
        self, max_depth: int, element: str, event_index: Optional[int] = None
    ) -> None:
        super().__init__(
            f"Element <{element}> exceeds maximum nesting depth of {max_depth}",
            event_index,
        )
        self.max_depth = max_depth
        self.element = element
