"""Tests for the error taxonomy."""

import pytest

from markup_tree.shared.errors import (
    DepthExceededError,
    ErrorKind,
    MarkupTreeError,
    MismatchedEndElementError,
    NestedDocumentStartError,
    PrematureEndError,
    StructuralError,
    TextOutsideElementError,
    TokenizeError,
    UnexpectedDocumentBoundaryError,
    UnexpectedDocumentEndError,
    UnexpectedDocumentStartError,
    UnmatchedEndElementError,
)


class TestErrorKinds:
    """Each error class reports its own kind."""

    @pytest.mark.parametrize(
        "error, kind",
        [
            (TokenizeError("bad"), ErrorKind.TOKENIZE_FAILURE),
            (UnexpectedDocumentStartError(), ErrorKind.UNEXPECTED_DOCUMENT_START),
            (UnexpectedDocumentBoundaryError("a"), ErrorKind.UNEXPECTED_DOCUMENT_BOUNDARY),
            (TextOutsideElementError("x"), ErrorKind.TEXT_OUTSIDE_ELEMENT),
            (UnmatchedEndElementError("a"), ErrorKind.UNMATCHED_END_ELEMENT),
            (MismatchedEndElementError("a", "b"), ErrorKind.MISMATCHED_END_ELEMENT),
            (PrematureEndError(), ErrorKind.PREMATURE_END),
            (DepthExceededError(3, "a"), ErrorKind.DEPTH_EXCEEDED),
            (NestedDocumentStartError("a"), ErrorKind.UNEXPECTED_DOCUMENT_BOUNDARY),
            (UnexpectedDocumentEndError("a"), ErrorKind.UNEXPECTED_DOCUMENT_BOUNDARY),
        ],
    )
    def test_kind(self, error, kind):
        """Test the kind attached to every error class."""
        assert error.kind is kind
        assert isinstance(error, MarkupTreeError)

    def test_tokenize_error_is_not_structural(self):
        """Test that tokenizing failures are separate from structural ones."""
        assert not isinstance(TokenizeError("bad"), StructuralError)


class TestErrorDetails:
    """Messages and dictionary forms of errors."""

    def test_mismatched_end_element(self):
        """Test expected and found names."""
        error = MismatchedEndElementError("a", "b", event_index=4)

        assert error.expected == "a"
        assert error.found == "b"
        assert str(error) == "Expected </a> but found </b>"
        assert error.to_dict() == {
            "kind": "MISMATCHED_END_ELEMENT",
            "message": "Expected </a> but found </b>",
            "event_index": 4,
            "expected": "a",
            "found": "b",
        }

    def test_tokenize_error_position(self):
        """Test that line and column appear only when known."""
        assert TokenizeError("bad", 3, 7).to_dict() == {
            "kind": "TOKENIZE_FAILURE",
            "message": "bad",
            "line": 3,
            "column": 7,
        }
        assert "line" not in TokenizeError("bad").to_dict()

    def test_event_index_omitted_when_unknown(self):
        """Test structural errors without a position."""
        assert "event_index" not in PrematureEndError().to_dict()

    def test_text_outside_element_keeps_text(self):
        """Test that the offending text is available."""
        error = TextOutsideElementError("hello", 2)

        assert error.text == "hello"
        assert "'hello'" in error.message

    def test_boundary_message(self):
        """Test boundary error messages name the open element."""
        assert "start of document while <a> is open" in str(NestedDocumentStartError("a"))
        assert "end of document while <a> is open" in str(UnexpectedDocumentEndError("a"))

    def test_depth_exceeded(self):
        """Test depth error details."""
        error = DepthExceededError(2, "c", 5)

        assert error.max_depth == 2
        assert error.element == "c"
        assert "maximum nesting depth of 2" in error.message


class TestDualClassification:
    """Errors that belong to two categories can be caught as either."""

    def test_document_end_inside_element(self):
        """Test document end inside an element is boundary and premature end."""
        error = UnexpectedDocumentEndError("a", 3)

        assert isinstance(error, UnexpectedDocumentBoundaryError)
        assert isinstance(error, PrematureEndError)
        assert error.element == "a"
        assert error.boundary == "end"
        assert error.event_index == 3

    def test_document_start_inside_element(self):
        """Test nested document start is boundary and duplicate start."""
        error = NestedDocumentStartError("a", 3)

        assert isinstance(error, UnexpectedDocumentBoundaryError)
        assert isinstance(error, UnexpectedDocumentStartError)
        assert error.boundary == "start"
        assert error.event_index == 3

    def test_catch_as_premature_end(self):
        """Test that except clauses for either base class match."""
        with pytest.raises(PrematureEndError):
            raise UnexpectedDocumentEndError("root")
