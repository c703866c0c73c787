"""Shared utilities for markup tree building.

This module provides the error taxonomy, configuration objects, metrics and
logging helpers used by the reader, the builder and the API.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    DuplicateAttributePolicy,
    GlobalConfig,
    ParserConfig,
    ReaderConfig,
    TextPolicy,
    TreeConfig,
)
from .errors import (
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
from .logging import (
    ContextFormatter,
    CorrelationLogger,
    configure_logging,
    get_logger,
)
from .result import BuildMetrics

__all__ = [
    "BuildMetrics",
    "ConfigError",
    "ConfigValidationError",
    "DuplicateAttributePolicy",
    "GlobalConfig",
    "ParserConfig",
    "ReaderConfig",
    "TextPolicy",
    "TreeConfig",
    "DepthExceededError",
    "ErrorKind",
    "MarkupTreeError",
    "MismatchedEndElementError",
    "NestedDocumentStartError",
    "PrematureEndError",
    "StructuralError",
    "TextOutsideElementError",
    "TokenizeError",
    "UnexpectedDocumentBoundaryError",
    "UnexpectedDocumentEndError",
    "UnexpectedDocumentStartError",
    "UnmatchedEndElementError",
    "ContextFormatter",
    "CorrelationLogger",
    "configure_logging",
    "get_logger",
]
