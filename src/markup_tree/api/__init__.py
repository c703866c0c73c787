"""Public parsing API.

Level 1: ``parse``, ``parse_string``, ``parse_bytes``, ``parse_file``.
Level 2: ``MarkupTreeParser`` with a reusable ``ParserConfig``.
"""

from .parser import (
    MarkupTreeParser,
    parse,
    parse_bytes,
    parse_file,
    parse_string,
)

__all__ = [
    "MarkupTreeParser",
    "parse",
    "parse_bytes",
    "parse_file",
    "parse_string",
]
