"""markup-tree: build simple element trees from markup event streams.

Events (element starts/ends, text runs, trivia) are consumed once, left to
right, into ``XMLItem`` nodes with a name, text, attributes and children.
Structural violations stop the build with a ``MarkupTreeError``.

API levels:
- Level 1: Simple functions - parse(), parse_string(), parse_file()
- Level 2: Configured parser - MarkupTreeParser class
- Core: read_xml() / XMLTreeBuilder over any MarkupEvent iterable
"""

__version__ = "0.1.0"
__author__ = "markup-tree developers"

from .api import MarkupTreeParser, parse, parse_bytes, parse_file, parse_string
from .events import EventType, MarkupEvent, get_events, iter_events
from .shared.config import ParserConfig, TreeConfig
from .shared.errors import ErrorKind, MarkupTreeError, StructuralError, TokenizeError
from .tree import ParseResult, XMLItem, XMLTreeBuilder, read_xml

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_bytes",
    "parse_file",

    # Level 2: Configured parser
    "MarkupTreeParser",

    # Core builder and events
    "read_xml",
    "XMLTreeBuilder",
    "get_events",
    "iter_events",
    "EventType",
    "MarkupEvent",

    # Result objects
    "ParseResult",
    "XMLItem",

    # Configuration
    "ParserConfig",
    "TreeConfig",

    # Errors
    "ErrorKind",
    "MarkupTreeError",
    "StructuralError",
    "TokenizeError",
]
