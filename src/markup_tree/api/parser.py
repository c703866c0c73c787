"""Parser API chaining the event reader and the tree builder.

Module-level functions cover the common cases; ``MarkupTreeParser`` holds a
``ParserConfig`` for repeated use. Failures are raised as
``MarkupTreeError`` subclasses after being logged.
"""

import time
from pathlib import Path
from typing import IO, Any, Dict, Iterable, Optional, Union

from markup_tree.events import EventReader, MarkupEvent
from markup_tree.shared import MarkupTreeError, ParserConfig, get_logger
from markup_tree.tree import ParseResult, XMLTreeBuilder

InputType = Union[str, bytes, bytearray, Path, IO[str], IO[bytes]]

MS_PER_SECOND = 1000


class MarkupTreeParser:
    """Configured parser for building item trees from XML input.

    Attributes:
        config: Current parser configuration
        correlation_id: Correlation ID for request tracking

    Examples:
        >>> parser = MarkupTreeParser(ParserConfig.legacy())
        >>> result = parser.parse_string('<root>one<item/>two</root>')
        >>> result.root.text
        'two'
    """

    def __init__(
        self,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ParserConfig.default()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "markup_tree_parser")

        self._parse_count = 0
        self._failed_parses = 0
        self._total_processing_time = 0.0

    def parse(self, input_data: InputType) -> ParseResult:
        """Parse XML given as text, bytes, a path or a file-like object.

        Raises:
            TokenizeError: if the input is not well-formed XML
            StructuralError: if the events do not form a valid tree
            TypeError: if the input type is not supported
        """
        if isinstance(input_data, Path):
            return self.parse_file(input_data)
        if not isinstance(input_data, (str, bytes, bytearray)) and not hasattr(
            input_data, "read"
        ):
            raise TypeError(
                f"Unsupported input type: {type(input_data).__name__}"
            )
        return self._run(input_data)

    def parse_string(self, xml_string: str) -> ParseResult:
        """Parse XML from a string."""
        if not isinstance(xml_string, str):
            raise TypeError("parse_string requires a str")
        return self._run(xml_string)

    def parse_bytes(self, xml_bytes: Union[bytes, bytearray]) -> ParseResult:
        """Parse XML from bytes, letting the parser detect the encoding."""
        if not isinstance(xml_bytes, (bytes, bytearray)):
            raise TypeError("parse_bytes requires bytes")
        return self._run(xml_bytes)

    def parse_file(self, file_path: Union[str, Path]) -> ParseResult:
        """Parse XML from a file.

        Raises:
            FileNotFoundError: if the path does not exist
            IsADirectoryError: if the path is a directory
        """
        path_obj = Path(file_path)
        if not path_obj.exists():
            raise FileNotFoundError(f"File not found: {path_obj}")
        if path_obj.is_dir():
            raise IsADirectoryError(f"Path is not a file: {path_obj}")

        self.logger.debug("Parsing file", extra={"file_path": str(path_obj)})
        return self._run(path_obj)

    def parse_events(self, events: Iterable[MarkupEvent]) -> ParseResult:
        """Build the tree of an already tokenized event stream."""
        return self._build(events, "events")

    def with_config(self, **overrides: Any) -> "MarkupTreeParser":
        """Create a parser whose configuration has ``overrides`` applied.

        Example:
            >>> shallow = MarkupTreeParser().with_config(tree__max_depth=8)
        """
        return MarkupTreeParser(self.config.override(**overrides), self.correlation_id)

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get parser usage statistics."""
        return {
            "total_parses": self._parse_count,
            "failed_parses": self._failed_parses,
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._failed_parses = 0
        self._total_processing_time = 0.0

    def _run(self, source: Any) -> ParseResult:
        reader = EventReader(self.config.reader, self.correlation_id)
        return self._build(reader.iter_events(source), type(source).__name__)

    def _build(self, events: Iterable[MarkupEvent], input_type: str) -> ParseResult:
        start_time = time.time()
        builder = XMLTreeBuilder(self.config.tree, self.correlation_id)
        self._parse_count += 1

        self.logger.debug(
            "Starting parse operation",
            extra={"input_type": input_type, "parse_count": self._parse_count}
        )

        try:
            result = builder.build(events)
        except MarkupTreeError as e:
            self._failed_parses += 1
            self._total_processing_time += (time.time() - start_time) * MS_PER_SECOND
            self.logger.debug(
                "Parse operation failed",
                extra={"input_type": input_type, "kind": e.kind.name}
            )
            raise

        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._total_processing_time += processing_time
        result.metrics.processing_time_ms = processing_time
        return result


def parse(
    input_data: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse XML from a string, bytes, Path or file-like object.

    Examples:
        >>> result = parse('<root><item id="1">value</item></root>')
        >>> result.root.name
        'root'
        >>> result.find('item').text
        'value'
    """
    return MarkupTreeParser(config, correlation_id).parse(input_data)


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse XML from a string."""
    return MarkupTreeParser(config, correlation_id).parse_string(xml_string)


def parse_bytes(
    xml_bytes: Union[bytes, bytearray],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse XML from bytes."""
    return MarkupTreeParser(config, correlation_id).parse_bytes(xml_bytes)


def parse_file(
    file_path: Union[str, Path],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> ParseResult:
    """Parse XML from a file path.

    Raises:
        FileNotFoundError: if the path does not exist
    """
    return MarkupTreeParser(config, correlation_id).parse_file(file_path)
