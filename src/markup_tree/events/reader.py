"""Event reader turning XML input into ``MarkupEvent`` streams.

The reader drives an ``lxml.etree.XMLParser`` in feed mode with a parser
target that records each callback as an event. Input is fed in chunks and
the events collected so far are yielded between chunks, so the tree builder
can consume them while the document is still being read.
"""

import re
import time
from pathlib import Path
from typing import IO, Dict, Iterator, List, Optional, Union

from lxml import etree

from markup_tree.shared import ReaderConfig, TokenizeError, get_logger

from .types import Attribute, MarkupEvent, QualifiedName

SourceType = Union[str, bytes, bytearray, Path, IO[str], IO[bytes]]

_UTF8_BOM = b"\xef\xbb\xbf"
_XML_WHITESPACE = " \t\r\n"
_DECLARATION_PATTERN = re.compile(
    rb"<\?xml\s+version\s*=\s*[\"']([^\"']+)[\"']"
    rb"(?:\s+encoding\s*=\s*[\"']([^\"']+)[\"'])?"
    rb"(?:\s+standalone\s*=\s*[\"'](yes|no)[\"'])?"
    rb"\s*\?>"
)
MS_PER_SECOND = 1000


def sniff_declaration(head: bytes) -> MarkupEvent:
    """Build the document-start event from the first bytes of input.

    Only an ASCII-compatible ``<?xml ...?>`` header at the very start is
    recognised; anything else yields the defaults.
    """
    if head.startswith(_UTF8_BOM):
        head = head[len(_UTF8_BOM):]
    match = _DECLARATION_PATTERN.match(head)
    if match is None:
        return MarkupEvent.start_document()

    version, encoding, standalone = match.groups()
    return MarkupEvent.start_document(
        version=version.decode("ascii", "replace"),
        encoding=encoding.decode("ascii", "replace") if encoding else "utf-8",
        standalone=None if standalone is None else standalone == b"yes",
    )


class _EventCollector:
    """lxml parser target that records callbacks as markup events.

    Consecutive ``data`` callbacks are joined into one character run before
    the next structural callback.
    """

    def __init__(self, config: ReaderConfig) -> None:
        self._config = config
        self._events: List[MarkupEvent] = []
        self._text: List[str] = []

    def drain(self) -> List[MarkupEvent]:
        """Hand over the events collected so far."""
        events = self._events
        self._events = []
        return events

    def _flush_text(self) -> None:
        if not self._text:
            return
        text = "".join(self._text)
        self._text.clear()
        if text.strip(_XML_WHITESPACE):
            self._events.append(MarkupEvent.characters(text))
        else:
            self._events.append(MarkupEvent.whitespace(text))

    # lxml parser target interface

    def start(
        self, tag: str, attrib: Dict[str, str], nsmap: Optional[Dict] = None
    ) -> None:
        self._flush_text()
        attributes = [
            Attribute(QualifiedName.from_clark(name), value)
            for name, value in attrib.items()
        ]
        self._events.append(
            MarkupEvent.start_element(QualifiedName.from_clark(tag), attributes)
        )

    def end(self, tag: str) -> None:
        self._flush_text()
        self._events.append(MarkupEvent.end_element(QualifiedName.from_clark(tag)))

    def data(self, data: str) -> None:
        self._text.append(data)

    def comment(self, text: str) -> None:
        if self._config.remove_comments:
            return
        self._flush_text()
        self._events.append(MarkupEvent.comment(text))

    def pi(self, target: str, data: Optional[str] = None) -> None:
        if self._config.remove_pis:
            return
        self._flush_text()
        self._events.append(MarkupEvent.processing_instruction(target, data))

    def close(self) -> None:
        self._flush_text()


class EventReader:
    """Produces markup events from XML text, bytes, files or paths."""

    def __init__(
        self,
        config: Optional[ReaderConfig] = None,
        correlation_id: Optional[str] = None,
    ) -> None:
        self.config = config or ReaderConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "event_reader")

    def iter_events(self, source: SourceType) -> Iterator[MarkupEvent]:
        """Yield the events of ``source`` in document order.

        Raises:
            TokenizeError: if the input is not well-formed XML
            TypeError: if ``source`` is not a supported input type
            OSError: if a path or file cannot be read
        """
        start_time = time.time()
        chunks = self._iter_chunks(source)
        first = next(chunks, b"")
        text_input = isinstance(first, str)
        first_bytes = first.encode("utf-8") if text_input else first

        collector = _EventCollector(self.config)
        parser = etree.XMLParser(
            target=collector,
            encoding="utf-8" if text_input else None,
            resolve_entities=self.config.resolve_entities,
            no_network=self.config.no_network,
            huge_tree=self.config.huge_tree,
        )

        self.logger.debug(
            "Starting event reading",
            extra={
                "input_type": type(source).__name__,
                "chunk_size": self.config.chunk_size,
            }
        )

        yield sniff_declaration(first_bytes)

        chunk = first_bytes
        bytes_read = 0
        while chunk:
            bytes_read += len(chunk)
            self._feed(parser, chunk)
            yield from collector.drain()
            chunk = next(chunks, b"")
            if isinstance(chunk, str):
                chunk = chunk.encode("utf-8")

        self._close(parser)
        yield from collector.drain()
        yield MarkupEvent.end_document()

        self.logger.debug(
            "Event reading completed",
            extra={
                "bytes_read": bytes_read,
                "processing_time_ms": (time.time() - start_time) * MS_PER_SECOND,
            }
        )

    def get_events(self, source: SourceType) -> List[MarkupEvent]:
        """Read all events of ``source`` into memory."""
        return list(self.iter_events(source))

    def _iter_chunks(self, source: SourceType) -> Iterator[Union[str, bytes]]:
        size = self.config.chunk_size
        if isinstance(source, (str, bytes, bytearray)):
            data = bytes(source) if isinstance(source, bytearray) else source
            for offset in range(0, len(data), size):
                yield data[offset:offset + size]
        elif isinstance(source, Path):
            with source.open("rb") as handle:
                yield from self._read_handle(handle, size)
        elif hasattr(source, "read"):
            yield from self._read_handle(source, size)
        else:
            raise TypeError(
                f"Unsupported input type for event reading: {type(source).__name__}"
            )

    @staticmethod
    def _read_handle(handle: IO, size: int) -> Iterator[Union[str, bytes]]:
        while True:
            chunk = handle.read(size)
            if not chunk:
                return
            yield chunk

    def _feed(self, parser: etree.XMLParser, chunk: bytes) -> None:
        try:
            parser.feed(chunk)
        except etree.LxmlError as e:
            raise self._tokenize_error(e) from e

    def _close(self, parser: etree.XMLParser) -> None:
        try:
            parser.close()
        except etree.LxmlError as e:
            raise self._tokenize_error(e) from e

    def _tokenize_error(self, error: Exception) -> TokenizeError:
        line, column = getattr(error, "position", (None, None))
        message = getattr(error, "msg", None) or str(error) or type(error).__name__
        self.logger.debug(
            "Tokenizing failed",
            extra={"error": message, "line": line, "column": column}
        )
        return TokenizeError(message, line, column)


def iter_events(
    source: SourceType,
    config: Optional[ReaderConfig] = None,
    correlation_id: Optional[str] = None,
) -> Iterator[MarkupEvent]:
    """Stream the events of ``source``."""
    return EventReader(config, correlation_id).iter_events(source)


def get_events(
    source: SourceType,
    config: Optional[ReaderConfig] = None,
    correlation_id: Optional[str] = None,
) -> List[MarkupEvent]:
    """Read all events of ``source`` into a list.

    Raises:
        TokenizeError: if the input is not well-formed XML
    """
    return EventReader(config, correlation_id).get_events(source)
