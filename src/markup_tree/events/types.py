"""Typed markup events consumed by the tree builder.

An event stream starts with ``START_DOCUMENT``, ends with ``END_DOCUMENT``
and carries element starts/ends, character runs and trivia in between.
Names are kept as ``QualifiedName`` so that namespace information is
available to callers, but only ``local_name`` takes part in tree building.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Iterable, Optional, Tuple, Union


class EventType(Enum):
    """Kinds of markup events."""

    START_DOCUMENT = auto()
    END_DOCUMENT = auto()
    START_ELEMENT = auto()
    END_ELEMENT = auto()
    CHARACTERS = auto()              # Character data with non-whitespace content
    WHITESPACE = auto()              # Whitespace-only character data
    COMMENT = auto()
    CDATA = auto()                   # CDATA section marker
    PROCESSING_INSTRUCTION = auto()


TRIVIA_TYPES = frozenset({
    EventType.WHITESPACE,
    EventType.COMMENT,
    EventType.CDATA,
    EventType.PROCESSING_INSTRUCTION,
})


@dataclass(frozen=True)
class QualifiedName:
    """Element or attribute name split into its parts."""

    local_name: str
    namespace: Optional[str] = None
    prefix: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate name values."""
        if not self.local_name:
            raise ValueError("Local name cannot be empty")

    @classmethod
    def from_clark(cls, name: str, prefix: Optional[str] = None) -> "QualifiedName":
        """Parse lxml's ``{namespace}local`` notation."""
        if name.startswith("{"):
            namespace, _, local_name = name[1:].partition("}")
            return cls(local_name, namespace or None, prefix)
        return cls(name, None, prefix)

    @classmethod
    def from_string(cls, name: str) -> "QualifiedName":
        """Parse ``prefix:local`` or plain ``local`` notation."""
        if name.startswith("{"):
            return cls.from_clark(name)
        if ":" in name:
            prefix, local_name = name.split(":", 1)
            return cls(local_name, None, prefix or None)
        return cls(name)

    def __str__(self) -> str:
        if self.prefix:
            return f"{self.prefix}:{self.local_name}"
        return self.local_name


NameLike = Union[str, QualifiedName]


def _as_name(name: NameLike) -> QualifiedName:
    if isinstance(name, QualifiedName):
        return name
    return QualifiedName.from_string(name)


@dataclass(frozen=True)
class Attribute:
    """One attribute of an element-start event."""

    name: QualifiedName
    value: str

    @property
    def local_name(self) -> str:
        """Attribute name without namespace or prefix."""
        return self.name.local_name


AttributeLike = Union[Attribute, Tuple[NameLike, str]]


@dataclass(frozen=True)
class XMLDeclaration:
    """Document metadata from the ``<?xml ...?>`` header."""

    version: str = "1.0"
    encoding: str = "utf-8"
    standalone: Optional[bool] = None

    def to_dict(self) -> dict:
        """Convert declaration to dictionary representation."""
        result = {"version": self.version, "encoding": self.encoding}
        if self.standalone is not None:
            result["standalone"] = self.standalone
        return result


@dataclass(frozen=True)
class MarkupEvent:
    """A single event of a tokenized markup stream.

    Which fields are set depends on ``type``: elements carry ``name`` (and
    ``attributes`` for starts), character data and trivia carry ``value``,
    processing instructions carry their target in ``name``, and document
    starts carry ``declaration``.
    """

    type: EventType
    name: Optional[QualifiedName] = None
    attributes: Tuple[Attribute, ...] = field(default_factory=tuple)
    value: Optional[str] = None
    declaration: Optional[XMLDeclaration] = None

    def __post_init__(self) -> None:
        """Validate that element events are named."""
        if self.type in (EventType.START_ELEMENT, EventType.END_ELEMENT):
            if self.name is None:
                raise ValueError(f"{self.type.name} event requires a name")

    @property
    def is_trivia(self) -> bool:
        """Check if this event never contributes to the tree."""
        return self.type in TRIVIA_TYPES

    @property
    def local_name(self) -> Optional[str]:
        """Local name of the element, or None for unnamed events."""
        return self.name.local_name if self.name is not None else None

    @classmethod
    def start_document(
        cls,
        version: str = "1.0",
        encoding: str = "utf-8",
        standalone: Optional[bool] = None,
    ) -> "MarkupEvent":
        return cls(
            EventType.START_DOCUMENT,
            declaration=XMLDeclaration(version, encoding, standalone),
        )

    @classmethod
    def end_document(cls) -> "MarkupEvent":
        return cls(EventType.END_DOCUMENT)

    @classmethod
    def start_element(
        cls, name: NameLike, attributes: Iterable[AttributeLike] = ()
    ) -> "MarkupEvent":
        """Create an element-start event.

        Attributes may be ``Attribute`` objects or ``(name, value)`` pairs;
        duplicates are kept as given.
        """
        attrs = tuple(
            attr if isinstance(attr, Attribute) else Attribute(_as_name(attr[0]), attr[1])
            for attr in attributes
        )
        return cls(EventType.START_ELEMENT, name=_as_name(name), attributes=attrs)

    @classmethod
    def end_element(cls, name: NameLike) -> "MarkupEvent":
        return cls(EventType.END_ELEMENT, name=_as_name(name))

    @classmethod
    def characters(cls, text: str) -> "MarkupEvent":
        return cls(EventType.CHARACTERS, value=text)

    @classmethod
    def whitespace(cls, text: str) -> "MarkupEvent":
        return cls(EventType.WHITESPACE, value=text)

    @classmethod
    def comment(cls, text: str) -> "MarkupEvent":
        return cls(EventType.COMMENT, value=text)

    @classmethod
    def cdata(cls, text: str) -> "MarkupEvent":
        return cls(EventType.CDATA, value=text)

    @classmethod
    def processing_instruction(
        cls, target: str, data: Optional[str] = None
    ) -> "MarkupEvent":
        return cls(
            EventType.PROCESSING_INSTRUCTION,
            name=QualifiedName(target),
            value=data,
        )
