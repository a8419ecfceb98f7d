"""Data models for outline-toc."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto

from .exceptions import TocError


@dataclass(frozen=True, order=True)
class Position:
    """Zero-based line/column location inside a document.

    Attributes:
        line: Zero-based line index.
        column: Zero-based column index within the line.
    """

    line: int
    column: int = 0


@dataclass(frozen=True)
class Span:
    """Range between two positions, end inclusive of the last character."""

    start: Position
    end: Position

    def contains(self, other: Span) -> bool:
        return self.start <= other.start and other.end <= self.end


@dataclass(frozen=True)
class Heading:
    """Heading supplied by the host outline.

    Attributes:
        text: Heading text without the leading ``#`` markers.
        level: Heading level between 1 and 6.
        span: Location of the heading in the document.
    """

    text: str
    level: int
    span: Span


class SectionKind(Enum):
    """Block kinds reported by the host section outline."""

    HEADING = "heading"
    LIST = "list"
    PARAGRAPH = "paragraph"
    CODE = "code"
    BLOCKQUOTE = "blockquote"
    TABLE = "table"
    THEMATIC_BREAK = "thematicBreak"
    HTML = "html"
    OTHER = "other"

    @classmethod
    def from_host(cls, value: str) -> SectionKind:
        try:
            return cls(value)
        except ValueError:
            return cls.OTHER


@dataclass(frozen=True)
class Section:
    """Top-level block of the document."""

    kind: SectionKind
    span: Span


class Outcome(Enum):
    """Outcome of a ToC computation.

    Attributes:
        OK: A ToC was rendered.
        EMPTY: Nothing to do; the attached error explains why.
        FAILED: The document could not be processed.
    """

    OK = auto()
    EMPTY = auto()
    FAILED = auto()


@dataclass(frozen=True)
class TocResult:
    """Result of building or splicing a ToC.

    Attributes:
        outcome: Whether a ToC was produced.
        text: Rendered ToC block, or None when nothing was produced.
        error: Reason for an empty or failed outcome.
    """

    outcome: Outcome
    text: str | None = None
    error: TocError | None = field(default=None, compare=False)

    @classmethod
    def ok(cls, text: str) -> TocResult:
        return cls(Outcome.OK, text=text)

    @classmethod
    def empty(cls, error: TocError) -> TocResult:
        return cls(Outcome.EMPTY, error=error)

    @classmethod
    def failed(cls, error: TocError) -> TocResult:
        return cls(Outcome.FAILED, error=error)

    @property
    def is_ok(self) -> bool:
        return self.outcome is Outcome.OK

    @property
    def message(self) -> str | None:
        return str(self.error) if self.error is not None else None
