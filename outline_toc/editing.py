"""Writing a ToC into a document: insertion and in-place updates."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Protocol

from .config import TocSettings
from .exceptions import MalformedDocumentStructure, NoExistingToc
from .generator import create_toc
from .models import Heading, Position, Section, SectionKind, Span, TocResult


class Editor(Protocol):
    """Minimal editor surface the ToC commands need."""

    def get_cursor(self) -> Position: ...

    def replace_range(self, text: str, start: Position, end: Position) -> None: ...


class TextBuffer:
    """In-memory document addressed by line/column positions.

    Columns past the end of a line and lines past the end of the document are
    clamped to the nearest valid position. The document keeps the line ending
    of its first line break; inserted text is converted to it.

    Attributes:
        lines: Document lines without their line endings.
        newline: Line ending used when joining lines, ``"\\n"`` or ``"\\r\\n"``.
        cursor: Current cursor position.
    """

    def __init__(self, text: str, cursor: Position | None = None):
        self.newline = _detect_newline(text)
        self.lines = text.split(self.newline)
        self.cursor = cursor or Position(0, 0)

    @property
    def text(self) -> str:
        return self.newline.join(self.lines)

    def get_cursor(self) -> Position:
        return self.cursor

    def offset(self, position: Position) -> int:
        line = min(max(position.line, 0), len(self.lines) - 1)
        column = min(max(position.column, 0), len(self.lines[line]))
        return sum(len(text) + len(self.newline) for text in self.lines[:line]) + column

    def replace_range(self, text: str, start: Position, end: Position) -> None:
        start_offset = self.offset(start)
        end_offset = self.offset(end)
        if end_offset < start_offset:
            raise ValueError(f"Range end {end} precedes range start {start}")

        text = text.replace("\r\n", "\n").replace("\n", self.newline)
        content = self.text
        self.lines = (content[:start_offset] + text + content[end_offset:]).split(self.newline)


def _detect_newline(text: str) -> str:
    index = text.find("\n")
    if index > 0 and text[index - 1] == "\r":
        return "\r\n"
    return "\n"


def find_toc_heading(headings: Sequence[Heading], title: str) -> Heading | None:
    """Return the first heading whose text contains `title`."""
    for heading in headings:
        if title in heading.text:
            return heading
    return None


def locate_toc_block(toc_heading: Heading, sections: Sequence[Section]) -> Span:
    """Find the document range occupied by an existing ToC.

    The ToC is the heading section containing `toc_heading` plus the section
    right after it, which holds the list of links.

    Args:
        toc_heading: Heading carrying the ToC title.
        sections: Section outline in document order.

    Returns:
        Span: Range from the start of the ToC heading's last line to the end of
            the list block.

    Raises:
        MalformedDocumentStructure: If no heading section contains the ToC
            heading, nothing follows it, or the following section is another
            heading.
    """
    for index, section in enumerate(sections):
        if section.kind is SectionKind.HEADING and section.span.contains(toc_heading.span):
            break
    else:
        raise MalformedDocumentStructure(
            f"no heading section contains the ToC heading on line {toc_heading.span.start.line + 1}"
        )

    if index + 1 >= len(sections):
        raise MalformedDocumentStructure("the ToC heading is not followed by a list block")

    list_section = sections[index + 1]
    if list_section.kind is SectionKind.HEADING:
        raise MalformedDocumentStructure(
            f"the ToC heading is followed by another heading on line "
            f"{list_section.span.start.line + 1}"
        )

    return Span(Position(section.span.end.line, 0), list_section.span.end)


def update_toc(
    headings: Sequence[Heading],
    sections: Sequence[Section],
    editor: Editor,
    settings: TocSettings,
    notify: Callable[[str], None] | None = None,
) -> TocResult:
    """Regenerate an existing ToC in place.

    The ToC heading is left out of the outline used for rendering so the ToC
    never lists itself. The host outline is not modified.

    Args:
        headings: Heading outline in document order.
        sections: Section outline in document order.
        editor: Editor providing the cursor and the range-replace primitive.
        settings: Rendering settings; `title` identifies the ToC heading.
        notify: Optional callback receiving user-facing messages.

    Returns:
        TocResult: ``ok`` with the text written to the editor, ``empty`` when
        there is no ToC or no heading matched, ``failed`` when the document
        structure around the ToC is not understood.

    Examples:
        buffer = TextBuffer(text, cursor=Position(0))
        update_toc(snapshot.headings, snapshot.sections, buffer, TocSettings())
    """
    title = settings.resolved_title
    toc_heading = find_toc_heading(headings, title)

    if toc_heading is None:
        return _report(TocResult.empty(NoExistingToc(title)), notify)

    try:
        block = locate_toc_block(toc_heading, sections)
    except MalformedDocumentStructure as error:
        return _report(TocResult.failed(error), notify)

    remaining = tuple(heading for heading in headings if heading is not toc_heading)
    result = create_toc(remaining, editor.get_cursor(), settings, notify=notify)
    if not result.is_ok:
        return result

    toc = result.text.rstrip()
    editor.replace_range(toc, block.start, block.end)
    return TocResult.ok(toc)


def insert_toc(
    headings: Sequence[Heading],
    editor: Editor,
    settings: TocSettings,
    notify: Callable[[str], None] | None = None,
) -> TocResult:
    """Render the ToC for the editor cursor and insert it there."""
    cursor = editor.get_cursor()
    result = create_toc(headings, cursor, settings, notify=notify)
    if result.is_ok:
        editor.replace_range(result.text, cursor, cursor)
    return result


def _report(result: TocResult, notify: Callable[[str], None] | None) -> TocResult:
    if notify is not None and result.message is not None:
        notify(result.message)
    return result
