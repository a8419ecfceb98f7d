import json
import re
import textwrap
from pathlib import Path

import pytest
from click.testing import CliRunner

from outline_toc.models import Heading, Position, Section, SectionKind, Span
from outline_toc.snapshot import OutlineSnapshot

HEADING_PATTERN = re.compile(r"^(#{1,6}) (.*)$")
LIST_ITEM_PATTERN = re.compile(r"^\s*(?:[-*+]|\d+\.)\s")


def outline_from_text(text: str) -> OutlineSnapshot:
    """Build the outline a host editor would report for simple markdown.

    Headings are ATX lines, blank lines separate blocks, and a block is a
    list when its first line is a list item.
    """
    lines = text.split("\n")
    headings = []
    sections = []
    block: list = []

    def flush():
        if block:
            kind, start, end = block
            span = Span(Position(start, 0), Position(end, len(lines[end])))
            sections.append(Section(kind, span))
            block.clear()

    for number, line in enumerate(lines):
        match = HEADING_PATTERN.match(line)
        if match:
            flush()
            span = Span(Position(number, 0), Position(number, len(line)))
            headings.append(Heading(match.group(2), len(match.group(1)), span))
            sections.append(Section(SectionKind.HEADING, span))
        elif not line.strip():
            flush()
        elif block:
            block[2] = number
        else:
            kind = SectionKind.LIST if LIST_ITEM_PATTERN.match(line) else SectionKind.PARAGRAPH
            block.extend([kind, number, number])
    flush()

    return OutlineSnapshot(headings=tuple(headings), sections=tuple(sections))


def _position_json(position: Position) -> dict:
    return {"line": position.line, "col": position.column}


def _span_json(span: Span) -> dict:
    return {"start": _position_json(span.start), "end": _position_json(span.end)}


def snapshot_to_json(snapshot: OutlineSnapshot) -> dict:
    return {
        "headings": [
            {"heading": heading.text, "level": heading.level, "position": _span_json(heading.span)}
            for heading in snapshot.headings
        ],
        "sections": [
            {"type": section.kind.value, "position": _span_json(section.span)}
            for section in snapshot.sections
        ],
    }


@pytest.fixture()
def cli_runner() -> CliRunner:
    """Provides a reusable Click CLI runner."""
    return CliRunner()


@pytest.fixture(scope="session")
def outline_of():
    """Builds an outline snapshot from markdown text."""
    return outline_from_text


@pytest.fixture()
def write_document():
    """Writes a markdown document and its outline snapshot side by side."""

    def _write(directory: Path, name: str, content: str) -> tuple[Path, Path]:
        text = textwrap.dedent(content).lstrip()
        document = directory / f"{name}.md"
        document.write_text(text, encoding="utf-8")
        outline = directory / f"{name}.json"
        outline.write_text(json.dumps(snapshot_to_json(outline_from_text(text))), encoding="utf-8")
        return document, outline

    return _write
