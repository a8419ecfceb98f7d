"""Loading host outline snapshots.

A snapshot is the heading and section outline a host editor computed for a
document, stored as JSON::

    {
      "headings": [
        {"heading": "Intro", "level": 1,
         "position": {"start": {"line": 0, "col": 0}, "end": {"line": 0, "col": 7}}}
      ],
      "sections": [
        {"type": "heading",
         "position": {"start": {"line": 0, "col": 0}, "end": {"line": 0, "col": 7}}}
      ]
    }
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from .constants import MAX_HEADING_LEVEL, MIN_HEADING_LEVEL
from .exceptions import OutlineError
from .filesystem import safe_read
from .models import Heading, Position, Section, SectionKind, Span


@dataclass(frozen=True)
class OutlineSnapshot:
    """Heading and section outlines of one document.

    Attributes:
        headings: Headings in document order.
        sections: Top-level blocks in document order.
    """

    headings: tuple[Heading, ...] = ()
    sections: tuple[Section, ...] = ()


def parse_snapshot(data: object) -> OutlineSnapshot:
    """Build an `OutlineSnapshot` from decoded JSON.

    Args:
        data: Mapping with optional ``headings`` and ``sections`` lists.

    Returns:
        OutlineSnapshot: Immutable outline.

    Raises:
        OutlineError: If the structure, a position, or a heading level is
            invalid.
    """
    if not isinstance(data, dict):
        raise OutlineError("Outline snapshot must be a JSON object")

    headings = tuple(
        _parse_heading(entry, index)
        for index, entry in enumerate(_ensure_list(data, "headings"))
    )
    sections = tuple(
        _parse_section(entry, index)
        for index, entry in enumerate(_ensure_list(data, "sections"))
    )
    return OutlineSnapshot(headings=headings, sections=sections)


def load_snapshot(filepath: Path) -> OutlineSnapshot:
    """Read and decode an outline snapshot file.

    Raises:
        IOError: If the file cannot be opened.
        OutlineError: If the content is not valid JSON or not a valid outline.
    """
    with safe_read(filepath) as stream:
        try:
            data = json.load(stream)
        except (json.JSONDecodeError, UnicodeDecodeError) as error:
            raise OutlineError(f"{filepath} is not valid JSON: {error}") from error
    return parse_snapshot(data)


def _ensure_list(data: dict, key: str) -> list:
    entries = data.get(key, [])
    if not isinstance(entries, list):
        raise OutlineError(f"`{key}` must be a list")
    return entries


def _parse_heading(entry: object, index: int) -> Heading:
    if not isinstance(entry, dict):
        raise OutlineError("heading must be an object", index)

    text = entry.get("heading")
    if not isinstance(text, str):
        raise OutlineError("`heading` must be a string", index)

    level = entry.get("level")
    if isinstance(level, bool) or not isinstance(level, int):
        raise OutlineError("`level` must be an integer", index)
    if not MIN_HEADING_LEVEL <= level <= MAX_HEADING_LEVEL:
        raise OutlineError(
            f"`level` must be between {MIN_HEADING_LEVEL} and {MAX_HEADING_LEVEL}, got {level}",
            index,
        )

    return Heading(text=text, level=level, span=_parse_span(entry.get("position"), index))


def _parse_section(entry: object, index: int) -> Section:
    if not isinstance(entry, dict):
        raise OutlineError("section must be an object", index)

    kind = entry.get("type")
    if not isinstance(kind, str):
        raise OutlineError("`type` must be a string", index)

    return Section(kind=SectionKind.from_host(kind), span=_parse_span(entry.get("position"), index))


def _parse_span(raw: object, index: int) -> Span:
    if not isinstance(raw, dict):
        raise OutlineError("`position` must be an object", index)
    start = _parse_position(raw.get("start"), "start", index)
    end = _parse_position(raw.get("end"), "end", index)
    if end < start:
        raise OutlineError("`position.end` precedes `position.start`", index)
    return Span(start, end)


def _parse_position(raw: object, name: str, index: int) -> Position:
    if not isinstance(raw, dict):
        raise OutlineError(f"`position.{name}` must be an object", index)

    values = []
    for key in ("line", "col"):
        value = raw.get(key)
        if isinstance(value, bool) or not isinstance(value, int) or value < 0:
            raise OutlineError(f"`position.{name}.{key}` must be a non-negative integer", index)
        values.append(value)

    return Position(*values)
