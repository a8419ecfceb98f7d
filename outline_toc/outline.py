"""Cursor-relative queries over a heading outline."""

from __future__ import annotations

from collections.abc import Sequence

from .models import Heading, Position


def depth_at(headings: Sequence[Heading], cursor: Position) -> int:
    """Return the heading level active at the cursor.

    The active level is the level of the last heading ending on a line before
    the cursor's line.

    Args:
        headings: Outline in document order.
        cursor: Current cursor position.

    Returns:
        int: Level of the nearest preceding heading, or 0 when none precedes
            the cursor.

    Examples:
        depth_at(outline, Position(line=4))
    """
    previous = [heading for heading in headings if heading.span.end.line < cursor.line]
    if not previous:
        return 0
    return previous[-1].level


def headings_after(headings: Sequence[Heading], cursor: Position) -> list[Heading]:
    """Return headings ending on a line after the cursor's line, in order."""
    return [heading for heading in headings if heading.span.end.line > cursor.line]


def previous_level_heading(headings: Sequence[Heading], index: int) -> Heading | None:
    """Find the nearest heading before `index` exactly one level above it.

    Args:
        headings: Headings to search, usually the ones selected for the ToC.
        index: Position of the current heading in `headings`.

    Returns:
        Heading | None: The closest preceding heading whose level is one less
            than the current heading's level, or None.
    """
    target_level = headings[index].level - 1
    for candidate in reversed(headings[:index]):
        if candidate.level == target_level:
            return candidate
    return None
