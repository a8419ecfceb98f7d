"""Table of contents generation from a heading outline."""

from __future__ import annotations

from collections.abc import Callable, Sequence

from .anchors import anchor_markdown_header, encode_uri
from .config import TocSettings, normalize_settings
from .constants import BULLET_MARKER, INDENT_UNIT, NUMBERED_MARKER, STRIPPED_HEADING_CHARS
from .exceptions import NoMatchingHeadings
from .models import Heading, Position, TocResult
from .outline import depth_at, headings_after, previous_level_heading

_STRIP_TABLE = str.maketrans("", "", STRIPPED_HEADING_CHARS)


def select_headings(
    headings: Sequence[Heading], cursor: Position, settings: TocSettings
) -> list[Heading]:
    """Select the headings a ToC inserted at the cursor should list.

    Scans the headings after the cursor and stops at the first one whose level
    is at or above the level active at the cursor, so only descendants of the
    current section are considered. Headings outside the depth band are
    skipped without ending the scan.

    Args:
        headings: Outline in document order.
        cursor: Current cursor position.
        settings: Settings providing the depth band.

    Returns:
        list[Heading]: Selected headings in document order.
    """
    current_depth = depth_at(headings, cursor)
    selected = []

    for heading in headings_after(headings, cursor):
        if heading.level <= current_depth:
            break
        if settings.minimum_depth <= heading.level <= settings.maximum_depth:
            selected.append(heading)

    return selected


def display_text(heading: Heading) -> str:
    return heading.text.translate(_STRIP_TABLE)


def render_entries(headings: Sequence[Heading], settings: TocSettings) -> list[str]:
    """Render one list item per heading.

    Indentation is relative to the first heading, one tab per level. Wiki links
    to a heading that has a parent one level up among `headings` are qualified
    with that parent's text.

    Args:
        headings: Selected headings, non-empty.
        settings: Settings for list style and link flavour.

    Returns:
        list[str]: Rendered items without trailing newlines.

    Examples:
        render_entries([Heading("Setup", 2, span)], TocSettings())  # ["- [[#Setup|Setup]]"]
    """
    base_level = headings[0].level
    marker = NUMBERED_MARKER if settings.list_style == "numbered" else BULLET_MARKER
    entries = []

    for index, heading in enumerate(headings):
        indent = INDENT_UNIT * max(0, heading.level - base_level)
        prefix = f"{indent}{marker}"
        text = display_text(heading)

        if settings.use_markdown and settings.github_compat:
            entries.append(f"{prefix} {anchor_markdown_header(text)}")
            continue

        if settings.use_markdown:
            entries.append(f"{prefix} [{text}](#{encode_uri(text)})")
            continue

        parent = previous_level_heading(headings, index)
        target = text if parent is None else f"{parent.text}#{text}"
        entries.append(f"{prefix} [[#{target}|{text}]]")

    return entries


def render_toc(headings: Sequence[Heading], settings: TocSettings) -> str:
    """Render the full ToC block: title heading followed by the entries."""
    entries = render_entries(headings, settings)
    return f"# {settings.resolved_title}\n " + "\n".join(entries) + "\n"


def create_toc(
    headings: Sequence[Heading],
    cursor: Position,
    settings: TocSettings,
    notify: Callable[[str], None] | None = None,
) -> TocResult:
    """Build the ToC for a cursor position.

    Args:
        headings: Outline in document order.
        cursor: Position where the ToC will live.
        settings: Depth band, list style and link flavour.
        notify: Optional callback receiving a user-facing message when no
            heading matched.

    Returns:
        TocResult: ``ok`` with the rendered block, or ``empty`` carrying a
        `NoMatchingHeadings` error.

    Examples:
        result = create_toc(outline, Position(line=3), TocSettings())
        if result.is_ok:
            print(result.text)
    """
    settings = normalize_settings(settings)
    selected = select_headings(headings, cursor, settings)

    if not selected:
        error = NoMatchingHeadings(settings.minimum_depth, settings.maximum_depth)
        if notify is not None:
            notify(str(error))
        return TocResult.empty(error)

    return TocResult.ok(render_toc(selected, settings))
