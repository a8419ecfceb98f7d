"""
outline-toc: Table of Contents generator driven by a host heading outline.

This package can be used both as a CLI tool and as a library.

CLI Usage:
    outline-toc update notes.md --outline notes.json --line 0

Library Usage:
    from outline_toc import Position, TocSettings, create_toc, load_snapshot

    snapshot = load_snapshot(Path("notes.json"))
    result = create_toc(snapshot.headings, Position(line=2), TocSettings())
    if result.is_ok:
        print(result.text)
"""

from .anchors import anchor_markdown_header, encode_uri, github_slug
from .config import ConfigError, TocSettings, build_settings, load_settings
from .editing import Editor, TextBuffer, insert_toc, locate_toc_block, update_toc
from .exceptions import (
    MalformedDocumentStructure,
    NoExistingToc,
    NoMatchingHeadings,
    OutlineError,
    TocError,
)
from .generator import create_toc, render_toc, select_headings
from .models import Heading, Outcome, Position, Section, SectionKind, Span, TocResult
from .outline import depth_at, headings_after
from .snapshot import OutlineSnapshot, load_snapshot, parse_snapshot

__version__ = "0.1.0"

__all__ = [
    # Core functionality
    "create_toc",
    "update_toc",
    "insert_toc",
    "select_headings",
    "render_toc",
    "locate_toc_block",
    "depth_at",
    "headings_after",
    # Anchors
    "anchor_markdown_header",
    "encode_uri",
    "github_slug",
    # Data models
    "Heading",
    "Outcome",
    "Position",
    "Section",
    "SectionKind",
    "Span",
    "TocResult",
    "OutlineSnapshot",
    # Host surfaces
    "Editor",
    "TextBuffer",
    "load_snapshot",
    "parse_snapshot",
    # Settings
    "TocSettings",
    "build_settings",
    "load_settings",
    # Exceptions
    "ConfigError",
    "MalformedDocumentStructure",
    "NoExistingToc",
    "NoMatchingHeadings",
    "OutlineError",
    "TocError",
    # Version
    "__version__",
]
