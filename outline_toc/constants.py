"""Constants used across the outline-toc package."""

from __future__ import annotations

DEFAULT_TITLE = "Table of Contents"

# List markers; the numbered marker is repeated verbatim for every item.
BULLET_MARKER = "-"
NUMBERED_MARKER = "1."
LIST_STYLES = ("bullet", "numbered")
LIST_STYLE_ALIASES = {"number": "numbered", "ordered": "numbered", "dash": "bullet"}

INDENT_UNIT = "\t"

# Characters removed from heading text before it is used as link text.
STRIPPED_HEADING_CHARS = "#[]"

MIN_HEADING_LEVEL = 1
MAX_HEADING_LEVEL = 6

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024
MARKDOWN_EXTENSIONS = (".md", ".markdown")
OUTLINE_EXTENSIONS = (".json",)
