"""Anchor generation for heading links."""

from __future__ import annotations

import re
import string
from urllib.parse import quote

import emoji

# Characters JavaScript's encodeURI leaves untouched, beyond letters, digits and "-_.~"
_URI_SAFE = ";,/?:@&=+$!*'()#"

_ESCAPE_CODE_PATTERN = re.compile(r"%[0-9a-f]{2}", re.IGNORECASE)
_REMOVED_PUNCTUATION = "/?!:[]`.,()*\"';{}+=<>~$|#@&–—"
_REMOVED_CJK_PUNCTUATION = (
    "。？！，、；：“”【】（）"
    "〔〕［］﹃﹄‘’﹁﹂—…－"
    "～《》〈〉「」"
)
_PUNCTUATION_TABLE = str.maketrans("", "", _REMOVED_PUNCTUATION + _REMOVED_CJK_PUNCTUATION)
_ASCII_LOWER_TABLE = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

# Joiners and presentation selectors left behind by a partial emoji sequence
_EMOJI_COMPONENTS = str.maketrans("", "", "\u200d\ufe0e\ufe0f\u20e3")


def encode_uri(text: str) -> str:
    """Percent-encode text the way JavaScript's ``encodeURI`` does.

    Args:
        text: Text to encode.

    Returns:
        str: UTF-8 percent-encoded text with URI reserved characters kept.

    Examples:
        encode_uri("Hello World!")  # "Hello%20World!"
    """
    return quote(text, safe=_URI_SAFE)


def _strip_emoji(text: str) -> str:
    return emoji.replace_emoji(text, replace="").translate(_EMOJI_COMPONENTS)


def github_slug(text: str, repetition: int | None = None) -> str:
    """Build the anchor GitHub assigns to a heading.

    Lowercases ASCII letters only, turns each space into a hyphen, drops
    percent escapes, the punctuation GitHub strips (including CJK
    punctuation) and emoji. Other characters, including non-ASCII letters and
    non-emoji symbols such as `°`, are kept as they are.

    Args:
        text: Heading text, already trimmed.
        repetition: Occurrence number for repeated headings; appended as
            ``-<n>`` when non-zero.

    Returns:
        str: The anchor without the leading ``#``.

    Examples:
        github_slug("Hello World!")  # "hello-world"
        github_slug("Usage", repetition=1)  # "usage-1"
    """
    slug = text.translate(_ASCII_LOWER_TABLE)
    slug = slug.replace(" ", "-")
    slug = _ESCAPE_CODE_PATTERN.sub("", slug)
    slug = slug.translate(_PUNCTUATION_TABLE)
    slug = _strip_emoji(slug)
    if repetition:
        slug = f"{slug}-{repetition}"
    return slug


def anchor_markdown_header(header: str, repetition: int | None = None) -> str:
    """Render a markdown link to a heading using GitHub anchors.

    Args:
        header: Heading text used as link text.
        repetition: Occurrence number for repeated headings.

    Returns:
        str: ``[header](#anchor)`` with the anchor URI-encoded.

    Examples:
        anchor_markdown_header("Hello World!")  # "[Hello World!](#hello-world)"
    """
    anchor = github_slug(header.strip(), repetition)
    return f"[{header}](#{encode_uri(anchor)})"
