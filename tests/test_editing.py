from __future__ import annotations

import textwrap

import pytest

from outline_toc.config import TocSettings
from outline_toc.editing import TextBuffer, find_toc_heading, insert_toc, locate_toc_block, update_toc
from outline_toc.exceptions import MalformedDocumentStructure, NoExistingToc, NoMatchingHeadings
from outline_toc.models import Heading, Outcome, Position, Section, SectionKind, Span

DOCUMENT = textwrap.dedent(
    """\
    # Table of Contents
     - [[#Old|Old]]

    # A
    ## B
    ### C
    ## D
    """
)

EXPECTED = textwrap.dedent(
    """\
    # Table of Contents
     - [[#B|B]]
    \t- [[#B#C|C]]
    - [[#D|D]]

    # A
    ## B
    ### C
    ## D
    """
)


def _run_update(text: str, outline_of, settings: TocSettings | None = None, cursor=Position(0)):
    snapshot = outline_of(text)
    buffer = TextBuffer(text, cursor)
    messages = []
    result = update_toc(
        snapshot.headings,
        snapshot.sections,
        buffer,
        settings or TocSettings(),
        notify=messages.append,
    )
    return result, buffer, messages


def test_text_buffer_replace_within_line():
    buffer = TextBuffer("hello world")
    buffer.replace_range("there", Position(0, 6), Position(0, 11))

    assert buffer.text == "hello there"


def test_text_buffer_replace_across_lines():
    buffer = TextBuffer("one\ntwo\nthree\nfour")
    buffer.replace_range("2\n3", Position(1, 0), Position(2, 5))

    assert buffer.text == "one\n2\n3\nfour"
    assert buffer.lines == ["one", "2", "3", "four"]


def test_text_buffer_insert_at_position():
    buffer = TextBuffer("ab\ncd", cursor=Position(1, 1))
    cursor = buffer.get_cursor()
    buffer.replace_range("X", cursor, cursor)

    assert buffer.text == "ab\ncXd"


def test_text_buffer_clamps_out_of_range_positions():
    buffer = TextBuffer("short\nlines")
    buffer.replace_range("!", Position(0, 99), Position(0, 99))
    buffer.replace_range("?", Position(10, 0), Position(10, 0))

    assert buffer.text == "short!\n?lines"


def test_text_buffer_rejects_reversed_range():
    buffer = TextBuffer("abc")
    with pytest.raises(ValueError):
        buffer.replace_range("x", Position(0, 2), Position(0, 1))


def test_find_toc_heading_matches_substring():
    headings = [
        Heading("Intro", 1, Span(Position(0), Position(0, 7))),
        Heading("My Table of Contents", 1, Span(Position(2), Position(2, 22))),
    ]

    assert find_toc_heading(headings, "Table of Contents") is headings[1]
    assert find_toc_heading(headings, "Index") is None


def test_locate_toc_block_spans_heading_and_list(outline_of):
    snapshot = outline_of(DOCUMENT)
    toc_heading = snapshot.headings[0]

    block = locate_toc_block(toc_heading, snapshot.sections)

    assert block == Span(Position(0, 0), Position(1, len(" - [[#Old|Old]]")))


def test_locate_toc_block_uses_containing_section_not_first_heading(outline_of):
    text = "# Intro\n\n# Table of Contents\n- [[#Old|Old]]\n\n# A\n## B\n"
    snapshot = outline_of(text)

    block = locate_toc_block(snapshot.headings[1], snapshot.sections)

    assert block.start == Position(2, 0)
    assert block.end == Position(3, len("- [[#Old|Old]]"))


def test_locate_toc_block_without_containing_section():
    heading = Heading("Table of Contents", 1, Span(Position(4), Position(4, 19)))
    sections = [Section(SectionKind.PARAGRAPH, Span(Position(0), Position(2, 5)))]

    with pytest.raises(MalformedDocumentStructure) as exc_info:
        locate_toc_block(heading, sections)
    assert "line 5" in str(exc_info.value)


def test_locate_toc_block_requires_following_section():
    span = Span(Position(0), Position(0, 19))
    heading = Heading("Table of Contents", 1, span)

    with pytest.raises(MalformedDocumentStructure):
        locate_toc_block(heading, [Section(SectionKind.HEADING, span)])


def test_locate_toc_block_rejects_heading_after_toc(outline_of):
    snapshot = outline_of("# Table of Contents\n## Next\n")

    with pytest.raises(MalformedDocumentStructure) as exc_info:
        locate_toc_block(snapshot.headings[0], snapshot.sections)
    assert "another heading" in str(exc_info.value)


def test_update_toc_rewrites_list(outline_of):
    result, buffer, messages = _run_update(DOCUMENT, outline_of)

    assert result.outcome is Outcome.OK
    assert result.text == "# Table of Contents\n - [[#B|B]]\n\t- [[#B#C|C]]\n- [[#D|D]]"
    assert buffer.text == EXPECTED
    assert messages == []


def test_update_toc_is_idempotent(outline_of):
    first, buffer, _ = _run_update(DOCUMENT, outline_of)
    second, buffer_again, _ = _run_update(buffer.text, outline_of)

    assert first.text == second.text
    assert buffer_again.text == buffer.text


def test_update_toc_never_lists_itself(outline_of):
    result, _, _ = _run_update(DOCUMENT, outline_of, TocSettings(minimum_depth=1))

    assert "[[#Table of Contents" not in result.text
    assert " - [[#A|A]]" in result.text


def test_update_toc_does_not_mutate_host_outline(outline_of):
    snapshot = outline_of(DOCUMENT)
    headings = list(snapshot.headings)

    update_toc(headings, snapshot.sections, TextBuffer(DOCUMENT), TocSettings())

    assert headings == list(snapshot.headings)


def test_update_toc_with_custom_title(outline_of):
    text = "# Contents\n- stale\n\n# A\n## B\n"
    result, buffer, _ = _run_update(text, outline_of, TocSettings(title="Contents"))

    assert result.is_ok
    assert buffer.text == "# Contents\n - [[#B|B]]\n\n# A\n## B\n"


def test_update_toc_without_existing_toc(outline_of):
    text = "# A\n## B\n"
    result, buffer, messages = _run_update(text, outline_of)

    assert result.outcome is Outcome.EMPTY
    assert isinstance(result.error, NoExistingToc)
    assert messages == ["No ToC in this file to update"]
    assert buffer.text == text


def test_update_toc_reports_malformed_structure(outline_of):
    text = "# Table of Contents\n## B\n"
    result, buffer, messages = _run_update(text, outline_of)

    assert result.outcome is Outcome.FAILED
    assert isinstance(result.error, MalformedDocumentStructure)
    assert result.error.fatal is True
    assert messages == [str(result.error)]
    assert buffer.text == text


def test_update_toc_leaves_document_when_nothing_matches(outline_of):
    text = "# Table of Contents\n- stale\n\n# A\n# B\n"
    result, buffer, messages = _run_update(text, outline_of)

    assert result.outcome is Outcome.EMPTY
    assert isinstance(result.error, NoMatchingHeadings)
    assert messages == ["No headings below cursor matched settings (min: 2) (max: 6)"]
    assert buffer.text == text


def test_update_toc_uses_editor_cursor(outline_of):
    text = "# A\n# Table of Contents\n- stale\n\n## B\n### C\n# D\n## E\n"
    result, buffer, _ = _run_update(text, outline_of, cursor=Position(4))

    assert result.text == "# Table of Contents\n - [[#C|C]]"
    assert buffer.text == "# A\n# Table of Contents\n - [[#C|C]]\n\n## B\n### C\n# D\n## E\n"


def test_insert_toc_at_cursor(outline_of):
    text = "# A\n\n## B\n### C\n"
    snapshot = outline_of(text)
    buffer = TextBuffer(text, Position(1))

    result = insert_toc(snapshot.headings, buffer, TocSettings(use_markdown=True))

    assert result.is_ok
    assert buffer.text == "# A\n# Table of Contents\n - [B](#B)\n\t- [C](#C)\n\n## B\n### C\n"


def test_insert_toc_without_matches_leaves_buffer(outline_of):
    text = "# A\n\n# B\n"
    snapshot = outline_of(text)
    buffer = TextBuffer(text, Position(1))
    messages = []

    result = insert_toc(snapshot.headings, buffer, TocSettings(), notify=messages.append)

    assert result.outcome is Outcome.EMPTY
    assert buffer.text == text
    assert len(messages) == 1


def test_text_buffer_keeps_crlf_line_endings():
    buffer = TextBuffer("one\r\ntwo\r\nthree\r\n")
    buffer.replace_range("2\n2b", Position(1, 0), Position(1, 3))

    assert buffer.newline == "\r\n"
    assert buffer.lines == ["one", "2", "2b", "three", ""]
    assert buffer.text == "one\r\n2\r\n2b\r\nthree\r\n"


def test_update_toc_on_crlf_document(outline_of):
    text = "# Table of Contents\r\n- stale\r\n\r\n# A\r\n## B\r\n"
    snapshot = outline_of(text.replace("\r\n", "\n"))
    buffer = TextBuffer(text)

    result = update_toc(snapshot.headings, snapshot.sections, buffer, TocSettings())

    assert result.is_ok
    assert buffer.text == "# Table of Contents\r\n - [[#B|B]]\r\n\r\n# A\r\n## B\r\n"


def test_insert_toc_on_crlf_document(outline_of):
    text = "# A\r\n\r\n## B\r\n### C\r\n"
    snapshot = outline_of(text.replace("\r\n", "\n"))
    buffer = TextBuffer(text, Position(1))

    result = insert_toc(snapshot.headings, buffer, TocSettings())

    assert result.is_ok
    assert "\n" not in buffer.text.replace("\r\n", "")
    assert buffer.text == (
        "# A\r\n# Table of Contents\r\n - [[#B|B]]\r\n\t- [[#B#C|C]]\r\n\r\n## B\r\n### C\r\n"
    )
