"""Tests for esisref.highlighting - the declaration context view."""

from __future__ import annotations

from pygments.lexers import TextLexer, XmlLexer

from esisref.highlighting import MARKER, highlight_lines, lexer_for, render_context
from esisref.resolver import span_at

TEXT = "line one\nline two\n<p id=x>three\nline four\nline five\n"


def _span():
    start = TEXT.index("id=x")
    return span_at(TEXT, start, start + 4)


class TestLexerFor:
    def test_xml_declaration_wins(self):
        assert isinstance(lexer_for("doc.sgml", '<?xml version="1.0"?><a/>'), XmlLexer)

    def test_sgml_is_not_plain_text(self):
        assert not isinstance(lexer_for("manual.sgm", "<manual>"), TextLexer)

    def test_unknown_extension(self):
        assert isinstance(lexer_for("notes.unknownext123", "plain"), TextLexer)


class TestRenderContext:
    """Tests for render_context()."""

    def test_marks_declaring_line(self):
        lines = render_context("doc.sgml", TEXT, _span(), context=1)
        assert lines == [
            "doc.sgml:3:4",
            "  2 | line two",
            f"{MARKER} 3 | <p id=x>three",
            "  4 | line four",
        ]

    def test_context_clipped_at_document_edges(self):
        lines = render_context("doc.sgml", TEXT, _span(), context=10)
        assert len(lines) == 1 + 5
        assert lines[1].endswith("line one")
        assert lines[-1].endswith("line five")

    def test_zero_context(self):
        lines = render_context("doc.sgml", TEXT, _span(), context=0)
        assert lines[1:] == [f"{MARKER} 3 | <p id=x>three"]

    def test_form_feed_does_not_shift_lines(self):
        text = "<doc>\f\n<x>\n<p id=a>\n</doc>\n"
        start = text.index("id=a")
        span = span_at(text, start, start + 4)

        lines = render_context("d.sgml", text, span, context=0)

        assert lines == ["d.sgml:3:4", f"{MARKER} 3 | <p id=a>"]

    def test_other_line_breaks_stay_inside_their_line(self):
        text = "a b\x1cc\nd\ve\n<p id=z>\n"
        start = text.index("id=z")

        lines = render_context("d.sgml", text, span_at(text, start, start + 4), context=1)

        assert lines[1:] == ["  2 | d\ve", f"{MARKER} 3 | <p id=z>"]

    def test_color_keeps_line_structure(self):
        lines = render_context("doc.xml", TEXT, _span(), context=1, color=True)
        assert len(lines) == 4
        assert lines[2].startswith(MARKER)
        assert "\x1b[" in "".join(lines[1:])


class TestHighlightLines:
    def test_one_output_line_per_input_line(self):
        assert len(highlight_lines("doc.xml", TEXT)) == len(TEXT.splitlines())

    def test_leading_blank_lines_kept(self):
        text = "\n\n<a id='x'/>\n"
        assert len(highlight_lines("doc.xml", text)) == 3
