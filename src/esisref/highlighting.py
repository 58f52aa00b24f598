"""Context view for a resolved declaration.

Shows the lines around a TextSpan with the declaring line marked, optionally
colored with Pygments for terminal output.
"""

from __future__ import annotations

from pygments import highlight as pygments_highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexers import HtmlLexer, TextLexer, XmlLexer, get_lexer_for_filename
from pygments.util import ClassNotFound

from esisref.resolver import TextSpan

MARKER = ">"


def lexer_for(file_path: str, text: str = ""):
    """Pick a lexer: XML for documents with an XML declaration, HTML-ish for SGML."""
    if text.lstrip("\ufeff \t\r\n").startswith("<?xml"):
        return XmlLexer(stripnl=False)
    try:
        return get_lexer_for_filename(file_path, stripnl=False)
    except ClassNotFound:
        pass
    # No Pygments lexer for SGML; HTML tokenizes tags and attributes well enough
    if file_path.lower().endswith((".sgml", ".sgm", ".dtd")):
        return HtmlLexer(stripnl=False)
    return TextLexer(stripnl=False)


def highlight_lines(file_path: str, text: str, style: str = "default") -> list[str]:
    """Highlight *text* for a terminal and split it into lines."""
    formatter = Terminal256Formatter(style=style)
    # Highlight the whole text so multi-line tokens (comments, marked sections) keep state
    highlighted = pygments_highlight(text, lexer_for(file_path, text), formatter)
    lines = highlighted.split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def render_context(
    file_path: str,
    text: str,
    span: TextSpan,
    context: int = 3,
    color: bool = False,
    style: str = "default",
) -> list[str]:
    """Render the lines around *span*.

    Args:
        file_path: Document path (for lexer detection and the header).
        text: Full document text.
        span: Resolved declaration span.
        context: Lines shown before and after the declaring line.
        color: Emit ANSI colors via Pygments.
        style: Pygments style name.

    Returns:
        Output lines: a ``path:line:column`` header, then numbered source lines.
    """
    # Split on "\n" only, the same way span_at counts lines
    raw_lines = text.split("\n")
    if raw_lines and raw_lines[-1] == "":
        raw_lines.pop()
    lines = highlight_lines(file_path, text, style) if color else raw_lines
    if len(lines) != len(raw_lines):
        lines = raw_lines

    first = max(span.line - context, 1)
    last = min(span.line + context, len(raw_lines))
    width = len(str(last))

    out = [f"{file_path}:{span.line}:{span.column}"]
    for number in range(first, last + 1):
        mark = MARKER if number == span.line else " "
        out.append(f"{mark} {number:>{width}} | {lines[number - 1]}")
    return out
