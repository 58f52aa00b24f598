"""
esisref.resolver - Locate an identifier's declaration in document text.

The search is textual: it looks for the attribute assignment
``name="value"`` (quotes optional) rather than a parsed element boundary, so
unusual whitespace around ``=`` or single quotes are not matched.

Neither quote is required and nothing anchors the end of the value, so the
pattern also matches a prefix of a longer identifier: ``box1`` is found
inside ``id="box10"`` when that comes first, giving the span ``id="box1``.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from esisref.errors import StaleIndexError
from esisref.index import IdentifierIndex


@dataclass(frozen=True)
class TextSpan:
    """A span of document text.

    Attributes:
        start: Offset of the first character.
        end: Offset just past the last character.
        text: The matched text.
        line: 1-based line number of ``start``.
        column: 1-based column of ``start``.
    """

    start: int
    end: int
    text: str
    line: int = 1
    column: int = 1

    def to_dict(self) -> dict:
        return {
            "start": self.start,
            "end": self.end,
            "text": self.text,
            "line": self.line,
            "column": self.column,
        }


@dataclass(frozen=True)
class ResolutionTarget:
    """What to search for: ``attribute_name="?identifier"?``."""

    attribute_name: str
    identifier: str

    def pattern(self, case_sensitive: bool = False) -> re.Pattern[str]:
        flags = 0 if case_sensitive else re.IGNORECASE
        return re.compile(
            re.escape(self.attribute_name) + '="?' + re.escape(self.identifier) + '"?',
            flags,
        )


def span_at(text: str, start: int, end: int) -> TextSpan:
    """Build a TextSpan for ``text[start:end]`` with its line and column."""
    line = text.count("\n", 0, start) + 1
    column = start - (text.rfind("\n", 0, start) + 1) + 1
    return TextSpan(start=start, end=end, text=text[start:end], line=line, column=column)


def resolve(index: IdentifierIndex, identifier: str, document_text: str) -> TextSpan:
    """Find where *identifier* is declared in *document_text*.

    Args:
        index: A built identifier index.
        identifier: Identifier to resolve, in any case the index accepts.
        document_text: Current text of the indexed document.

    Returns:
        Span of the first ``attribute="identifier"`` assignment.

    Raises:
        UnknownIdentifierError: The index has no such identifier.
        StaleIndexError: The identifier is indexed but not found in the text.
    """
    attribute_name, _element_name = index.lookup(identifier)
    target = ResolutionTarget(attribute_name=attribute_name, identifier=index.fold(identifier))

    match = target.pattern(index.case_sensitive).search(document_text)
    if match is None:
        raise StaleIndexError(target.identifier, target.attribute_name)
    return span_at(document_text, match.start(), match.end())
