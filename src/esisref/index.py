"""
esisref.index - Identifier index built from ESIS events.

The index maps each declared identifier to the attribute that declares it and
the element that owns that attribute. Identifiers are folded to lower case
unless the index is case-sensitive (XML documents).

A repeated identifier overwrites the earlier mapping entry, while the listing
keeps every declaration in document order.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass, field

from esisref.errors import MalformedStreamError, UnknownIdentifierError
from esisref.esis import ID_KIND, AttributeEvent, ElementStartEvent, Event

logger = logging.getLogger(__name__)

LISTING_HEADER = (
    "Identifier (element)",
    "--------------------",
)

LISTING_LINE_PATTERN = re.compile(r"^(?P<identifier>\S+) \((?P<element>[^()]*)\)$")

XML_DECLARATION_PATTERN = re.compile(r"^\ufeff?\s*<\?xml[\s?]")


@dataclass(frozen=True)
class IdentifierEntry:
    """One ID declaration, in index case."""

    identifier: str
    attribute_name: str
    element_name: str


@dataclass(frozen=True)
class Anomaly:
    """An ID attribute that no element start followed."""

    identifier: str
    attribute_name: str
    message: str = "ID attribute has no following element start"

    def __str__(self) -> str:
        return f"{self.attribute_name}={self.identifier}: {self.message}"


@dataclass
class IdentifierIndex:
    """Identifier lookup table plus the ordered declaration listing.

    Attributes:
        mapping: identifier -> (attribute_name, element_name).
        entries: Every declaration in the order it was seen.
        case_sensitive: Whether identifiers were stored unfolded.
    """

    mapping: dict[str, tuple[str, str]] = field(default_factory=dict)
    entries: list[IdentifierEntry] = field(default_factory=list)
    case_sensitive: bool = False

    def fold(self, name: str) -> str:
        """Bring *name* into the case used by this index."""
        return name if self.case_sensitive else name.lower()

    def add(self, entry: IdentifierEntry) -> None:
        self.mapping[entry.identifier] = (entry.attribute_name, entry.element_name)
        self.entries.append(entry)

    def lookup(self, identifier: str) -> tuple[str, str]:
        """Return (attribute_name, element_name) for *identifier*.

        Raises:
            UnknownIdentifierError: If the identifier was never declared.
        """
        try:
            return self.mapping[self.fold(identifier)]
        except KeyError:
            raise UnknownIdentifierError(identifier) from None

    def identifiers(self) -> list[str]:
        """Distinct identifiers in first-declaration order."""
        return list(dict.fromkeys(entry.identifier for entry in self.entries))

    def __contains__(self, identifier: object) -> bool:
        return isinstance(identifier, str) and self.fold(identifier) in self.mapping

    def __len__(self) -> int:
        return len(self.mapping)


@dataclass
class BuildResult:
    """A built index together with the anomalies found while building it."""

    index: IdentifierIndex
    anomalies: list[Anomaly] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.anomalies


def build_index(
    records: Iterable[Event],
    *,
    case_sensitive: bool = False,
    strict: bool = False,
) -> BuildResult:
    """Build an identifier index from an event sequence.

    Each ID attribute is owned by the first element start that follows it.
    Attributes still waiting for an element when the stream ends are reported
    as anomalies and contribute nothing to the index.

    Args:
        records: ESIS events, consumed in a single pass.
        case_sensitive: Store identifiers and names without folding.
        strict: Raise MalformedStreamError instead of returning anomalies.

    Returns:
        BuildResult with a new index and the anomalies found.
    """
    index = IdentifierIndex(case_sensitive=case_sensitive)
    fold = index.fold
    pending: list[AttributeEvent] = []

    for record in records:
        if isinstance(record, AttributeEvent):
            if record.kind == ID_KIND:
                pending.append(record)
        elif isinstance(record, ElementStartEvent) and pending:
            element_name = fold(record.element_name)
            for attribute in pending:
                index.add(
                    IdentifierEntry(
                        identifier=fold(attribute.value),
                        attribute_name=fold(attribute.attribute_name),
                        element_name=element_name,
                    )
                )
            pending = []

    anomalies = [
        Anomaly(identifier=fold(a.value), attribute_name=fold(a.attribute_name))
        for a in pending
    ]
    if anomalies:
        if strict:
            raise MalformedStreamError(anomalies)
        for anomaly in anomalies:
            logger.warning("Dropped %s", anomaly)

    logger.debug(
        "Indexed %d declarations (%d identifiers)", len(index.entries), len(index.mapping)
    )
    return BuildResult(index=index, anomalies=anomalies)


def render_listing(index: IdentifierIndex) -> list[str]:
    """Render the declaration listing: header lines, then one line per entry."""
    lines = list(LISTING_HEADER)
    for entry in index.entries:
        lines.append(f"{entry.identifier} ({entry.element_name})")
    return lines


def parse_listing_line(line: str) -> str | None:
    """Return the identifier shown on a listing line, or None for other lines."""
    line = line.strip()
    if not line or line in LISTING_HEADER:
        return None
    match = LISTING_LINE_PATTERN.match(line)
    return match.group("identifier") if match else None


def detect_case_sensitivity(text: str) -> bool:
    """Guess the case policy for a document: XML is case-sensitive, SGML is not."""
    return bool(XML_DECLARATION_PATTERN.match(text))
