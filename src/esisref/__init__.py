"""
esisref - ID cross-reference index for SGML/XML documents

esisref runs an SP-family parser (nsgmls/onsgmls) over a document, indexes
every attribute whose declared value is ID together with the element that
carries it, and resolves an identifier back to the text of its declaration.
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("esisref")
except PackageNotFoundError:
    __version__ = "0.0.0+unknown"  # Not installed
__license__ = "MIT"

from esisref.errors import (
    EsisrefError,
    IndexNotReadyError,
    MalformedStreamError,
    StaleIndexError,
    ToolInvocationError,
    ToolTimeoutError,
    UnknownIdentifierError,
)
from esisref.esis import AttributeEvent, ElementStartEvent, EsisParser, iter_events
from esisref.index import (
    BuildResult,
    IdentifierEntry,
    IdentifierIndex,
    build_index,
    parse_listing_line,
    render_listing,
)
from esisref.resolver import TextSpan, resolve
from esisref.session import DocumentSession, SessionRegistry, SessionState

__all__ = [
    "__version__",
    "AttributeEvent",
    "BuildResult",
    "DocumentSession",
    "ElementStartEvent",
    "EsisParser",
    "EsisrefError",
    "IdentifierEntry",
    "IdentifierIndex",
    "IndexNotReadyError",
    "MalformedStreamError",
    "SessionRegistry",
    "SessionState",
    "StaleIndexError",
    "TextSpan",
    "ToolInvocationError",
    "ToolTimeoutError",
    "UnknownIdentifierError",
    "build_index",
    "iter_events",
    "parse_listing_line",
    "render_listing",
    "resolve",
]
