"""
esisref.errors - Exception types.

Build failures (the external parser could not run or never finished) are kept
apart from lookup failures so callers can tell "the index could not be built"
from "the document declares nothing" and "never declared" from "declared but
no longer found in the text".
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Sequence

if TYPE_CHECKING:
    from esisref.index import Anomaly


class EsisrefError(Exception):
    """Base class for all esisref errors."""


class ConfigError(EsisrefError):
    """Configuration file could not be read or parsed."""


class ToolInvocationError(EsisrefError):
    """The external markup parser could not be started or exited abnormally.

    Attributes:
        command: Command line that was attempted.
        returncode: Exit status, or None if the process never started.
        stderr: Captured standard error (possibly truncated).
    """

    def __init__(
        self,
        message: str,
        command: Sequence[str] = (),
        returncode: int | None = None,
        stderr: str = "",
    ):
        super().__init__(message)
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr


class ToolTimeoutError(EsisrefError):
    """The external markup parser did not finish within the configured timeout."""

    def __init__(self, command: Sequence[str], timeout: float):
        super().__init__(f"{command[0] if command else 'parser'} timed out after {timeout:g}s")
        self.command = list(command)
        self.timeout = timeout


class MalformedStreamError(EsisrefError):
    """ID attributes were found with no owning element start in the stream."""

    def __init__(self, anomalies: Sequence[Anomaly]):
        self.anomalies = list(anomalies)
        names = ", ".join(a.identifier for a in self.anomalies)
        super().__init__(f"ID attribute(s) without an owning element: {names}")


class UnknownIdentifierError(EsisrefError, KeyError):
    """The identifier is not declared with an ID attribute in the indexed document."""

    def __init__(self, identifier: str):
        super().__init__(identifier)
        self.identifier = identifier

    def __str__(self) -> str:
        return f"Unknown identifier: {self.identifier}"


class StaleIndexError(EsisrefError):
    """The identifier is indexed but its declaration is not in the document text."""

    def __init__(self, identifier: str, attribute_name: str):
        super().__init__(
            f"Declaration {attribute_name}={identifier} not found in document text; "
            "the index may be stale, rebuild it"
        )
        self.identifier = identifier
        self.attribute_name = attribute_name


class IndexNotReadyError(EsisrefError):
    """An index operation was requested before the session finished a build."""

    def __init__(self, path: object, state: object):
        super().__init__(f"Index for {path} is not ready (state: {state})")
        self.path = path
        self.state = state
