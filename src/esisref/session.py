"""
esisref.session - Per-document index lifecycle.

A DocumentSession owns the index of exactly one document and moves it
through ``EMPTY -> BUILDING -> READY``. Rebuilds are serialized per session;
a failed rebuild puts back whatever index the session had before.
"""

from __future__ import annotations

import logging
import threading
import time
from enum import Enum
from pathlib import Path
from typing import Any

from esisref.errors import IndexNotReadyError
from esisref.esis import EsisParser
from esisref.index import (
    Anomaly,
    BuildResult,
    IdentifierIndex,
    build_index,
    detect_case_sensitivity,
    render_listing,
)
from esisref.resolver import TextSpan, resolve

logger = logging.getLogger(__name__)


class SessionState(Enum):
    EMPTY = "empty"
    BUILDING = "building"
    READY = "ready"

    def __str__(self) -> str:
        return self.value


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


def _read_head(path: Path, size: int = 256) -> str:
    with open(path, encoding="utf-8", errors="replace") as f:
        return f.read(size)


class DocumentSession:
    """Index state for a single document.

    Args:
        path: The document's backing file.
        config: Merged configuration (defaults are loaded when None).
        parser: Parser to run; built from config when None.
    """

    def __init__(
        self,
        path: Path | str,
        config: dict[str, Any] | None = None,
        parser: EsisParser | None = None,
    ):
        if config is None:
            from esisref.config import get_config

            config = get_config(start_path=Path(path).parent, quiet=True)
        self.path = Path(path)
        self.config = config
        self.parser = parser or EsisParser.from_config(config)
        self.state = SessionState.EMPTY
        self.index: IdentifierIndex | None = None
        self.anomalies: list[Anomaly] = []
        self.built_at: float | None = None
        self._lock = threading.Lock()

    def _case_sensitive(self) -> bool:
        setting = self.config.get("index", {}).get("case_sensitive", "auto")
        if isinstance(setting, bool):
            return setting
        if str(setting).lower() != "auto":
            return str(setting).lower() == "true"
        try:
            return detect_case_sensitivity(_read_head(self.path))
        except OSError:
            return False

    def rebuild(self) -> BuildResult:
        """Rebuild the index from scratch.

        Raises:
            ToolInvocationError, ToolTimeoutError: The parser failed; the
                previous index (if any) stays in place.
            MalformedStreamError: Strict mode found dangling ID attributes.
        """
        with self._lock:
            previous_state = self.state
            self.state = SessionState.BUILDING
            logger.info("Building identifier index for %s", self.path)
            try:
                events = self.parser.events(self.path)
                result = build_index(
                    events,
                    case_sensitive=self._case_sensitive(),
                    strict=bool(self.config.get("index", {}).get("strict", False)),
                )
            except BaseException:
                self.state = previous_state
                raise

            self.index = result.index
            self.anomalies = result.anomalies
            self.built_at = time.time()
            self.state = SessionState.READY
            logger.info(
                "Indexed %d identifiers in %s (%d anomalies)",
                len(result.index),
                self.path,
                len(result.anomalies),
            )
            return result

    def ensure_ready(self) -> IdentifierIndex:
        """Build the index unless it is already ready, and return it."""
        if self.state is not SessionState.READY:
            self.rebuild()
        return self._ready_index()

    def _ready_index(self) -> IdentifierIndex:
        if self.state is not SessionState.READY or self.index is None:
            raise IndexNotReadyError(self.path, self.state)
        return self.index

    def resolve(self, identifier: str, document_text: str | None = None) -> TextSpan:
        """Resolve *identifier* against the document text.

        Args:
            identifier: Identifier to look up.
            document_text: Text to search; the file on disk when None.
        """
        index = self._ready_index()
        if document_text is None:
            document_text = _read_text(self.path)
        return resolve(index, identifier, document_text)

    def render(self) -> list[str]:
        """Listing lines for the current index."""
        return render_listing(self._ready_index())

    def status(self) -> dict[str, Any]:
        return {
            "path": str(self.path),
            "state": str(self.state),
            "identifiers": len(self.index) if self.index is not None else 0,
            "declarations": len(self.index.entries) if self.index is not None else 0,
            "anomalies": [str(a) for a in self.anomalies],
            "built_at": self.built_at,
        }


class SessionRegistry:
    """One DocumentSession per document path."""

    def __init__(self, config: dict[str, Any] | None = None):
        self.config = config
        self._sessions: dict[Path, DocumentSession] = {}
        self._lock = threading.Lock()

    def get(self, path: Path | str) -> DocumentSession:
        key = Path(path).resolve()
        with self._lock:
            session = self._sessions.get(key)
            if session is None:
                session = DocumentSession(key, config=self.config)
                self._sessions[key] = session
            return session

    def discard(self, path: Path | str) -> None:
        with self._lock:
            self._sessions.pop(Path(path).resolve(), None)

    def __len__(self) -> int:
        return len(self._sessions)
