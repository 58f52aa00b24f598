"""
esisref.commands.common - Helpers shared by the document commands.
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from esisref.errors import EsisrefError
from esisref.session import DocumentSession

# Exit codes for a failed lookup, kept distinct so scripts can decide
# whether a rebuild is worth trying
EXIT_UNKNOWN_IDENTIFIER = 2
EXIT_STALE_INDEX = 3

logger = logging.getLogger(__name__)


def open_session(args: argparse.Namespace) -> DocumentSession:
    """Create a session for ``args.file`` with CLI overrides applied to its config."""
    from esisref.config import get_config

    document = Path(args.file)
    config = get_config(
        config_path=getattr(args, "config", None),
        start_path=document.resolve().parent,
        quiet=not getattr(args, "verbose", False),
    )

    case_sensitive = getattr(args, "case_sensitive", None)
    if case_sensitive is not None:
        config.setdefault("index", {})["case_sensitive"] = case_sensitive
    if getattr(args, "strict", False):
        config.setdefault("index", {})["strict"] = True

    return DocumentSession(document, config=config)


def build_or_report(session: DocumentSession) -> bool:
    """Build the session's index, printing any failure. Returns True on success."""
    if not session.path.is_file():
        print(f"Error: no such file: {session.path}", file=sys.stderr)
        return False
    try:
        result = session.rebuild()
    except EsisrefError as e:
        print(f"Error: could not index {session.path}: {e}", file=sys.stderr)
        return False

    if not result.ok:
        for anomaly in result.anomalies:
            print(f"Warning: {anomaly}", file=sys.stderr)
    return True


def complete_identifiers(prefix: str, parsed_args: argparse.Namespace, **kwargs) -> list[str]:
    """argcomplete completer offering the identifiers declared in ``parsed_args.file``."""
    if not getattr(parsed_args, "file", None) or not Path(parsed_args.file).is_file():
        return []
    try:
        index = open_session(parsed_args).ensure_ready()
    except EsisrefError as e:
        logger.debug("No identifier completions for %s: %s", parsed_args.file, e)
        return []
    folded = index.fold(prefix)
    return [identifier for identifier in index.identifiers() if identifier.startswith(folded)]
