"""
esisref.commands.resolve_cmd - Find where an identifier is declared.
"""

from __future__ import annotations

import argparse
import json
import sys

from esisref.commands.common import (
    EXIT_STALE_INDEX,
    EXIT_UNKNOWN_IDENTIFIER,
    build_or_report,
    open_session,
)
from esisref.errors import StaleIndexError, UnknownIdentifierError


def run(args: argparse.Namespace) -> int:
    """Run the resolve command."""
    session = open_session(args)
    if not build_or_report(session):
        return 1

    try:
        span = session.resolve(args.identifier)
    except UnknownIdentifierError as e:
        print(f"Error: {e} (not declared as an ID in {session.path})", file=sys.stderr)
        return EXIT_UNKNOWN_IDENTIFIER
    except StaleIndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_STALE_INDEX

    if getattr(args, "json", False):
        attribute, element = session.index.lookup(args.identifier)
        payload = {
            "file": str(session.path),
            "identifier": session.index.fold(args.identifier),
            "attribute": attribute,
            "element": element,
            "span": span.to_dict(),
        }
        print(json.dumps(payload, indent=2))
    else:
        print(f"{session.path}:{span.line}:{span.column}: {span.text}")
    return 0
