"""
esisref.commands.list_cmd - List the ID attributes declared in a document.
"""

from __future__ import annotations

import argparse
import json
import sys

from esisref.commands.common import build_or_report, open_session


def run(args: argparse.Namespace) -> int:
    """Run the list command."""
    session = open_session(args)
    if not build_or_report(session):
        return 1

    index = session.index
    if getattr(args, "json", False):
        payload = {
            "file": str(session.path),
            "case_sensitive": index.case_sensitive,
            "entries": [
                {
                    "identifier": e.identifier,
                    "attribute": e.attribute_name,
                    "element": e.element_name,
                }
                for e in index.entries
            ],
            "anomalies": [str(a) for a in session.anomalies],
        }
        print(json.dumps(payload, indent=2))
        return 0

    if not index.entries:
        # Distinct from a failed build, which exits non-zero above
        if not getattr(args, "quiet", False):
            print(f"No ID attributes declared in {session.path}", file=sys.stderr)
        return 0

    for line in session.render():
        print(line)
    return 0
