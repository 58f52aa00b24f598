"""
esisref.commands.show_cmd - Show an identifier's declaration in context.
"""

from __future__ import annotations

import argparse
import sys

from esisref.commands.common import (
    EXIT_STALE_INDEX,
    EXIT_UNKNOWN_IDENTIFIER,
    build_or_report,
    open_session,
)
from esisref.errors import StaleIndexError, UnknownIdentifierError
from esisref.highlighting import render_context


def run(args: argparse.Namespace) -> int:
    """Run the show command."""
    session = open_session(args)
    if not build_or_report(session):
        return 1

    text = session.path.read_text(encoding="utf-8", errors="replace")
    try:
        span = session.resolve(args.identifier, text)
    except UnknownIdentifierError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_UNKNOWN_IDENTIFIER
    except StaleIndexError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_STALE_INDEX

    view = session.config.get("view", {})
    context = args.context if args.context is not None else int(view.get("context_lines", 3))
    color = not getattr(args, "plain", False) and sys.stdout.isatty()

    for line in render_context(
        str(session.path),
        text,
        span,
        context=context,
        color=color,
        style=view.get("style", "default"),
    ):
        print(line)
    return 0
