"""
esisref.cli - Command-line interface.

Main entry point for the esisref CLI tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from esisref import __version__
from esisref.commands import config_cmd, list_cmd, resolve_cmd, show_cmd
from esisref.commands.common import complete_identifiers


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="esisref",
        description="ID cross-reference index for SGML/XML documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  esisref list manual.sgml              # List every declared ID
  esisref resolve manual.sgml intro     # Where is ID "intro" declared?
  esisref show manual.sgml intro        # Declaration with surrounding lines
  esisref list manual.sgml --json       # Machine-readable listing

Configuration:
  esisref config path                   # Show config file location
  esisref config show                   # View effective settings

The document is parsed with nsgmls (or the command set in [parser] of
.esisref.toml, e.g. ESISREF_PARSER_COMMAND=onsgmls).

For detailed command help: esisref <command> --help
        """,
    )

    # Global options
    parser.add_argument(
        "--version",
        action="version",
        version=f"esisref {__version__}",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Path to configuration file",
        metavar="PATH",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Verbose output",
    )
    parser.add_argument(
        "-q",
        "--quiet",
        action="store_true",
        help="Suppress non-error output",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Options shared by the commands that index a document
    document_parent = argparse.ArgumentParser(add_help=False)
    document_parent.add_argument(
        "file",
        type=Path,
        help="SGML or XML document to index",
    )
    case_group = document_parent.add_mutually_exclusive_group()
    case_group.add_argument(
        "--case-sensitive",
        dest="case_sensitive",
        action="store_const",
        const=True,
        default=None,
        help="Match identifiers exactly (default: auto, exact for XML)",
    )
    case_group.add_argument(
        "--case-insensitive",
        dest="case_sensitive",
        action="store_const",
        const=False,
        help="Fold identifier case (SGML general name case)",
    )
    document_parent.add_argument(
        "--strict",
        action="store_true",
        help="Fail when an ID attribute has no owning element",
    )

    # list command
    list_parser = subparsers.add_parser(
        "list",
        parents=[document_parent],
        help="List declared identifiers with their elements",
    )
    list_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output the listing as JSON",
    )

    # resolve command
    resolve_parser = subparsers.add_parser(
        "resolve",
        parents=[document_parent],
        help="Locate the declaration of an identifier",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Exit status:
  0  declaration found
  1  document could not be indexed
  2  identifier is not declared as an ID
  3  identifier is indexed but its declaration was not found in the text
""",
    )
    resolve_parser.add_argument(
        "identifier", help="Identifier to resolve"
    ).completer = complete_identifiers
    resolve_parser.add_argument(
        "-j",
        "--json",
        action="store_true",
        help="Output the span as JSON",
    )

    # show command
    show_parser = subparsers.add_parser(
        "show",
        parents=[document_parent],
        help="Show the declaration of an identifier in context",
    )
    show_parser.add_argument(
        "identifier", help="Identifier to show"
    ).completer = complete_identifiers
    show_parser.add_argument(
        "-C",
        "--context",
        type=int,
        default=None,
        help="Lines of context (default: view.context_lines)",
        metavar="N",
    )
    show_parser.add_argument(
        "--plain",
        action="store_true",
        help="Disable syntax highlighting",
    )

    # config command
    config_parser = subparsers.add_parser(
        "config",
        help="Inspect configuration",
    )
    config_subparsers = config_parser.add_subparsers(dest="config_action")
    config_subparsers.add_parser("show", help="Show the effective configuration")
    config_subparsers.add_parser("path", help="Show the config file in use")

    # version command
    subparsers.add_parser(
        "version",
        help="Show version information",
    )

    # completion command
    completion_parser = subparsers.add_parser(
        "completion",
        help="Shell tab-completion setup",
    )
    completion_parser.add_argument(
        "--shell",
        choices=["bash", "zsh", "fish", "tcsh"],
        help="Generate the completion script for this shell",
    )

    # mcp command
    mcp_parser = subparsers.add_parser(
        "mcp",
        help="MCP server for editor and agent integration",
    )
    mcp_subparsers = mcp_parser.add_subparsers(dest="mcp_action")
    serve_parser = mcp_subparsers.add_parser("serve", help="Start the MCP server")
    serve_parser.add_argument(
        "--transport",
        choices=["stdio", "sse", "streamable-http"],
        default="stdio",
        help="Transport type (default: stdio)",
    )

    return parser


def _setup_logging(args: argparse.Namespace) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the CLI.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Exit code (0 for success, non-zero for failure)
    """
    parser = create_parser()

    # Enable shell tab-completion if argcomplete is installed
    # Install with: pip install esisref[completion]
    try:
        import argcomplete

        argcomplete.autocomplete(parser)
    except ImportError:
        pass

    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    _setup_logging(args)

    try:
        if args.command == "list":
            return list_cmd.run(args)
        elif args.command == "resolve":
            return resolve_cmd.run(args)
        elif args.command == "show":
            return show_cmd.run(args)
        elif args.command == "config":
            return config_cmd.run(args)
        elif args.command == "version":
            return version_command(args)
        elif args.command == "completion":
            return completion_command(args)
        elif args.command == "mcp":
            return mcp_command(args)
        else:
            parser.print_help()
            return 1

    except KeyboardInterrupt:
        print("\nOperation cancelled.", file=sys.stderr)
        return 130
    except Exception as e:
        if args.verbose:
            raise
        print(f"Error: {e}", file=sys.stderr)
        return 1


def version_command(args: argparse.Namespace) -> int:
    """Handle version command."""
    print(f"esisref {__version__}")
    return 0


COMPLETION_SETUP = """\
Shell completion for esisref
============================

Commands, options and document paths complete in every shell. For
`resolve` and `show`, the identifier argument completes to the IDs declared
in the document already on the command line; this runs the configured
parser ([parser] in .esisref.toml) on each request.

Bash (add to ~/.bashrc):
  eval "$(register-python-argcomplete esisref)"

Zsh (add to ~/.zshrc):
  eval "$(register-python-argcomplete --shell zsh esisref)"

Fish (add to ~/.config/fish/config.fish):
  register-python-argcomplete --shell fish esisref | source

Print the script for one shell:
  esisref completion --shell bash
"""


def completion_command(args: argparse.Namespace) -> int:
    """Print completion setup, or the completion script for ``--shell``."""
    try:
        import argcomplete  # noqa: F401
    except ImportError:
        print("Error: argcomplete not installed.", file=sys.stderr)
        print("Install with: pip install esisref[completion]", file=sys.stderr)
        return 1

    if not args.shell:
        print(COMPLETION_SETUP, end="")
        return 0

    import subprocess

    cmd = ["register-python-argcomplete", f"--shell={args.shell}", "esisref"]
    try:
        result = subprocess.run(cmd, capture_output=True, text=True)
    except FileNotFoundError:
        print("Error: register-python-argcomplete not found.", file=sys.stderr)
        return 1
    if result.returncode != 0:
        print(f"Error generating completion script: {result.stderr.strip()}", file=sys.stderr)
        return 1
    print(result.stdout, end="")
    return 0


def mcp_command(args: argparse.Namespace) -> int:
    """Handle MCP server commands."""
    from esisref.mcp import MCP_AVAILABLE, run_server

    if not MCP_AVAILABLE:
        print("Error: MCP dependencies not installed.", file=sys.stderr)
        print("Install with: pip install esisref[mcp]", file=sys.stderr)
        return 1

    if args.mcp_action == "serve":
        working_dir = Path.cwd()
        print("Starting esisref MCP server...", file=sys.stderr)
        print(f"Working directory: {working_dir}", file=sys.stderr)

        try:
            run_server(working_dir=working_dir, transport=args.transport)
        except KeyboardInterrupt:
            print("\nServer stopped.", file=sys.stderr)
        return 0
    else:
        print("Usage: esisref mcp serve", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
