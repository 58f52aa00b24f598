"""esisref.mcp.server - MCP server implementation.

Each document gets its own DocumentSession from a SessionRegistry, so indexes
of different documents never interfere. Tools never build implicitly:
``list_identifiers`` and ``resolve_identifier`` report a not-ready index and
the client calls ``rebuild_index`` when it wants one.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

try:
    from mcp.server.fastmcp import FastMCP

    MCP_AVAILABLE = True
except ImportError:
    MCP_AVAILABLE = False
    FastMCP = None

from esisref.config import get_config
from esisref.errors import EsisrefError
from esisref.index import parse_listing_line
from esisref.session import SessionRegistry

MCP_SERVER_INSTRUCTIONS = """\
esisref MCP Server - ID cross-references in SGML/XML documents

Documents are indexed with an external SP parser (nsgmls). Each document has
its own index, which is only built when you ask for it.

## Workflow

1. `rebuild_index(path)` - Parse the document and index its ID attributes
2. `list_identifiers(path)` - Listing of "identifier (element)" lines
3. `resolve_identifier(path, identifier)` - Line, column and text of the declaration

## Errors

Failed tools return `success: false` with `error_type`:
- `ToolInvocationError` / `ToolTimeoutError` - parser missing, failed or hung;
  the previous index is kept
- `IndexNotReadyError` - call `rebuild_index` first
- `UnknownIdentifierError` - not declared as an ID
- `StaleIndexError` - declared, but the text has changed; rebuild
"""


def _error(e: Exception) -> dict[str, Any]:
    return {"success": False, "error": str(e), "error_type": type(e).__name__}


def _resolve_path(working_dir: Path, path: str) -> Path:
    candidate = Path(path)
    if not candidate.is_absolute():
        candidate = working_dir / candidate
    return candidate.resolve()


def _rebuild_index(registry: SessionRegistry, path: Path) -> dict[str, Any]:
    """Rebuild the index for *path*, keeping the old one on failure."""
    session = registry.get(path)
    try:
        result = session.rebuild()
    except EsisrefError as e:
        return {**_error(e), "status": session.status()}
    return {
        "success": True,
        "identifiers": len(result.index),
        "declarations": len(result.index.entries),
        "anomalies": [str(a) for a in result.anomalies],
    }


def _index_status(registry: SessionRegistry, path: Path) -> dict[str, Any]:
    return {"success": True, **registry.get(path).status()}


def _list_identifiers(registry: SessionRegistry, path: Path) -> dict[str, Any]:
    session = registry.get(path)
    try:
        lines = session.render()
    except EsisrefError as e:
        return _error(e)
    return {
        "success": True,
        "lines": lines,
        "entries": [
            {
                "identifier": entry.identifier,
                "attribute": entry.attribute_name,
                "element": entry.element_name,
            }
            for entry in session.index.entries
        ],
    }


def _resolve_identifier(registry: SessionRegistry, path: Path, identifier: str) -> dict[str, Any]:
    session = registry.get(path)
    try:
        span = session.resolve(identifier)
    except EsisrefError as e:
        return _error(e)
    return {"success": True, "path": str(session.path), **span.to_dict()}


def create_server(working_dir: Path | None = None) -> FastMCP:
    """Create the MCP server with all tools registered.

    Args:
        working_dir: Directory relative document paths are resolved against.

    Returns:
        FastMCP server instance.
    """
    if not MCP_AVAILABLE:
        raise ImportError("MCP dependencies not installed. Install with: pip install esisref[mcp]")

    if working_dir is None:
        working_dir = Path.cwd()

    registry = SessionRegistry(config=get_config(start_path=working_dir, quiet=True))
    mcp = FastMCP("esisref", instructions=MCP_SERVER_INSTRUCTIONS)

    @mcp.tool()
    def rebuild_index(path: str) -> dict[str, Any]:
        """Parse a document and rebuild its identifier index.

        Args:
            path: Document path, absolute or relative to the server's directory.
        """
        return _rebuild_index(registry, _resolve_path(working_dir, path))

    @mcp.tool()
    def index_status(path: str) -> dict[str, Any]:
        """Report the index state (empty, building, ready) and counts for a document."""
        return _index_status(registry, _resolve_path(working_dir, path))

    @mcp.tool()
    def list_identifiers(path: str) -> dict[str, Any]:
        """List declared identifiers in declaration order."""
        return _list_identifiers(registry, _resolve_path(working_dir, path))

    @mcp.tool()
    def resolve_identifier(path: str, identifier: str) -> dict[str, Any]:
        """Locate the attribute assignment that declares an identifier.

        Returns the 1-based line and column, character offsets and matched text.
        """
        return _resolve_identifier(registry, _resolve_path(working_dir, path), identifier)

    @mcp.tool()
    def identifier_at_line(line: str) -> dict[str, Any]:
        """Extract the identifier from a line of list_identifiers output."""
        identifier = parse_listing_line(line)
        if identifier is None:
            return {"success": False, "error": "No identifier on this line"}
        return {"success": True, "identifier": identifier}

    return mcp


def run_server(
    working_dir: Path | None = None,
    transport: str = "stdio",
) -> None:
    """Run the MCP server.

    Args:
        working_dir: Directory relative document paths are resolved against.
        transport: Transport type ('stdio', 'sse' or 'streamable-http').
    """
    mcp = create_server(working_dir=working_dir)
    mcp.run(transport=transport)
