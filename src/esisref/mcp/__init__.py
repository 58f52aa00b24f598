"""esisref.mcp - MCP server exposing per-document identifier indexes.

Needs the optional ``mcp`` package (``pip install esisref[mcp]``); check
MCP_AVAILABLE before calling run_server.
"""

from esisref.mcp.server import MCP_AVAILABLE, create_server, run_server

__all__ = [
    "MCP_AVAILABLE",
    "create_server",
    "run_server",
]
