"""
esisref.commands - CLI command implementations
"""

__all__ = [
    "config_cmd",
    "list_cmd",
    "resolve_cmd",
    "show_cmd",
]
