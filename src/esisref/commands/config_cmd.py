"""
esisref.commands.config_cmd - Inspect the effective configuration.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

import tomlkit


def run(args: argparse.Namespace) -> int:
    """Run the config command."""
    from esisref.config import find_config_file, get_config

    config_path = getattr(args, "config", None)
    action = getattr(args, "config_action", None)

    if action == "path":
        path = config_path or find_config_file(Path.cwd())
        if path is None:
            print("No .esisref.toml found; using built-in defaults.")
            return 1
        print(path)
        return 0
    elif action == "show":
        config = get_config(config_path=config_path, quiet=True)
        print(tomlkit.dumps(config), end="")
        return 0
    else:
        print("Usage: esisref config <show|path>", file=sys.stderr)
        return 1
