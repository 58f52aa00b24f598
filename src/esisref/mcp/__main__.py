"""``python -m esisref.mcp [--transport T]``, the same as ``esisref mcp serve``."""

import sys

from esisref.cli import main

if __name__ == "__main__":
    sys.exit(main(["mcp", "serve", *sys.argv[1:]]))
