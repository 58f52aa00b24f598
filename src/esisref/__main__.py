"""Allow ``python -m esisref``."""

import sys

from esisref.cli import main

sys.exit(main())
