"""Stand-in for nsgmls used by the tests.

Prints the canned ESIS stored next to the document (``<document>.esis``)
byte for byte. Behaviour is steered with environment variables:

    FAKE_NSGMLS_EXIT    exit status (default 0)
    FAKE_NSGMLS_SLEEP   seconds to sleep before printing
    FAKE_NSGMLS_STDERR  text written to stderr
"""

import os
import sys
import time
from pathlib import Path


def main() -> int:
    document = Path(sys.argv[-1])
    time.sleep(float(os.environ.get("FAKE_NSGMLS_SLEEP", "0")))

    stderr = os.environ.get("FAKE_NSGMLS_STDERR")
    if stderr:
        sys.stderr.write(stderr + "\n")

    esis = document.with_name(document.name + ".esis")
    if esis.exists():
        sys.stdout.flush()
        sys.stdout.buffer.write(esis.read_bytes())
    return int(os.environ.get("FAKE_NSGMLS_EXIT", "0"))


if __name__ == "__main__":
    sys.exit(main())
