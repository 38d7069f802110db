"""Run the linked charts page from a source checkout, without installing.

Arguments are the same as the ``linked-charts`` command, e.g.
``python main.py --data cars.csv --x-attr wt``.
"""

import sys
from pathlib import Path

SRC = Path(__file__).resolve().parent / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from linked_charts.app import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
