"""Allow ``python -m cruxfade``."""

from __future__ import annotations

import sys

from cruxfade.cli import main


if __name__ == "__main__":
    sys.exit(main())
