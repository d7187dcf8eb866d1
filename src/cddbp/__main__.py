"""Allow ``python -m cddbp``."""

import sys

from cddbp.ui.cli import main

if __name__ == "__main__":
    sys.exit(main())
