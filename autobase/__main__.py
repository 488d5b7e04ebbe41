"""Allow ``python -m autobase``."""

import sys

from autobase.main import main

if __name__ == "__main__":
    sys.exit(main())
