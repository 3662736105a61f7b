"""Entry point for running CodeCanvas as a module: python -m codecanvas"""

import sys
from .ui import main

if __name__ == "__main__":
    sys.exit(main())
