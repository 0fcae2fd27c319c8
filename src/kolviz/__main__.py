"""Entry point for running as module: python -m kolviz"""

import sys

from kolviz.cli.commands import main

if __name__ == "__main__":
    sys.exit(main())
