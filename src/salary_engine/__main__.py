"""Entry point for running the salary engine CLI."""

import sys

from salary_engine.cli import main

if __name__ == "__main__":
    sys.exit(main())
