"""
WeekFitter — Entry Point.

Single entry point: `python main.py <command>` runs the command line interface.
"""

import logging
import sys

from weekfitter.config import settings

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

from weekfitter.cli import main

if __name__ == "__main__":
    sys.exit(main())
