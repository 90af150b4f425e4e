"""Command-line entry point: ``minish`` takes no arguments."""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

from .shell import Shell

LOG_LEVEL_ENV = "MINISH_LOG_LEVEL"

USAGE = "usage: minish\n"


def configure_logging(level_name: Optional[str] = None) -> None:
    """Send log records to stderr at the level named by $MINISH_LOG_LEVEL."""
    if level_name is None:
        level_name = os.environ.get(LOG_LEVEL_ENV, "WARNING")
    level = logging.getLevelName(level_name.upper())
    if not isinstance(level, int):
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(name)s: %(levelname)s: %(message)s",
    )


def main(argv: Optional[list[str]] = None) -> int:
    if argv is None:
        argv = sys.argv[1:]
    if argv:
        sys.stderr.write(USAGE)
        return 2

    configure_logging()
    return Shell().run()
