"""
FILE: lanes/logging_setup.py
PURPOSE: Logging configuration for the CLI
EXPORTS:
  - setup_logging(verbose) -> None
DEPENDENCIES:
  - logging (stdlib)
  - rich (RichHandler for readable log lines)
NOTES:
  - Library modules only call logging.getLogger(__name__); handlers are
    installed here, by the entry point
  - Logs go to stderr so --json output stays parseable
"""

import logging

from rich.console import Console
from rich.logging import RichHandler


def setup_logging(verbose: bool = False) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), rich_tracebacks=True)],
        force=True,
    )
