"""Logging configuration for the command-line tool."""

from __future__ import annotations

import logging


def configure_logging(verbose: bool = False) -> None:
    """Configure stderr logging; debug detail (git commands, cleanup) only when verbose."""
    logging.basicConfig(
        format="%(asctime)s %(levelname)7s %(message)s",
        datefmt="%H:%M:%S",
        level=logging.DEBUG if verbose else logging.WARNING,
    )
