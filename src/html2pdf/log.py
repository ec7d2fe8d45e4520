# src/html2pdf/log.py
from __future__ import annotations

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .constants import LOGGER_NAME


def configure_logging(verbose: bool = False, console: Optional[Console] = None) -> logging.Logger:
    """
    Send ``html2pdf`` log records to stderr through rich.
    DEBUG shows the CDP trace of every session.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=False,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG if verbose else logging.WARNING)
    logger.propagate = False
    return logger
