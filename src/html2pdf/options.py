# src/html2pdf/options.py
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from .constants import LOGGER_NAME

LogSink = Callable[..., None]

_log = logging.getLogger(LOGGER_NAME)


def default_logger(fmt: str, *args: Any) -> None:
    """
    Write a printf-style message to the ``html2pdf`` logger at DEBUG level.
    """
    _log.debug(fmt, *args)


@dataclass
class ConversionOptions:
    """
    Settings for one conversion.

    Attributes:
        logger: Sink called as ``logger(fmt, *args)`` for the session's
            diagnostic stream. ``None`` silences it.
        print_background: Ask the browser to print CSS background colors
            and images.
    """

    logger: Optional[LogSink] = field(default=default_logger)
    print_background: bool = False

    def log(self, fmt: str, *args: Any) -> None:
        if self.logger is not None:
            self.logger(fmt, *args)


Option = Callable[[ConversionOptions], None]


def with_logger(logger: Optional[LogSink]) -> Option:
    """Route diagnostic output to ``logger``; pass ``None`` for no output."""

    def apply(opts: ConversionOptions) -> None:
        opts.logger = logger

    return apply


def with_print_background(enabled: bool = True) -> Option:
    def apply(opts: ConversionOptions) -> None:
        opts.print_background = enabled

    return apply


def apply_options(*opts: Option) -> ConversionOptions:
    """Build a fresh ``ConversionOptions`` from the defaults and ``opts`` in order."""
    options = ConversionOptions()
    for opt in opts:
        opt(options)
    return options
