# src/html2pdf/errors.py
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Union


class Phase(str, Enum):
    """Stage of a conversion in which a failure happened."""

    SESSION = "session"
    CONTENT = "content"
    PDF = "pdf"


class Html2PdfError(Exception):
    """Base class for every error raised by html2pdf."""


class HtmlFileNotFound(Html2PdfError):
    def __init__(self, path: Union[str, Path]) -> None:
        super().__init__("html file not found")
        self.path = Path(path)


class HtmlFileReadError(Html2PdfError):
    def __init__(self, path: Union[str, Path], cause: BaseException) -> None:
        super().__init__("failed to read file %s: %s" % (path, cause))
        self.path = Path(path)
        self.cause = cause


class ConversionError(Html2PdfError):
    """
    The browser session could not be created or a protocol command failed.
    The original exception is chained as ``__cause__``.
    """

    def __init__(self, phase: Phase, message: str) -> None:
        super().__init__("failed to convert HTML to PDF (%s): %s" % (phase.value, message))
        self.phase = phase


class ConversionCancelled(ConversionError):
    """The cancel token fired or its deadline passed before the PDF was ready."""

    def __init__(self, phase: Phase, reason: str = "cancelled") -> None:
        super().__init__(phase, reason)
        self.reason = reason
