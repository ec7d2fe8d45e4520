# src/html2pdf/sync_api.py
from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Optional, Union

from .cancel import CancelToken
from .converter import HtmlToPdfConverter
from .options import Option


def convert_html_to_pdf(
    html_content: str,
    *opts: Option,
    timeout: Optional[float] = None,
    converter: Optional[HtmlToPdfConverter] = None,
) -> bytes:
    """
    Blocking variant of ``html2pdf.convert_html_to_pdf``.
    Must not be called from a running event loop.
    """
    conv = converter or HtmlToPdfConverter()

    async def _run() -> bytes:
        return await conv.convert(html_content, *opts, token=CancelToken(timeout))

    return asyncio.run(_run())


def convert_html_file_to_pdf(
    path: Union[str, Path],
    *opts: Option,
    timeout: Optional[float] = None,
    converter: Optional[HtmlToPdfConverter] = None,
) -> bytes:
    """Blocking variant of ``html2pdf.convert_html_file_to_pdf``."""
    conv = converter or HtmlToPdfConverter()

    async def _run() -> bytes:
        return await conv.convert_file(path, *opts, token=CancelToken(timeout))

    return asyncio.run(_run())
