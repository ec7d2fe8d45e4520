# src/html2pdf/converter.py
from __future__ import annotations

import asyncio
import base64
import binascii
from contextlib import AsyncExitStack
from pathlib import Path
from typing import Any, Dict, Optional, Union

from playwright.async_api import Error as PWError

from .browser_async import PlaywrightTransport
from .cancel import CancelToken
from .constants import (
    BLANK_URL,
    GET_FRAME_TREE,
    LOAD_EVENT,
    PDF_MAGIC,
    PRINT_TO_PDF,
    SET_DOCUMENT_CONTENT,
)
from .errors import (
    ConversionError,
    HtmlFileNotFound,
    HtmlFileReadError,
    Phase,
)
from .options import ConversionOptions, Option, apply_options
from .transport import BrowserTransport, CdpSession


def read_html_file(path: Union[str, Path]) -> str:
    """
    Read an HTML file as UTF-8 text. Undecodable bytes are replaced rather
    than rejected, the same way the browser would treat them.
    """
    try:
        return Path(path).read_text(encoding="utf-8", errors="replace")
    except FileNotFoundError as exc:
        raise HtmlFileNotFound(path) from exc
    except OSError as exc:
        raise HtmlFileReadError(path, exc) from exc


class HtmlToPdfConverter:
    """
    Converts HTML into PDF bytes through a browser control session.

    Each call opens its own session on ``transport`` and releases it before
    returning or raising, so one converter can serve concurrent calls.
    """

    def __init__(self, transport: Optional[BrowserTransport] = None) -> None:
        self.transport = transport if transport is not None else PlaywrightTransport()

    async def convert(
        self, html_content: str, *opts: Option, token: Optional[CancelToken] = None
    ) -> bytes:
        """
        Render ``html_content`` and return the printed PDF.

        Raises ``ConversionCancelled`` when ``token`` fires first and
        ``ConversionError`` when the session or a protocol command fails.
        """
        options = apply_options(*opts)
        if token is None:
            token = CancelToken()
        token.raise_if_done(Phase.SESSION)

        failure: Optional[BaseException] = None
        try:
            async with AsyncExitStack() as stack:
                try:
                    session = await self._open(stack, options, token)
                    await self._load(session, html_content, token)
                    pdf = await self._print(session, options, token)
                except BaseException as exc:
                    failure = exc
                    raise
        except PWError as exc:
            # raised while tearing the session down
            if failure is None or exc is failure:
                raise ConversionError(Phase.SESSION, str(exc)) from exc
            options.log("session teardown failed: %s", exc)
            raise failure
        return pdf

    async def convert_file(
        self,
        path: Union[str, Path],
        *opts: Option,
        token: Optional[CancelToken] = None,
    ) -> bytes:
        """Read ``path`` and convert its content with the same options."""
        return await self.convert(read_html_file(path), *opts, token=token)

    async def _open(
        self, stack: AsyncExitStack, options: ConversionOptions, token: CancelToken
    ) -> CdpSession:
        cm = self.transport.session(options.logger)
        try:
            session = await token.race(stack.enter_async_context(cm), Phase.SESSION)
            await token.race(session.navigate(BLANK_URL), Phase.SESSION)
        except (PWError, OSError) as exc:
            raise ConversionError(Phase.SESSION, str(exc)) from exc
        return session

    async def _load(self, session: CdpSession, html: str, token: CancelToken) -> None:
        loaded = asyncio.Event()

        def on_load(params: Dict[str, Any]) -> None:
            loaded.set()

        # subscribe before the content is set, the event may fire right away
        session.on(LOAD_EVENT, on_load)
        try:
            tree = await token.race(session.send(GET_FRAME_TREE), Phase.CONTENT)
            frame_id = _root_frame_id(tree)
            await token.race(
                session.send(SET_DOCUMENT_CONTENT, {"frameId": frame_id, "html": html}),
                Phase.CONTENT,
            )
            await token.race(loaded.wait(), Phase.CONTENT)
        except PWError as exc:
            raise ConversionError(Phase.CONTENT, str(exc)) from exc
        finally:
            session.remove_listener(LOAD_EVENT, on_load)

    async def _print(
        self, session: CdpSession, options: ConversionOptions, token: CancelToken
    ) -> bytes:
        try:
            result = await token.race(
                session.send(PRINT_TO_PDF, {"printBackground": options.print_background}),
                Phase.PDF,
            )
        except PWError as exc:
            raise ConversionError(Phase.PDF, str(exc)) from exc

        try:
            pdf = base64.b64decode(result["data"], validate=True)
        except (KeyError, TypeError, binascii.Error) as exc:
            raise ConversionError(Phase.PDF, "malformed printToPDF response") from exc
        if not pdf.startswith(PDF_MAGIC):
            raise ConversionError(Phase.PDF, "browser returned non-PDF content")
        return pdf


def _root_frame_id(tree: Dict[str, Any]) -> str:
    try:
        return tree["frameTree"]["frame"]["id"]
    except (KeyError, TypeError) as exc:
        raise ConversionError(Phase.CONTENT, "malformed frame tree") from exc


async def convert_html_to_pdf(
    html_content: str, *opts: Option, token: Optional[CancelToken] = None
) -> bytes:
    """Convert HTML content to PDF with a headless Chromium."""
    return await HtmlToPdfConverter().convert(html_content, *opts, token=token)


async def convert_html_file_to_pdf(
    path: Union[str, Path], *opts: Option, token: Optional[CancelToken] = None
) -> bytes:
    """Read an HTML file and convert its content to PDF."""
    return await HtmlToPdfConverter().convert_file(path, *opts, token=token)

