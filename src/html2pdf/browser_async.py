# src/html2pdf/browser_async.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple

from playwright.async_api import (
    async_playwright,
    Browser,
    BrowserContext,
    CDPSession,
    Page,
)

from .constants import CHROMIUM_ARGS
from .options import LogSink
from .transport import EventHandler


def _noop(fmt: str, *args: Any) -> None:
    pass


async def launch_browser(
    headless: bool = True, args: Optional[List[str]] = None
) -> Tuple[Browser, BrowserContext]:
    """
    Launch Chromium and create a fresh context for a single conversion.
    """
    p = await async_playwright().start()
    try:
        browser = await p.chromium.launch(
            headless=headless,
            args=CHROMIUM_ARGS if args is None else args,
        )
        ctx = await browser.new_context(java_script_enabled=True)
    except BaseException:
        await p.stop()
        raise
    setattr(ctx, "_playwright", p)
    return browser, ctx


async def close_browser(browser: Browser, ctx: BrowserContext) -> None:
    """
    Close the context and browser, then stop the Playwright driver.
    """
    try:
        await ctx.close()
    finally:
        try:
            await browser.close()
        finally:
            p = getattr(ctx, "_playwright", None)
            if p:
                await p.stop()


class PlaywrightCdpSession:
    """
    A raw DevTools session attached to one Playwright page. Every command,
    response and subscribed event is reported to the log sink.
    """

    def __init__(self, page: Page, cdp: CDPSession, logger: LogSink) -> None:
        self._page = page
        self._cdp = cdp
        self._log = logger
        self._wrapped: Dict[Tuple[str, int], EventHandler] = {}

    async def navigate(self, url: str) -> None:
        self._log("navigate %s", url)
        await self._page.goto(url, wait_until="load")

    def on(self, event: str, handler: EventHandler) -> None:
        def traced(params: Dict[str, Any]) -> None:
            self._log("<- event %s %s", event, params)
            handler(params)

        self._wrapped[(event, id(handler))] = traced
        self._cdp.on(event, traced)

    def remove_listener(self, event: str, handler: EventHandler) -> None:
        traced = self._wrapped.pop((event, id(handler)), None)
        if traced is not None:
            self._cdp.remove_listener(event, traced)

    async def send(
        self, method: str, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]:
        self._log("-> %s", method)
        result = await self._cdp.send(method, params)
        self._log("<- %s (%d keys)", method, len(result or {}))
        return result or {}


class PlaywrightTransport:
    """
    Opens one headless Chromium per session, so concurrent conversions
    never share a browser, page or CDP connection.
    """

    def __init__(self, headless: bool = True, args: Optional[List[str]] = None) -> None:
        self.headless = headless
        self.args = args

    @asynccontextmanager
    async def session(self, logger: Optional[LogSink]) -> AsyncIterator[PlaywrightCdpSession]:
        log = logger or _noop
        browser, ctx = await launch_browser(self.headless, self.args)
        log("browser launched (version %s)", browser.version)
        try:
            page = await ctx.new_page()
            cdp = await ctx.new_cdp_session(page)
            await cdp.send("Page.enable")
            yield PlaywrightCdpSession(page, cdp, log)
        finally:
            await close_browser(browser, ctx)
            log("browser closed")
