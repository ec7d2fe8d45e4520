from __future__ import annotations

import asyncio
import base64
import logging
from contextlib import asynccontextmanager
from typing import Any, Callable, Dict, List, Optional

import pytest
from playwright.async_api import Error as PWError


def fake_pdf(html: str) -> bytes:
    return b"%PDF-1.7\n" + html.encode("utf-8") + b"\n%%EOF\n"


class FakeSession:
    """
    In-memory stand-in for a CDP session. Setting the document content fires
    ``Page.loadEventFired`` on the next loop iteration, or synchronously
    when ``load_sync`` is set, or never when ``fire_load`` is False.
    """

    def __init__(self, transport: "FakeTransport", logger) -> None:
        self.transport = transport
        self.logger = logger
        self.calls: List[tuple] = []
        self.listeners: Dict[str, List[Callable]] = {}
        self.html: Optional[str] = None

    def _log(self, fmt: str, *args: Any) -> None:
        if self.logger is not None:
            self.logger(fmt, *args)

    async def navigate(self, url: str) -> None:
        self.calls.append(("navigate", url))
        self._log("navigate %s", url)
        self._maybe_fail("navigate")
        await asyncio.sleep(0)

    def on(self, event, handler) -> None:
        self.listeners.setdefault(event, []).append(handler)

    def remove_listener(self, event, handler) -> None:
        self.listeners[event].remove(handler)

    def _emit(self, event: str, params: Dict[str, Any]) -> None:
        self._log("<- event %s", event)
        for handler in list(self.listeners.get(event, [])):
            handler(params)

    def _maybe_fail(self, method: str) -> None:
        exc = self.transport.fail.get(method)
        if exc is not None:
            raise exc

    async def send(self, method: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        self.calls.append((method, params))
        self._log("-> %s", method)
        await asyncio.sleep(0)
        self._maybe_fail(method)

        if method == "Page.getFrameTree":
            return self.transport.frame_tree
        if method == "Page.setDocumentContent":
            self.html = params["html"]
            if self.transport.load_sync:
                self._emit("Page.loadEventFired", {"timestamp": 1.0})
            elif self.transport.fire_load:
                asyncio.get_running_loop().call_soon(
                    self._emit, "Page.loadEventFired", {"timestamp": 1.0}
                )
            return {}
        if method == "Page.printToPDF":
            if self.transport.pdf_data is not None:
                return {"data": self.transport.pdf_data}
            return {"data": base64.b64encode(fake_pdf(self.html or "")).decode("ascii")}
        raise PWError("unknown method %s" % method)


class FakeTransport:
    def __init__(
        self,
        fire_load: bool = True,
        load_sync: bool = False,
        open_error: Optional[BaseException] = None,
        open_delay: float = 0,
        close_error: Optional[BaseException] = None,
    ) -> None:
        self.fire_load = fire_load
        self.load_sync = load_sync
        self.open_error = open_error
        self.open_delay = open_delay
        self.close_error = close_error
        self.fail: Dict[str, BaseException] = {}
        self.frame_tree: Dict[str, Any] = {"frameTree": {"frame": {"id": "F1"}}}
        self.pdf_data: Optional[str] = None
        self.sessions: List[FakeSession] = []
        self.opened = 0
        self.closed = 0
        self.active = 0
        self.max_active = 0

    @property
    def last(self) -> FakeSession:
        return self.sessions[-1]

    @asynccontextmanager
    async def session(self, logger):
        if self.open_delay:
            await asyncio.sleep(self.open_delay)
        if self.open_error is not None:
            raise self.open_error
        s = FakeSession(self, logger)
        self.sessions.append(s)
        self.opened += 1
        self.active += 1
        self.max_active = max(self.max_active, self.active)
        try:
            yield s
        finally:
            self.active -= 1
            self.closed += 1
            if self.close_error is not None:
                raise self.close_error


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def html_file(tmp_path):
    path = tmp_path / "page.html"
    path.write_text(
        "<html><body><h1>Test File</h1><p>This is a test file.</p></body></html>",
        encoding="utf-8",
    )
    return path


@pytest.fixture(autouse=True)
def restore_html2pdf_logger():
    # the CLI installs its own handler and stops propagation
    logger = logging.getLogger("html2pdf")
    saved = (list(logger.handlers), logger.level, logger.propagate)
    yield
    logger.handlers[:] = saved[0]
    logger.setLevel(saved[1])
    logger.propagate = saved[2]
