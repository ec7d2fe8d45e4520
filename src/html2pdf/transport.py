# src/html2pdf/transport.py
from __future__ import annotations

from typing import Any, AsyncContextManager, Callable, Dict, Optional, Protocol

from .options import LogSink

EventHandler = Callable[[Dict[str, Any]], None]


class CdpSession(Protocol):
    """
    The narrow slice of the DevTools protocol the converter drives.
    """

    async def navigate(self, url: str) -> None:
        """Navigate the page to ``url`` and wait for it to load."""
        ...

    def on(self, event: str, handler: EventHandler) -> None: ...

    def remove_listener(self, event: str, handler: EventHandler) -> None: ...

    async def send(
        self, method: str, params: Optional[Dict[str, Any]] = None
    ) -> Dict[str, Any]: ...


class BrowserTransport(Protocol):
    def session(self, logger: Optional[LogSink]) -> AsyncContextManager[CdpSession]:
        """
        Open a browser control session. Leaving the context manager must
        release every browser resource the session holds.
        """
        ...
