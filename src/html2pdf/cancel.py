# src/html2pdf/cancel.py
from __future__ import annotations

import asyncio
import time
from typing import Awaitable, Optional, TypeVar

from .errors import ConversionCancelled, Phase

T = TypeVar("T")


class CancelToken:
    """
    Cancellation signal with an optional deadline, passed to every blocking
    step of a conversion.

    ``timeout`` is in seconds from construction; ``None`` means no deadline.
    A timeout of zero or less yields a token that is already expired.
    """

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._cancelled = False
        self._event: Optional[asyncio.Event] = None

    def cancel(self) -> None:
        """Cancel the token. Must be called from the event loop thread."""
        self._cancelled = True
        if self._event is not None:
            self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def expired(self) -> bool:
        return self._deadline is not None and time.monotonic() >= self._deadline

    @property
    def done(self) -> bool:
        return self.cancelled or self.expired

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, ``None`` without a deadline."""
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def _reason(self) -> str:
        return "cancelled" if self._cancelled else "deadline exceeded"

    def raise_if_done(self, phase: Phase) -> None:
        if self.done:
            raise ConversionCancelled(phase, self._reason())

    def _signal(self) -> asyncio.Event:
        # created lazily so the event belongs to the running loop
        if self._event is None:
            self._event = asyncio.Event()
            if self._cancelled:
                self._event.set()
        return self._event

    async def race(self, aw: Awaitable[T], phase: Phase) -> T:
        """
        Await ``aw`` unless the token is cancelled or expires first.

        The losing side is cancelled and awaited before returning, so no
        task outlives the call. Raises ``ConversionCancelled`` when the token
        wins.
        """
        self.raise_if_done(phase)

        task = asyncio.ensure_future(aw)
        waiter = asyncio.ensure_future(self._signal().wait())
        try:
            done, _ = await asyncio.wait(
                {task, waiter},
                timeout=self.remaining(),
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            pending = [f for f in (task, waiter) if not f.done()]
            for f in pending:
                f.cancel()
            if pending:
                await asyncio.gather(*pending, return_exceptions=True)

        if task in done:
            return task.result()
        raise ConversionCancelled(phase, self._reason())
