"""Cancellation token shared by the chained calls of one request generation."""

import asyncio
from collections.abc import Awaitable
from typing import TypeVar

T = TypeVar("T")


class RequestCancelled(Exception):
    """Raised when a guarded call is aborted because its token fired."""


class CancelToken:
    """One-shot cancellation signal.

    Calls wrapped in ``guard`` race against the token: when it fires first the
    wrapped task is cancelled, which aborts the underlying transport work, and
    ``RequestCancelled`` is raised instead of returning a result.
    """

    def __init__(self) -> None:
        self._event = asyncio.Event()
        self.reason = ""

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self, reason: str = "superseded") -> None:
        if not self._event.is_set():
            self.reason = reason
            self._event.set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise RequestCancelled(self.reason)

    async def guard(self, awaitable: Awaitable[T]) -> T:
        """Await ``awaitable`` unless the token fires first."""
        if self.cancelled:
            if asyncio.iscoroutine(awaitable):
                awaitable.close()
            raise RequestCancelled(self.reason)
        work = asyncio.ensure_future(awaitable)
        waiter = asyncio.ensure_future(self._event.wait())
        try:
            await asyncio.wait({work, waiter}, return_when=asyncio.FIRST_COMPLETED)
        except asyncio.CancelledError:
            work.cancel()
            raise
        finally:
            waiter.cancel()

        if not work.done():
            work.cancel()
            await asyncio.wait({work})
            if not work.cancelled():
                work.exception()  # mark retrieved
            raise RequestCancelled(self.reason)
        return work.result()
