"""Trailing-edge debouncer for query input."""

import asyncio
import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)

DEFAULT_WAIT_SECONDS = 0.5


class Debouncer:
    """Coalesces rapid pushes into a single committed value.

    Every ``push`` restarts the quiet-period timer. When the timer expires,
    ``on_commit`` is called once with the most recent value. The last value
    is never dropped; ``flush`` commits it early.
    """

    def __init__(
        self,
        on_commit: Callable[[str], object],
        wait_seconds: float = DEFAULT_WAIT_SECONDS,
    ):
        if wait_seconds < 0:
            raise ValueError(f"wait_seconds must be >= 0, got {wait_seconds}")
        self.on_commit = on_commit
        self.wait_seconds = wait_seconds
        self._pending: str | None = None
        self._handle: asyncio.TimerHandle | None = None

    @property
    def pending(self) -> str | None:
        return self._pending

    def push(self, value: str) -> None:
        """Record a new input value and restart the quiet period."""
        self._cancel_timer()
        self._pending = value
        loop = asyncio.get_running_loop()
        self._handle = loop.call_later(self.wait_seconds, self._fire)

    def flush(self) -> bool:
        """Commit the pending value now. Returns False if nothing was pending."""
        if self._pending is None:
            return False
        self._cancel_timer()
        self._fire()
        return True

    def cancel(self) -> None:
        self._cancel_timer()
        self._pending = None

    def _fire(self) -> None:
        self._handle = None
        value, self._pending = self._pending, None
        if value is None:
            return
        logger.debug("Debounce window elapsed, committing %r", value)
        self.on_commit(value)

    def _cancel_timer(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
