"""Rate limiting for high-frequency callbacks (scroll notifications)."""

import asyncio
from typing import Any, Callable, Optional


class Throttle:
    """Invoke `func` at most once per `interval` seconds.

    The first call after a quiet period runs immediately. Calls that land
    inside the window are collapsed into a single trailing call, made with
    the arguments of the most recent one, once the window closes.

    Must be called from a running event loop.
    """

    def __init__(self, func: Callable[..., Any], interval: float):
        self.func = func
        self.interval = interval
        self._last_run: Optional[float] = None
        self._pending: Optional[tuple] = None
        self._handle: Optional[asyncio.TimerHandle] = None

    def __call__(self, *args: Any) -> None:
        loop = asyncio.get_running_loop()
        now = loop.time()

        if self._handle is None and (
            self._last_run is None or now - self._last_run >= self.interval
        ):
            self._last_run = now
            self.func(*args)
            return

        self._pending = args
        if self._handle is None:
            delay = max(self._last_run + self.interval - now, 0)
            self._handle = loop.call_later(delay, self._flush)

    def _flush(self) -> None:
        self._handle = None
        args, self._pending = self._pending, None
        if args is None:
            return
        self._last_run = asyncio.get_running_loop().time()
        self.func(*args)

    @property
    def pending(self) -> bool:
        return self._handle is not None

    def cancel(self) -> None:
        """Drop any scheduled trailing call."""
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        self._pending = None
