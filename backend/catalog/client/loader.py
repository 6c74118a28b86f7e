"""Incremental (infinite-scroll) loader.

Drives the state machine in `catalog.client.state` on an asyncio event loop:
the mount trigger loads the first page, throttled scroll notifications load
the following ones, and every request completion is fed back as an event.

Usage:
    async with ProductsClient() as api:
        async with IncrementalLoader(api.fetch_page, on_change=render) as loader:
            loader.mount()
            ...
            loader.on_scroll(position, viewport_height, document_height)
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional, Sequence

from catalog.client.state import (
    Event,
    FetchPage,
    LoadRequested,
    LoaderState,
    PageFailed,
    PageLoaded,
    Scrolled,
    transition,
)
from catalog.client.throttle import Throttle
from catalog.config import settings

logger = logging.getLogger(__name__)

FetchCallable = Callable[[int, int], Awaitable[Sequence[Any]]]


class IncrementalLoader:
    """Owns one `LoaderState` and performs the fetches it asks for.

    All state changes happen synchronously inside event loop callbacks, so
    the state's `in_flight` flag is the only guard needed against issuing
    overlapping requests.
    """

    def __init__(
        self,
        fetch_page: FetchCallable,
        *,
        page_size: Optional[int] = None,
        throttle_interval: Optional[float] = None,
        on_change: Optional[Callable[[LoaderState], None]] = None,
    ):
        self.fetch_page = fetch_page
        self.on_change = on_change
        self._state = LoaderState(page_size=page_size or settings.default_page_size)
        self._task: Optional[asyncio.Task] = None
        self._closed = False

        if throttle_interval is None:
            throttle_interval = settings.scroll_throttle_ms / 1000
        # One long-lived handler; it reads the current state when it fires.
        self._scroll = Throttle(self._handle_scroll, throttle_interval)

    @property
    def state(self) -> LoaderState:
        return self._state

    @property
    def throttle_interval(self) -> float:
        return self._scroll.interval

    @property
    def closed(self) -> bool:
        return self._closed

    # ── Triggers ─────────────────────────────────────────────

    def mount(self) -> None:
        """Load the first page, independent of scroll position."""
        self.dispatch(LoadRequested())

    def on_scroll(
        self, position: float, viewport_height: float, document_height: float
    ) -> None:
        """Scroll notification; rate limited before it reaches the state machine."""
        if self._closed:
            return
        self._scroll(position, viewport_height, document_height)

    def _handle_scroll(
        self, position: float, viewport_height: float, document_height: float
    ) -> None:
        self.dispatch(Scrolled(position, viewport_height, document_height))

    # ── State machine plumbing ───────────────────────────────

    def dispatch(self, event: Event) -> None:
        if self._closed:
            return

        new_state, effects = transition(self._state, event)
        if new_state is not self._state:
            self._state = new_state
            if self.on_change is not None:
                self.on_change(new_state)

        for effect in effects:
            self._start_fetch(effect)

    def _start_fetch(self, effect: FetchPage) -> None:
        logger.debug(f"Requesting {effect.page_size} items at offset {effect.cursor}")
        self._task = asyncio.get_running_loop().create_task(self._run_fetch(effect))

    async def _run_fetch(self, effect: FetchPage) -> None:
        try:
            items = tuple(await self.fetch_page(effect.cursor, effect.page_size))
        except asyncio.CancelledError:
            raise
        except Exception as exc:
            logger.error(f"Error fetching data at offset {effect.cursor}: {exc}")
            self.dispatch(PageFailed(str(exc) or type(exc).__name__))
        else:
            self.dispatch(PageLoaded(items))
        finally:
            if self._task is asyncio.current_task():
                self._task = None

    # ── Lifecycle ────────────────────────────────────────────

    async def wait_settled(self) -> None:
        """Wait for the outstanding request, if any, to complete.

        Returns quietly if `aclose()` aborts the request while waiting.
        """
        task = self._task
        if task is None:
            return
        try:
            await asyncio.shield(task)
        except asyncio.CancelledError:
            if not (self._closed and task.cancelled()):
                raise

    async def aclose(self) -> None:
        """Tear down: drop pending scroll work and abort the in-flight request."""
        self._closed = True
        self._scroll.cancel()
        task, self._task = self._task, None
        if task is not None and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass

    async def __aenter__(self) -> "IncrementalLoader":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
