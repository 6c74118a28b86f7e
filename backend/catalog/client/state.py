"""Incremental loader state machine.

The loader's state is a plain immutable value and every change goes through
`transition(state, event) -> (state, effects)`. Nothing here touches the
network or the event loop: effects describe the fetch to perform and the
driver in `catalog.client.loader` carries them out.

Phases:
    IDLE       no request outstanding, more data may exist
    LOADING    exactly one page request in flight
    EXHAUSTED  terminal; an empty page or a failed request ended the stream
"""

import enum
import math
from dataclasses import dataclass, replace
from typing import Any, Union


class Phase(str, enum.Enum):
    IDLE = "idle"
    LOADING = "loading"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class LoaderState:
    page_size: int = 9
    items: tuple = ()
    cursor: int = 0
    in_flight: bool = False
    exhausted: bool = False
    initial_load_done: bool = False
    error: str | None = None  # set when a failed request ended the stream

    @property
    def phase(self) -> Phase:
        if self.exhausted:
            return Phase.EXHAUSTED
        if self.in_flight:
            return Phase.LOADING
        return Phase.IDLE

    @property
    def has_more(self) -> bool:
        return not self.exhausted

    @property
    def failed(self) -> bool:
        return self.error is not None


# ── Events ───────────────────────────────────────────────────

@dataclass(frozen=True)
class LoadRequested:
    """Mount trigger: load the next page regardless of scroll position."""


@dataclass(frozen=True)
class Scrolled:
    position: float
    viewport_height: float
    document_height: float


@dataclass(frozen=True)
class PageLoaded:
    items: tuple[Any, ...]


@dataclass(frozen=True)
class PageFailed:
    error: str


Event = Union[LoadRequested, Scrolled, PageLoaded, PageFailed]


# ── Effects ──────────────────────────────────────────────────

@dataclass(frozen=True)
class FetchPage:
    cursor: int
    page_size: int


def scrolled_to_bottom(position: float, viewport_height: float, document_height: float) -> bool:
    # ceil absorbs fractional scroll offsets reported by high-DPI displays
    return math.ceil(position + viewport_height) >= document_height


def _start_load(state: LoaderState) -> tuple[LoaderState, list[FetchPage]]:
    if state.in_flight or state.exhausted:
        return state, []
    return (
        replace(state, in_flight=True),
        [FetchPage(cursor=state.cursor, page_size=state.page_size)],
    )


def transition(state: LoaderState, event: Event) -> tuple[LoaderState, list[FetchPage]]:
    """Apply one event, returning the new state and the fetches to issue.

    At most one `FetchPage` is ever emitted, and only from IDLE. Completion
    events that arrive with no request in flight are ignored.
    """
    if isinstance(event, LoadRequested):
        return _start_load(state)

    if isinstance(event, Scrolled):
        if not state.initial_load_done or state.phase is not Phase.IDLE:
            return state, []
        if not scrolled_to_bottom(event.position, event.viewport_height, event.document_height):
            return state, []
        return _start_load(state)

    if isinstance(event, PageLoaded):
        if not state.in_flight:
            return state, []
        if not event.items:
            return (
                replace(state, in_flight=False, exhausted=True, initial_load_done=True),
                [],
            )
        return (
            replace(
                state,
                items=state.items + tuple(event.items),
                cursor=state.cursor + len(event.items),
                in_flight=False,
                initial_load_done=True,
            ),
            [],
        )

    if isinstance(event, PageFailed):
        if not state.in_flight:
            return state, []
        return (
            replace(
                state,
                in_flight=False,
                exhausted=True,
                initial_load_done=True,
                error=event.error,
            ),
            [],
        )

    raise TypeError(f"Unknown loader event: {event!r}")
