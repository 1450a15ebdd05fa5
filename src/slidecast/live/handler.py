"""Stream handler — snapshot pages and live viewer streams.

A viewer first fetches ``/`` and gets the full deck page, which embeds the
generation and slide it was rendered from.  Its ``EventSource`` then
reconnects to ``/`` with those values and receives:

- ``slidecast:slide`` with the new index as data, whenever the presenter moves
- ``slidecast:reload`` once, after which the stream ends and the page refetches
- ``slidecast:close`` once, when the presenter quits

Idle streams get SSE heartbeat comments from chirp's ``EventStream``.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING, Any

from slidecast.live.events import ContentReloaded, EventStream, SlideChanged, ViewerConnection
from slidecast.live.render import render_deck

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Callable

    from slidecast.live.signal import ChangeSignal
    from slidecast.live.state import StateStore
    from slidecast.observability.collector import StackCollector

SLIDE_EVENT = "slidecast:slide"
RELOAD_EVENT = "slidecast:reload"
CLOSE_EVENT = "slidecast:close"


class StreamHandler:
    """Serves snapshots and per-viewer event streams.

    Tracks how many viewers are connected so shutdown can give them time to
    receive the close directive.

    Args:
        store: The authoritative state.
        signal: Change signal broadcast by the controller.
        shutdown: Process-wide shutdown flag.
        collector: Optional event collector for viewer connect/disconnect.
        on_viewers: Called with the new count whenever a viewer connects or
            leaves, on the server's thread.  May be set after construction.

    """

    def __init__(
        self,
        store: StateStore,
        signal: ChangeSignal,
        shutdown: threading.Event,
        collector: StackCollector | None = None,
        on_viewers: Callable[[int], None] | None = None,
    ) -> None:
        self._store = store
        self._signal = signal
        self._shutdown = shutdown
        self._collector = collector
        self.on_viewers = on_viewers
        self._connected = 0
        self._lock = threading.Lock()

    @property
    def connected(self) -> int:
        """Number of viewers with an open stream."""
        with self._lock:
            return self._connected

    def render_snapshot(self) -> str:
        """Render the live deck page under one shared-lock acquisition."""
        with self._store.reading() as snapshot:
            return render_deck(snapshot, live=True)

    async def stream(self, viewer: ViewerConnection) -> AsyncIterator[Any]:
        """Relay *viewer*'s event stream as SSE events.

        Used as the generator for chirp's ``EventStream``; chirp closes it
        when the client disconnects.
        """
        from chirp import SSEEvent

        events = EventStream(self._store, self._signal, viewer, self._shutdown)
        self._enter(viewer)
        try:
            async for event in events:
                match event:
                    case SlideChanged(index=index):
                        yield SSEEvent(data=str(index), event=SLIDE_EVENT)
                    case ContentReloaded(generation=generation):
                        yield SSEEvent(data=str(generation), event=RELOAD_EVENT)
                        return
            if self._shutdown.is_set():
                yield SSEEvent(data="bye", event=CLOSE_EVENT)
        finally:
            try:
                self._leave(viewer)
            finally:
                await events.aclose()

    def _enter(self, viewer: ViewerConnection) -> None:
        with self._lock:
            self._connected += 1
            count = self._connected
        if self._collector is not None:
            self._collector.record_viewer_connected(viewer.viewer_id, connected=count)
        if self.on_viewers is not None:
            self.on_viewers(count)

    def _leave(self, viewer: ViewerConnection) -> None:
        with self._lock:
            self._connected -= 1
            count = self._connected
        if self._collector is not None:
            self._collector.record_viewer_disconnected(viewer.viewer_id, connected=count)
        if self.on_viewers is not None:
            self.on_viewers(count)
