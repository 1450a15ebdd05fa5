"""Per-viewer event stream — diffs what a viewer last saw against ground truth.

Each connected viewer gets one ``EventStream``.  Its producer task loops:

1. capture the change signal's version
2. stop if the process is shutting down
3. read ``(generation, current)`` from the state store
4. a different instance or generation emits ``ContentReloaded`` and ends
   the stream
5. a different index emits ``SlideChanged``
6. wait for the next broadcast after the captured version

The first comparison runs before the first wait, so a move that happened
between the viewer's page load and its stream connection is delivered
immediately.

Events pass through a ``LatestSlot`` of capacity one.  A slow viewer that
misses several moves sees only the latest position, never an older index
after a newer one.

Thread Safety:
    One ``EventStream`` belongs to one viewer and one event loop.  The state
    store and change signal it reads are thread-safe.

"""

from __future__ import annotations

import asyncio
import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    import threading

    from slidecast._types import Generation, SlideIndex
    from slidecast.live.signal import ChangeSignal
    from slidecast.live.state import StateStore


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SlideChanged:
    """The presenter moved to *index*."""

    index: SlideIndex


@dataclass(frozen=True, slots=True)
class ContentReloaded:
    """The content was reloaded; the viewer must refetch the page."""

    generation: Generation


type ViewerEvent = SlideChanged | ContentReloaded


@dataclass(slots=True)
class ViewerConnection:
    """What one viewer has been told so far.

    Attributes:
        observed_generation: Content generation the viewer's page was
            rendered from.
        observed_index: Last slide index the viewer displays.
        observed_instance: Store instance token the page was rendered by;
            None when the viewer did not send one.
        viewer_id: Unique identifier for log and debugging output.

    """

    observed_generation: Generation
    observed_index: SlideIndex
    observed_instance: str | None = None
    viewer_id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])


# ---------------------------------------------------------------------------
# Delivery buffer
# ---------------------------------------------------------------------------


class LatestSlot:
    """Single-item buffer where a new value replaces an unread one."""

    __slots__ = ("_closed", "_item", "_ready")

    def __init__(self) -> None:
        self._item: ViewerEvent | None = None
        self._closed = False
        self._ready = asyncio.Event()

    def put(self, item: ViewerEvent) -> None:
        if self._closed:
            return
        self._item = item
        self._ready.set()

    def close(self) -> None:
        """Mark the slot finished; an unread item is still delivered."""
        self._closed = True
        self._ready.set()

    @property
    def closed(self) -> bool:
        return self._closed

    async def get(self) -> ViewerEvent | None:
        """Return the latest item, or None once closed and drained."""
        while True:
            if self._item is not None:
                item, self._item = self._item, None
                if not self._closed:
                    self._ready.clear()
                return item
            if self._closed:
                return None
            await self._ready.wait()


# ---------------------------------------------------------------------------
# Stream
# ---------------------------------------------------------------------------


class EventStream:
    """Lazy, non-restartable async iterator of ``ViewerEvent``.

    The producer task starts on first iteration.  Iteration ends after a
    ``ContentReloaded``, when *shutdown* is set, or after ``aclose()``.

    Args:
        store: State store to read ground truth from.
        signal: Change signal that wakes the producer.
        viewer: The viewer's observed state; updated as events are emitted.
        shutdown: Process-wide shutdown flag.

    """

    def __init__(
        self,
        store: StateStore,
        signal: ChangeSignal,
        viewer: ViewerConnection,
        shutdown: threading.Event,
    ) -> None:
        self._store = store
        self._signal = signal
        self._viewer = viewer
        self._shutdown = shutdown
        self._slot = LatestSlot()
        self._task: asyncio.Task[None] | None = None

    @property
    def viewer(self) -> ViewerConnection:
        return self._viewer

    def __aiter__(self) -> EventStream:
        return self

    async def __anext__(self) -> ViewerEvent:
        if self._task is None and not self._slot.closed:
            self._task = asyncio.get_running_loop().create_task(
                self._produce(), name=f"slidecast-viewer-{self._viewer.viewer_id}"
            )
        item = await self._slot.get()
        if item is None:
            if self._task is not None and self._task.done() and not self._task.cancelled():
                exc = self._task.exception()
                if exc is not None:
                    raise exc
            raise StopAsyncIteration
        return item

    async def aclose(self) -> None:
        """Stop the producer and end iteration."""
        self._slot.close()
        task = self._task
        if task is None or task.done():
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            # Re-raise if we ourselves are being cancelled, not just the producer.
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise

    async def _produce(self) -> None:
        viewer = self._viewer
        instance = self._store.instance
        try:
            while True:
                version = self._signal.version
                if self._shutdown.is_set():
                    return
                generation, current = self._store.position()
                # a page from another process, or any other generation, is stale
                if (
                    instance != viewer.observed_instance
                    or generation != viewer.observed_generation
                ):
                    viewer.observed_instance = instance
                    viewer.observed_generation = generation
                    self._slot.put(ContentReloaded(generation))
                    return
                if current != viewer.observed_index:
                    viewer.observed_index = current
                    self._slot.put(SlideChanged(current))
                await self._signal.wait(version)
        finally:
            self._slot.close()
