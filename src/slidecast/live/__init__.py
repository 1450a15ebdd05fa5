"""Live presentation core — shared state, change signal, and viewer streams.

Flow::

    Controller ── goto_slide / reload ──► StateStore
         │
         └── broadcast ──► ChangeSignal ──► EventStream (one per viewer)
                                                 │
                                                 ▼
                                   StreamHandler ──► SSE to browser

"""

from slidecast.live.events import (
    ContentReloaded,
    EventStream,
    LatestSlot,
    SlideChanged,
    ViewerConnection,
    ViewerEvent,
)
from slidecast.live.handler import StreamHandler
from slidecast.live.signal import ChangeSignal
from slidecast.live.state import ReadWriteLock, Snapshot, StateStore

__all__ = [
    "ChangeSignal",
    "ContentReloaded",
    "EventStream",
    "LatestSlot",
    "ReadWriteLock",
    "SlideChanged",
    "Snapshot",
    "StateStore",
    "StreamHandler",
    "ViewerConnection",
    "ViewerEvent",
]
