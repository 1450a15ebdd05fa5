"""Observability — one event log for the server and the presentation.

Aggregates events from:
- **Pounce**: Connection lifecycle (open, request, response, disconnect, close)
- **Controller**: Navigation and content reloads
- **Stream handler**: Viewer connects and disconnects

All events are frozen dataclasses with nanosecond timestamps, safe for
concurrent production from multiple threads.

Quick Start:
    >>> from slidecast.observability import StackCollector, EventLog
    >>> log = EventLog()
    >>> collector = StackCollector(log)
    >>> # Pass collector to Pounce as lifecycle_collector
    >>> collector.record_move(2, total=5)

"""

from slidecast.observability.collector import StackCollector
from slidecast.observability.events import (
    DeckReloaded,
    ReloadFailed,
    ShutdownStarted,
    SlideMoved,
    StackEvent,
    ViewerConnected,
    ViewerDisconnected,
    now_ns,
)
from slidecast.observability.log import EventLog

__all__ = [
    "DeckReloaded",
    "EventLog",
    "ReloadFailed",
    "ShutdownStarted",
    "SlideMoved",
    "StackCollector",
    "StackEvent",
    "ViewerConnected",
    "ViewerDisconnected",
    "now_ns",
]
