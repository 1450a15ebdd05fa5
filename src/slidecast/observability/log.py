"""Event log — bounded, thread-safe record of what happened.

Holds the most recent presentation events and Pounce connection events in
one ring buffer.  The console reads it back to show the latest reload error.

Thread Safety:
    Every method takes a ``threading.Lock``.  Appends come from the
    controller thread and the server thread; reads come from either.

"""

from __future__ import annotations

import threading
from collections import deque
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pounce.lifecycle import LifecycleEvent

    from slidecast.observability.events import StackEvent

type LoggedEvent = StackEvent | LifecycleEvent


class EventLog:
    """Ring buffer of events, newest last.

    Once ``max_events`` is reached each append discards the oldest event.

    Args:
        max_events: Maximum number of events to retain.

    """

    __slots__ = ("_events", "_lock")

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: deque[LoggedEvent] = deque(maxlen=max_events)
        self._lock = threading.Lock()

    def append(self, event: LoggedEvent) -> None:
        with self._lock:
            self._events.append(event)

    def query[E](self, event_type: type[E], *, limit: int = 100) -> list[E]:
        """Return up to *limit* events of *event_type*, most recent first."""
        with self._lock:
            found: list[E] = []
            for event in reversed(self._events):
                if len(found) >= limit:
                    break
                if isinstance(event, event_type):
                    found.append(event)
            return found

    def latest[E](self, event_type: type[E]) -> E | None:
        """Return the most recent event of *event_type*, or None."""
        found = self.query(event_type, limit=1)
        return found[0] if found else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
