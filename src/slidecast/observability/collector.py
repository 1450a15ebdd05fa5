"""Stack collector — one sink for server and presentation events.

Implements Pounce's ``LifecycleCollector`` protocol so it can be passed
directly to the server.  Also provides methods for recording navigation,
reload, viewer and shutdown events.

Thread Safety:
    The collector delegates to ``EventLog`` which is internally locked.
    Safe for concurrent use from the controller, server and main threads.

"""

from __future__ import annotations

from typing import TYPE_CHECKING

from slidecast.observability.events import (
    DeckReloaded,
    ReloadFailed,
    ShutdownStarted,
    SlideMoved,
    ViewerConnected,
    ViewerDisconnected,
    now_ns,
)
from slidecast.observability.log import EventLog

if TYPE_CHECKING:
    from pounce.lifecycle import LifecycleEvent


class StackCollector:
    """Unified event collector.

    Args:
        log: The EventLog to store events in.

    """

    __slots__ = ("_log",)

    def __init__(self, log: EventLog | None = None) -> None:
        self._log = log if log is not None else EventLog()

    @property
    def log(self) -> EventLog:
        """The underlying event log."""
        return self._log

    # ----- Pounce LifecycleCollector protocol -----

    def record(self, event: LifecycleEvent) -> None:
        """Record a Pounce lifecycle event.

        Implements the ``LifecycleCollector.record()`` protocol.
        Pounce events are stored directly since they are frozen dataclasses.

        """
        self._log.append(event)

    # ----- Presentation events -----

    def record_move(self, index: int, total: int) -> None:
        self._log.append(SlideMoved(index=index, total=total, timestamp_ns=now_ns()))

    def record_reload(
        self,
        path: str,
        *,
        generation: int,
        slide_count: int,
        duration_ms: float = 0.0,
    ) -> None:
        """Record a successful content reload."""
        self._log.append(
            DeckReloaded(
                path=path,
                generation=generation,
                slide_count=slide_count,
                duration_ms=duration_ms,
                timestamp_ns=now_ns(),
            )
        )

    def record_reload_failed(self, path: str, error: str) -> None:
        """Record a rejected reload."""
        self._log.append(ReloadFailed(path=path, error=error, timestamp_ns=now_ns()))

    # ----- Viewer events -----

    def record_viewer_connected(self, viewer_id: str, *, connected: int) -> None:
        self._log.append(
            ViewerConnected(viewer_id=viewer_id, connected=connected, timestamp_ns=now_ns())
        )

    def record_viewer_disconnected(self, viewer_id: str, *, connected: int) -> None:
        self._log.append(
            ViewerDisconnected(viewer_id=viewer_id, connected=connected, timestamp_ns=now_ns())
        )

    # ----- Shutdown -----

    def record_shutdown(self, reason: str, *, viewers: int) -> None:
        """Record the start of shutdown."""
        self._log.append(
            ShutdownStarted(
                reason=reason,  # type: ignore[arg-type]
                viewers=viewers,
                timestamp_ns=now_ns(),
            )
        )
