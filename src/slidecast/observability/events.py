"""Event model for presentation observability.

Defines event types for navigation, content reloads, viewer connections and
shutdown.  Pounce lifecycle events are stored alongside them unchanged.

All events are frozen dataclasses with:
- ``timestamp_ns``: Monotonic nanosecond timestamp
- Descriptive fields for the specific event type

Thread Safety:
    All events are frozen (immutable) and safe to share across threads.

"""

import time
from dataclasses import dataclass
from typing import Literal


# ---------------------------------------------------------------------------
# Presentation events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class SlideMoved:
    """The presenter moved to a slide.

    Attributes:
        index: New 1-indexed position (after clamping).
        total: Number of slides at the time of the move.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    index: int
    total: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class DeckReloaded:
    """Content was reloaded successfully.

    Attributes:
        path: Presentation source path.
        generation: Generation after the reload.
        slide_count: Number of slides in the new content.
        duration_ms: Time spent reading and rendering.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    generation: int
    slide_count: int
    duration_ms: float
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ReloadFailed:
    """A reload was attempted and rejected; the previous content stays live.

    Attributes:
        path: Presentation source path.
        error: Error message shown to the presenter.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    path: str
    error: str
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Viewer events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ViewerConnected:
    """A viewer opened a live stream.

    Attributes:
        viewer_id: Identifier of the viewer connection.
        connected: Viewers connected after this one joined.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    viewer_id: str
    connected: int
    timestamp_ns: int


@dataclass(frozen=True, slots=True)
class ViewerDisconnected:
    """A viewer's live stream ended."""

    viewer_id: str
    connected: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Process events
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ShutdownStarted:
    """Shutdown began.

    Attributes:
        reason: What triggered the shutdown.
        viewers: Viewers connected when shutdown began.
        timestamp_ns: Monotonic nanosecond timestamp.

    """

    reason: Literal["quit", "signal", "server_exit"]
    viewers: int
    timestamp_ns: int


# ---------------------------------------------------------------------------
# Union type
# ---------------------------------------------------------------------------

type StackEvent = (
    SlideMoved
    | DeckReloaded
    | ReloadFailed
    | ViewerConnected
    | ViewerDisconnected
    | ShutdownStarted
)


def now_ns() -> int:
    """Return the current monotonic clock value in nanoseconds."""
    return time.monotonic_ns()
