"""Controller — the single writer of presentation state.

Consumes one ``Command`` at a time and turns it into state-store mutations
followed by a change-signal broadcast.  It never talks to viewers directly;
viewers notice changes through their own event streams.

| Command     | Effect                                                  |
|-------------|---------------------------------------------------------|
| NEXT/PREV   | ``goto_slide(current ± 1)``, broadcast, redraw          |
| FIRST/LAST  | ``goto_slide(1)`` / ``goto_slide(total)``, broadcast, redraw |
| RELOAD      | ``reload()``; on failure report and keep the old state  |
| QUIT        | hand over to shutdown and stop                          |
| REDRAW      | redraw the terminal only                                |
| UNKNOWN     | nothing                                                 |
"""

from __future__ import annotations

import sys
import time
from typing import TYPE_CHECKING

from slidecast._errors import LoadError
from slidecast.control.commands import Command

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable
    from pathlib import Path

    from slidecast._types import StyleRef
    from slidecast.live.signal import ChangeSignal
    from slidecast.live.state import Snapshot, StateStore
    from slidecast.observability.collector import StackCollector


class Controller:
    """Translates commands into state changes.

    Args:
        store: State store to mutate.
        signal: Change signal to broadcast after each mutation.
        source: Presentation path, re-read on RELOAD.
        stylesheet: Stylesheet reference, re-read on RELOAD.
        on_quit: Called once for QUIT; starts process shutdown.
        redraw: Called with a fresh snapshot whenever the local view changes.
        collector: Optional event collector.

    """

    def __init__(
        self,
        store: StateStore,
        signal: ChangeSignal,
        *,
        source: Path,
        stylesheet: StyleRef,
        on_quit: Callable[[], None],
        redraw: Callable[[Snapshot], None] | None = None,
        collector: StackCollector | None = None,
    ) -> None:
        self._store = store
        self._signal = signal
        self._source = source
        self._stylesheet = stylesheet
        self._on_quit = on_quit
        self._redraw = redraw
        self._collector = collector
        self._stopped = False

    @property
    def stopped(self) -> bool:
        """True once QUIT has been handled."""
        return self._stopped

    def run(self, commands: Iterable[Command]) -> None:
        """Handle *commands* in order until QUIT or the input ends."""
        for command in commands:
            if not self.handle(command):
                break

    def handle(self, command: Command) -> bool:
        """Apply one command.

        Returns:
            False once the controller has stopped, True otherwise.

        """
        if self._stopped:
            return False

        match command:
            case Command.NEXT:
                self._move(self._store.current + 1)
            case Command.PREV:
                self._move(self._store.current - 1)
            case Command.FIRST:
                self._move(1)
            case Command.LAST:
                self._move(self._store.total)
            case Command.RELOAD:
                self._reload()
            case Command.QUIT:
                self._stopped = True
                self._on_quit()
                return False
            case Command.REDRAW:
                self._draw()
            case _:
                pass
        return True

    def _move(self, target: int) -> None:
        index = self._store.goto_slide(target)
        self._signal.broadcast()
        if self._collector is not None:
            self._collector.record_move(index, self._store.total)
        self._draw()

    def _reload(self) -> None:
        t0 = time.perf_counter()
        try:
            generation = self._store.reload(self._source, self._stylesheet)
        except LoadError as exc:
            print(f"  Reload error: {exc}", file=sys.stderr)
            if self._collector is not None:
                self._collector.record_reload_failed(str(self._source), str(exc))
            self._draw()
            return

        self._signal.broadcast()
        if self._collector is not None:
            self._collector.record_reload(
                str(self._source),
                generation=generation,
                slide_count=self._store.total,
                duration_ms=(time.perf_counter() - t0) * 1000,
            )
        self._draw()

    def _draw(self) -> None:
        if self._redraw is not None:
            self._redraw(self._store.snapshot())
