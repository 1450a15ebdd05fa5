"""Change signal — payload-less wake-up for every viewer watcher.

The controller thread broadcasts after each successful state mutation;
viewer watchers run as asyncio tasks on the server's event loop.  The signal
is a version counter plus the set of futures currently waiting on it:

- ``version`` is read by a watcher *before* it reads state.
- ``wait(since)`` returns at once if a broadcast happened after ``since``,
  so a mutation that lands between the read and the wait is never missed.
- ``broadcast()`` bumps the version and resolves every waiter on its own
  loop with ``call_soon_threadsafe``.

Nothing travels with the wake; watchers re-read the state store.

Thread Safety:
    The version and waiter set are protected by a ``threading.Lock``.
    ``broadcast()`` may be called from any thread.

"""

from __future__ import annotations

import asyncio
import threading


class ChangeSignal:
    """Broadcast condition shared by the controller and all watchers."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._version = 0
        self._waiters: set[tuple[asyncio.AbstractEventLoop, asyncio.Future[None]]] = set()

    @property
    def version(self) -> int:
        """Number of broadcasts so far."""
        with self._lock:
            return self._version

    def broadcast(self) -> int:
        """Wake every blocked watcher.

        Returns:
            Number of watchers woken.

        """
        with self._lock:
            self._version += 1
            waiters = self._waiters
            self._waiters = set()

        for loop, future in waiters:
            try:
                loop.call_soon_threadsafe(_resolve, future)
            except RuntimeError:
                # Loop already closed; its watchers are gone with it.
                continue
        return len(waiters)

    async def wait(self, since: int) -> int:
        """Block until a broadcast newer than *since*.

        Returns:
            The version observed on wake.

        """
        loop = asyncio.get_running_loop()
        with self._lock:
            if self._version != since:
                return self._version
            future: asyncio.Future[None] = loop.create_future()
            entry = (loop, future)
            self._waiters.add(entry)

        try:
            await future
        finally:
            with self._lock:
                self._waiters.discard(entry)
        return self.version


def _resolve(future: asyncio.Future[None]) -> None:
    if not future.done():
        future.set_result(None)
