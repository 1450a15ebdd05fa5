"""Tests for slidecast.live.signal — broadcast wake-ups across threads."""

from __future__ import annotations

import asyncio
import threading

import pytest

from slidecast.live.signal import ChangeSignal
from tests.conftest import settle, waiting


class TestChangeSignal:
    """ChangeSignal version counting and waking."""

    def test_broadcast_bumps_version(self) -> None:
        signal = ChangeSignal()
        assert signal.version == 0
        signal.broadcast()
        signal.broadcast()
        assert signal.version == 2

    def test_broadcast_without_waiters(self) -> None:
        assert ChangeSignal().broadcast() == 0

    @pytest.mark.asyncio
    async def test_wait_returns_immediately_when_stale(self) -> None:
        """A broadcast between reading the version and waiting is not lost."""
        signal = ChangeSignal()
        seen = signal.version
        signal.broadcast()
        assert await asyncio.wait_for(signal.wait(seen), timeout=1) == 1

    @pytest.mark.asyncio
    async def test_wakes_all_waiters(self) -> None:
        signal = ChangeSignal()
        waiters = [asyncio.create_task(signal.wait(0)) for _ in range(3)]
        await settle()
        assert waiting(signal) == 3

        assert signal.broadcast() == 3
        results = await asyncio.wait_for(asyncio.gather(*waiters), timeout=1)
        assert results == [1, 1, 1]
        assert waiting(signal) == 0

    @pytest.mark.asyncio
    async def test_wait_blocks_until_broadcast(self) -> None:
        signal = ChangeSignal()
        with pytest.raises(TimeoutError):
            await asyncio.wait_for(signal.wait(0), timeout=0.05)
        # cancelled waiters are removed
        assert waiting(signal) == 0

    @pytest.mark.asyncio
    async def test_broadcast_from_another_thread(self) -> None:
        signal = ChangeSignal()
        waiter = asyncio.create_task(signal.wait(0))
        await settle()

        t = threading.Thread(target=signal.broadcast)
        t.start()
        t.join()

        assert await asyncio.wait_for(waiter, timeout=1) == 1
