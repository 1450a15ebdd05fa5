"""Tests for slidecast.app.Presenter — serving and graceful shutdown."""

from __future__ import annotations

import signal
import threading
import time
from pathlib import Path

import pytest

from slidecast._errors import ShutdownError, SlidecastError
from slidecast.app import POUNCE_ABORT_WAIT, Presenter, server_stop_deadline
from slidecast.config import SlidecastConfig
from slidecast.control.commands import Command
from slidecast.control.controller import Controller
from slidecast.live.state import StateStore
from slidecast.observability import ShutdownStarted, StackCollector


class FakeServer:
    """Blocks in run() until shutdown(), like a real server.

    ``stop_delay`` stands in for the time a server spends draining and then
    aborting open connections before run() returns.
    """

    def __init__(
        self, *, stops: bool = True, fails: bool = False, stop_delay: float = 0.0
    ) -> None:
        self._stops = stops
        self._fails = fails
        self._stop_delay = stop_delay
        self.release = threading.Event()
        self.shutdown_calls = 0
        self.shutdown_at: float | None = None

    def run(self) -> None:
        if self._fails:
            return
        self.release.wait()

    def shutdown(self) -> None:
        self.shutdown_calls += 1
        self.shutdown_at = time.monotonic()
        if not self._stops:
            return
        if self._stop_delay:
            threading.Timer(self._stop_delay, self.release.set).start()
        else:
            self.release.set()


def make_presenter(
    store: StateStore,
    deck_file: Path,
    server: FakeServer,
    *,
    grace_period: float = 0.3,
    shutdown_timeout: float = 0.5,
) -> tuple[Presenter, StackCollector]:
    config = SlidecastConfig(
        presentation=deck_file,
        grace_period=grace_period,
        shutdown_timeout=shutdown_timeout,
    )
    collector = StackCollector()
    presenter = Presenter(config, store, collector=collector, server_factory=lambda app: server)
    return presenter, collector


def make_controller(presenter: Presenter, store: StateStore, deck_file: Path) -> Controller:
    return Controller(
        store,
        presenter.signal,
        source=deck_file,
        stylesheet="builtin:none",
        on_quit=presenter.quit,
    )


class TestQuit:
    """Presenter.quit() starts shutdown exactly once."""

    def test_sets_flag_and_broadcasts(self, store: StateStore, deck_file: Path) -> None:
        presenter, collector = make_presenter(store, deck_file, FakeServer())
        presenter.quit()
        assert presenter.shutdown_event.is_set()
        assert presenter.signal.version == 1
        assert collector.log.latest(ShutdownStarted).reason == "quit"

    def test_idempotent(self, store: StateStore, deck_file: Path) -> None:
        presenter, collector = make_presenter(store, deck_file, FakeServer())
        presenter.quit()
        presenter.quit("signal")
        assert presenter.signal.version == 1
        assert len(collector.log.query(event_type=ShutdownStarted)) == 1

    def test_records_connected_viewers(self, store: StateStore, deck_file: Path) -> None:
        presenter, collector = make_presenter(store, deck_file, FakeServer())
        presenter.handler._connected = 2
        presenter.quit()
        assert presenter.dropping == 2
        assert collector.log.latest(ShutdownStarted).viewers == 2


class TestStatusLine:
    """Presenter.status_line() for the console."""

    def test_viewers_and_url(self, store: StateStore, deck_file: Path) -> None:
        presenter, _ = make_presenter(store, deck_file, FakeServer())
        assert presenter.status_line() == "0 viewers  http://localhost:8080/"
        presenter.handler._connected = 1
        assert presenter.status_line().startswith("1 viewer  ")

    def test_shows_latest_reload_error(self, store: StateStore, deck_file: Path) -> None:
        presenter, collector = make_presenter(store, deck_file, FakeServer())
        collector.record_reload_failed(str(deck_file), "no slides")
        assert presenter.status_line().endswith("reload error: no slides")

        collector.record_reload(str(deck_file), generation=2, slide_count=4)
        assert "reload error" not in presenter.status_line()


class TestServe:
    """Presenter.serve() lifecycle."""

    def test_no_viewers_stops_immediately(self, store: StateStore, deck_file: Path) -> None:
        server = FakeServer()
        presenter, _ = make_presenter(store, deck_file, server, grace_period=2.0)
        controller = make_controller(presenter, store, deck_file)

        start = time.monotonic()
        presenter.serve(controller, [Command.NEXT, Command.QUIT])

        assert time.monotonic() - start < 2.0
        assert server.shutdown_calls == 1
        assert store.current == 2
        assert presenter.dropping == 0

    def test_viewers_get_grace_period(self, store: StateStore, deck_file: Path) -> None:
        server = FakeServer()
        presenter, _ = make_presenter(store, deck_file, server, grace_period=0.3)
        controller = make_controller(presenter, store, deck_file)
        presenter.handler._connected = 1

        quit_at = 0.0

        def quit_later() -> None:
            nonlocal quit_at
            quit_at = time.monotonic()
            presenter.quit()

        timer = threading.Timer(0.05, quit_later)
        timer.start()
        presenter.serve(controller, [])
        timer.join()

        assert presenter.dropping == 1
        assert server.shutdown_at is not None
        assert server.shutdown_at - quit_at >= 0.3

    def test_server_draining_open_connections_is_not_fatal(
        self, store: StateStore, deck_file: Path
    ) -> None:
        """A server that uses its whole drain window and then aborts still stops in time."""
        drain = 0.3
        server = FakeServer(stop_delay=drain + 0.2)
        presenter, _ = make_presenter(store, deck_file, server, shutdown_timeout=drain)
        controller = make_controller(presenter, store, deck_file)
        presenter.handler._connected = 1

        presenter.serve(controller, [Command.QUIT])

        assert server.release.is_set()
        assert presenter.dropping == 1

    def test_stop_deadline_covers_drain_and_abort(self, deck_file: Path) -> None:
        config = SlidecastConfig(presentation=deck_file, shutdown_timeout=1.0)
        assert server_stop_deadline(config) == 2.0 + POUNCE_ABORT_WAIT
        assert server_stop_deadline(config) > config.shutdown_timeout + POUNCE_ABORT_WAIT

    def test_server_that_will_not_stop(self, store: StateStore, deck_file: Path) -> None:
        server = FakeServer(stops=False)
        presenter, _ = make_presenter(store, deck_file, server, shutdown_timeout=0.1)
        controller = make_controller(presenter, store, deck_file)
        try:
            with pytest.raises(ShutdownError, match="did not stop"):
                presenter.serve(controller, [Command.QUIT])
        finally:
            server.release.set()

    def test_server_exit_shuts_down(self, store: StateStore, deck_file: Path) -> None:
        server = FakeServer(fails=True)
        presenter, collector = make_presenter(store, deck_file, server)
        controller = make_controller(presenter, store, deck_file)

        with pytest.raises(SlidecastError, match="server stopped unexpectedly"):
            presenter.serve(controller, [])

        assert presenter.shutdown_event.is_set()
        assert collector.log.latest(ShutdownStarted).reason == "server_exit"

    def test_signal_requests_shutdown(self, store: StateStore, deck_file: Path) -> None:
        server = FakeServer()
        presenter, collector = make_presenter(store, deck_file, server)
        controller = make_controller(presenter, store, deck_file)
        before = signal.getsignal(signal.SIGTERM)

        timer = threading.Timer(0.05, signal.raise_signal, args=(signal.SIGTERM,))
        timer.start()
        presenter.serve(controller, [])
        timer.join()

        assert collector.log.latest(ShutdownStarted).reason == "signal"
        assert signal.getsignal(signal.SIGTERM) is before

    def test_off_main_thread_skips_signal_handlers(
        self, store: StateStore, deck_file: Path
    ) -> None:
        server = FakeServer()
        presenter, _ = make_presenter(store, deck_file, server)
        controller = make_controller(presenter, store, deck_file)
        errors: list[BaseException] = []

        def run() -> None:
            try:
                presenter.serve(controller, [Command.QUIT])
            except BaseException as exc:  # noqa: BLE001
                errors.append(exc)

        t = threading.Thread(target=run)
        t.start()
        t.join(timeout=5)
        assert not t.is_alive()
        assert errors == []
        assert server.shutdown_calls == 1
