"""Slidecast application — wires state, server, controller and shutdown.

The two public functions (present, export) are the primary entry points.

Threads while presenting:
    main        startup, signal handling, shutdown coordination
    server      the Pounce event loop; one task per viewer stream
    controller  reads presenter keys and mutates state (daemon)
"""

from __future__ import annotations

import signal
import sys
import threading
import time
from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from slidecast._errors import ShutdownError, SlidecastError
from slidecast.config_loader import load_config
from slidecast.live.handler import StreamHandler
from slidecast.live.signal import ChangeSignal
from slidecast.live.state import StateStore

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

    from chirp import App

    from slidecast.config import SlidecastConfig
    from slidecast.control.commands import Command
    from slidecast.control.controller import Controller
    from slidecast.export import ExportResult
    from slidecast.observability.collector import StackCollector


class Server(Protocol):
    """What the presenter needs from an HTTP server."""

    def run(self) -> None: ...

    def shutdown(self) -> None: ...


def create_app(config: SlidecastConfig, handler: StreamHandler) -> App:
    """Create the Chirp app serving *handler* on slidecast's routes."""
    from chirp import App, AppConfig

    from slidecast.live.router import LiveRouter
    from slidecast.theme import get_template_dir

    app_config = AppConfig(
        template_dir=get_template_dir(),
        debug=False,
        host=config.host,
        port=config.port,
    )
    app = App(config=app_config)

    router = LiveRouter(app, handler, keepalive_interval=config.keepalive_interval)
    router.register(config.asset_dir)
    return app


# Pounce waits up to this long for transports after aborting the ones
# still open when its drain window runs out.
POUNCE_ABORT_WAIT = 2.0


def server_stop_deadline(config: SlidecastConfig) -> float:
    """Seconds the server thread gets to exit after ``shutdown()``.

    Pounce spends up to ``shutdown_timeout`` draining open connections (an
    idle keep-alive socket from a viewer's page load uses all of it), then
    aborts what is left and waits ``POUNCE_ABORT_WAIT``, then spends up to
    ``shutdown_timeout`` again stopping its thread pool.
    """
    return 2 * config.shutdown_timeout + POUNCE_ABORT_WAIT


def _pounce_server(
    config: SlidecastConfig, app: App, collector: StackCollector | None
) -> Server:
    """Build a single-worker Pounce server for *app*."""
    from pounce.config import ServerConfig
    from pounce.server import Server as PounceServer

    server_config = ServerConfig(
        host=config.host,
        port=config.port,
        workers=1,
        shutdown_timeout=config.shutdown_timeout,
        access_log=False,
        log_level="warning",
        app_name="slidecast",
    )
    return PounceServer(server_config, app, lifecycle_collector=collector)


class Presenter:
    """Runs one presentation: server thread, controller thread, shutdown.

    Shutdown may be requested by QUIT, by SIGINT/SIGTERM, or by the end of
    presenter input.  The first request records how many viewers are
    connected, sets the shutdown flag and broadcasts so every viewer stream
    sends its close directive.  The main thread then waits the grace period
    (only when viewers were connected) and stops the server.

    Args:
        config: Resolved configuration.
        store: Loaded state store.
        collector: Optional event collector, also given to the server.
        server_factory: Builds the server for the app; defaults to Pounce.

    """

    def __init__(
        self,
        config: SlidecastConfig,
        store: StateStore,
        *,
        collector: StackCollector | None = None,
        server_factory: Callable[[App], Server] | None = None,
    ) -> None:
        self._config = config
        self._store = store
        self._collector = collector
        self.signal = ChangeSignal()
        self.shutdown_event = threading.Event()
        self.handler = StreamHandler(store, self.signal, self.shutdown_event, collector)
        self.app = create_app(config, self.handler)
        self._server_factory = server_factory or (
            lambda app: _pounce_server(config, app, collector)
        )
        self._lock = threading.Lock()
        self._quit = threading.Event()
        self._dropping = 0

    @property
    def dropping(self) -> int:
        """Viewers that were connected when shutdown began."""
        with self._lock:
            return self._dropping

    def quit(self, reason: str = "quit") -> None:
        """Start shutdown.  Idempotent; safe from any thread."""
        with self._lock:
            if self.shutdown_event.is_set():
                return
            self._dropping = self.handler.connected
            dropping = self._dropping
            self.shutdown_event.set()

        if self._collector is not None:
            self._collector.record_shutdown(reason, viewers=dropping)
        self.signal.broadcast()
        self._quit.set()

    def status_line(self) -> str:
        """Viewer count, URL and the latest reload error, for the console."""
        from slidecast.observability import DeckReloaded, ReloadFailed

        connected = self.handler.connected
        viewers = "1 viewer" if connected == 1 else f"{connected} viewers"
        parts = [viewers, self._config.url]
        if self._collector is not None:
            failed = self._collector.log.latest(ReloadFailed)
            reloaded = self._collector.log.latest(DeckReloaded)
            if failed is not None and (
                reloaded is None or failed.timestamp_ns > reloaded.timestamp_ns
            ):
                parts.append(f"reload error: {failed.error}")
        return "  ".join(parts)

    def serve(self, controller: Controller, commands: Iterable[Command]) -> None:
        """Serve until shutdown, then stop the server.

        Blocks the calling thread.  Signal handlers are only installed when
        called from the main thread.

        Raises:
            ShutdownError: The server did not stop within
                ``server_stop_deadline(config)``.

        """
        server = self._server_factory(self.app)
        server_thread = threading.Thread(
            target=server.run, name="slidecast-server", daemon=True
        )
        controller_thread = threading.Thread(
            target=controller.run, args=(commands,), name="slidecast-controller", daemon=True
        )

        server_failed = False
        previous = self._install_signal_handlers()
        try:
            server_thread.start()
            controller_thread.start()
            while not self._quit.wait(0.25):
                if not server_thread.is_alive():
                    # bind failure or crash; nothing left to serve
                    server_failed = True
                    self.quit("server_exit")
            self._stop(server, server_thread)
            if server_failed:
                msg = "server stopped unexpectedly"
                raise SlidecastError(msg)
        finally:
            self._restore_signal_handlers(previous)

    def _stop(self, server: Server, server_thread: threading.Thread) -> None:
        if self.dropping and self._config.grace_period > 0:
            time.sleep(self._config.grace_period)
        server.shutdown()
        deadline = server_stop_deadline(self._config)
        server_thread.join(timeout=deadline)
        if server_thread.is_alive():
            msg = f"server did not stop within {deadline:g}s"
            raise ShutdownError(msg)

    def _install_signal_handlers(self) -> dict[int, object]:
        if threading.current_thread() is not threading.main_thread():
            return {}

        def _on_signal(signum: int, frame: object) -> None:
            self.quit("signal")

        previous: dict[int, object] = {}
        for sig in (signal.SIGINT, signal.SIGTERM):
            previous[sig] = signal.signal(sig, _on_signal)
        return previous

    def _restore_signal_handlers(self, previous: dict[int, object]) -> None:
        for sig, handler in previous.items():
            signal.signal(sig, handler)  # type: ignore[arg-type]


def _load_store(config: SlidecastConfig, collector: StackCollector | None) -> StateStore:
    """Initial load.  A LoadError here is fatal and propagates."""
    t0 = time.perf_counter()
    store = StateStore.open(config.presentation, config.stylesheet)
    if collector is not None:
        collector.record_reload(
            str(config.presentation),
            generation=store.generation,
            slide_count=store.total,
            duration_ms=(time.perf_counter() - t0) * 1000,
        )
    return store


# ---------------------------------------------------------------------------
# Public entry points
# ---------------------------------------------------------------------------


def present(presentation: str | Path, **kwargs: object) -> None:
    """Serve *presentation* live and drive it from the terminal.

    Args:
        presentation: Path to the markdown source.
        **kwargs: Override SlidecastConfig fields.

    Raises:
        LoadError: The presentation could not be loaded at startup.
        ShutdownError: The server did not stop in time.

    """
    from slidecast.banner import print_banner
    from slidecast.control.console import Console
    from slidecast.control.controller import Controller
    from slidecast.observability import EventLog, StackCollector

    config = load_config(Path(presentation), **kwargs)
    if config.output is not None:
        # an output file set in slidecast.yaml means export, same as the CLI argument
        kwargs.pop("output", None)
        export(config.presentation, config.output, **kwargs)
        return
    t0 = time.perf_counter()

    collector = StackCollector(EventLog())
    store = _load_store(config, collector)
    load_ms = (time.perf_counter() - t0) * 1000

    presenter = Presenter(config, store, collector=collector)

    print_banner(config, store.total, mode="live", load_ms=load_ms)

    with Console(status=presenter.status_line) as console:
        controller = Controller(
            store,
            presenter.signal,
            source=config.presentation,
            stylesheet=config.stylesheet,
            on_quit=presenter.quit,
            redraw=console.draw,
            collector=collector,
        )
        presenter.handler.on_viewers = lambda _count: console.draw(store.snapshot())
        console.draw(store.snapshot())
        presenter.serve(controller, console.commands())

    dropped = presenter.dropping
    if dropped:
        print(
            f"  Closed {dropped} viewer{'s' if dropped != 1 else ''}",
            file=sys.stderr,
        )


def export(presentation: str | Path, output: str | Path, **kwargs: object) -> ExportResult:
    """Write *presentation* as a standalone HTML file at *output*.

    Args:
        presentation: Path to the markdown source.
        output: Path of the HTML file to write.
        **kwargs: Override SlidecastConfig fields.

    Raises:
        LoadError: The presentation could not be loaded.
        ExportError: The output file could not be written.

    """
    from slidecast.banner import print_banner
    from slidecast.export import export_deck

    config = load_config(Path(presentation), output=Path(output), **kwargs)
    t0 = time.perf_counter()
    store = _load_store(config, None)
    load_ms = (time.perf_counter() - t0) * 1000

    print_banner(config, store.total, mode="export", load_ms=load_ms)

    result = export_deck(store, Path(output))
    _print_export_summary(result)
    return result


def _print_export_summary(result: ExportResult) -> None:
    """Print export completion summary to stderr."""
    lines = [
        "",
        "─" * 41,
        f"  Exported {result.slide_count} slide{'s' if result.slide_count != 1 else ''}",
        f"  Output: {result.output_path} ({result.size_bytes} bytes)",
        f"  Done in {result.duration_ms:.0f}ms",
    ]
    print("\n".join(lines), file=sys.stderr)
