"""Live router — mounts the stream handler on a Chirp app.

Routes:
    ``/``             deck page, or the live stream for ``Accept: text/event-stream``
    ``/health``       200 with an empty body
    ``/favicon.ico``  307 to ``/assets/favicon.ico``
    ``/assets/...``   static files from the asset directory

Chirp answers every other path with 404.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from slidecast.live.events import ViewerConnection

if TYPE_CHECKING:
    from pathlib import Path

    from chirp import App, Request

    from slidecast.live.handler import StreamHandler

ROOT_PATH = "/"
HEALTH_PATH = "/health"
FAVICON_PATH = "/favicon.ico"
ASSETS_PREFIX = "/assets"

_EVENT_STREAM = "text/event-stream"


def wants_stream(request: Request) -> bool:
    """True when the client asked for the event stream rather than the page."""
    return _EVENT_STREAM in (request.headers.get("accept") or "")


def viewer_from_request(request: Request) -> ViewerConnection:
    """Build a viewer's observed state from the stream request query.

    A missing or malformed ``generation`` is treated as 0, which matches no
    loaded content, and a missing ``instance`` matches no process, so in
    either case the viewer is told to reload.
    """
    generation = request.query.get_int("generation", 0) or 0
    slide = request.query.get_int("slide", 0) or 0
    instance = request.query.get("instance") or None
    return ViewerConnection(
        observed_generation=generation,
        observed_index=slide,
        observed_instance=instance,
    )


class LiveRouter:
    """Registers slidecast's routes on a Chirp app.

    Args:
        app: Chirp App to register routes on (must not yet be frozen).
        handler: Stream handler serving snapshots and streams.
        keepalive_interval: Seconds of stream inactivity before chirp sends
            a heartbeat comment.

    """

    def __init__(self, app: App, handler: StreamHandler, *, keepalive_interval: float = 30.0) -> None:
        self._app = app
        self._handler = handler
        self._keepalive_interval = keepalive_interval

    def register(self, asset_dir: Path | None = None) -> None:
        """Register every route, plus static assets when *asset_dir* exists."""
        self.register_root()
        self.register_health()
        self.register_favicon()
        if asset_dir is not None and asset_dir.is_dir():
            self.register_assets(asset_dir)

    def register_root(self) -> None:
        """Register ``/`` for both the snapshot page and the live stream."""
        from chirp import EventStream, Response

        handler = self._handler
        keepalive = self._keepalive_interval

        async def root_handler(request: Request) -> Any:
            if wants_stream(request):
                viewer = viewer_from_request(request)
                return EventStream(handler.stream(viewer), heartbeat_interval=keepalive)

            page = handler.render_snapshot()
            return Response(body=page).with_header("Cache-Control", "no-store")

        root_handler.__name__ = "slidecast_root"
        root_handler.__qualname__ = "LiveRouter.slidecast_root"

        self._app.route(ROOT_PATH, name="slidecast:root")(root_handler)

    def register_health(self) -> None:
        from chirp import Response

        async def health_handler(request: Request) -> Any:
            return Response(body="", content_type="text/plain; charset=utf-8")

        health_handler.__name__ = "slidecast_health"
        health_handler.__qualname__ = "LiveRouter.slidecast_health"

        self._app.route(HEALTH_PATH, name="slidecast:health")(health_handler)

    def register_favicon(self) -> None:
        from chirp import Redirect

        async def favicon_handler(request: Request) -> Any:
            return Redirect(f"{ASSETS_PREFIX}/favicon.ico", status=307)

        favicon_handler.__name__ = "slidecast_favicon"
        favicon_handler.__qualname__ = "LiveRouter.slidecast_favicon"

        self._app.route(FAVICON_PATH, name="slidecast:favicon")(favicon_handler)

    def register_assets(self, asset_dir: Path) -> None:
        """Serve *asset_dir* under ``/assets``."""
        from chirp.middleware import StaticFiles

        self._app.add_middleware(StaticFiles(directory=asset_dir, prefix=ASSETS_PREFIX))
