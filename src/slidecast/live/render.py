"""Deck page rendering through Kida.

The page template lives in the bundled theme.  One Environment is built
lazily and shared; Kida templates are immutable after compilation and safe
to render concurrently.
"""

from __future__ import annotations

import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from kida import Environment

    from slidecast.live.state import Snapshot

DECK_TEMPLATE = "deck.html"

_env: Environment | None = None
_env_lock = threading.Lock()


def get_environment() -> Environment:
    """Return the shared Kida environment for the bundled theme."""
    global _env
    with _env_lock:
        if _env is None:
            from kida import Environment, FileSystemLoader

            from slidecast.theme import get_template_dir

            _env = Environment(loader=FileSystemLoader(str(get_template_dir())))
        return _env


def render_deck(snapshot: Snapshot, *, live: bool) -> str:
    """Render the full deck page for *snapshot*.

    Args:
        snapshot: State to render; the page embeds its generation and
            current index so the viewer can resume the stream from there.
        live: Include the event-stream client.  Exported decks pass False
            and navigate with the keyboard only.

    """
    template = get_environment().get_template(DECK_TEMPLATE)
    return template.render(
        title=snapshot.title,
        stylesheet=snapshot.stylesheet,
        slides=list(snapshot.slides),
        current=snapshot.current,
        total=snapshot.total,
        generation=snapshot.generation,
        instance=snapshot.instance,
        live=live,
    )
