"""Presentation content — markdown slides and stylesheets.

Both collaborators are pure loaders: they read from disk, render, and raise
``LoadError`` on failure.  They never touch presentation state.
"""

from slidecast.content.slides import Deck, read_source, render_slides
from slidecast.content.styles import load_stylesheet

__all__ = [
    "Deck",
    "load_stylesheet",
    "read_source",
    "render_slides",
]
