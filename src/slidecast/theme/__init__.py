"""Bundled theme — the deck page template and builtin stylesheets.

Thread Safety:
    All returned values are read-only paths.  Safe for free-threading.

"""

from __future__ import annotations

from pathlib import Path


def _bundled_theme_path() -> Path:
    """Return the absolute path to the bundled theme."""
    return Path(__file__).parent


def get_template_dir() -> Path:
    """Return the directory holding the deck page template."""
    return _bundled_theme_path() / "templates"


def builtin_stylesheet_path(name: str) -> Path | None:
    """Return the path of builtin stylesheet *name*, or None if unknown.

    Names are plain file stems; anything containing a path separator is
    rejected so ``builtin:`` references cannot escape the theme directory.
    """
    if not name or "/" in name or "\\" in name or name.startswith("."):
        return None
    path = _bundled_theme_path() / "styles" / f"{name}.css"
    return path if path.is_file() else None


def builtin_stylesheets() -> list[str]:
    """Names of all bundled stylesheets, sorted."""
    return sorted(p.stem for p in (_bundled_theme_path() / "styles").glob("*.css"))
