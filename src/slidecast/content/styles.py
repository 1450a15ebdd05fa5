"""Stylesheet loader.

A stylesheet reference is either ``builtin:<name>`` (a CSS file bundled with
the theme) or a path to a CSS file on disk.
"""

from pathlib import Path

from slidecast._errors import LoadError
from slidecast.theme import builtin_stylesheet_path, builtin_stylesheets

BUILTIN_PREFIX = "builtin:"


def load_stylesheet(ref: str) -> str:
    """Return the CSS text referenced by *ref*.

    Raises:
        LoadError: The builtin name is unknown or the file cannot be read.

    """
    if ref.startswith(BUILTIN_PREFIX):
        name = ref.removeprefix(BUILTIN_PREFIX)
        path = builtin_stylesheet_path(name)
        if path is None:
            available = ", ".join(builtin_stylesheets())
            msg = f"unknown builtin stylesheet {name!r} (available: {available})"
            raise LoadError(msg)
    else:
        path = Path(ref)

    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"cannot read stylesheet {ref}: {exc}"
        raise LoadError(msg) from exc
