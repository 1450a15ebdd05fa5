"""Startup banner — mode-aware status output.

Prints a startup banner with timing, the viewer URL and the key bindings.
Detects ``NO_COLOR`` / ``TERM`` for safe fallback.
"""

from __future__ import annotations

import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slidecast.config import SlidecastConfig


# ---------------------------------------------------------------------------
# ANSI helpers, respecting NO_COLOR (https://no-color.org)
# ---------------------------------------------------------------------------

def _supports_color() -> bool:
    """Return True if the terminal supports ANSI colors."""
    if os.environ.get("NO_COLOR"):
        return False
    if os.environ.get("TERM") == "dumb":
        return False
    return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


_COLOR = _supports_color()

_RESET = "\033[0m" if _COLOR else ""
_BOLD = "\033[1m" if _COLOR else ""
_DIM = "\033[2m" if _COLOR else ""
_CYAN = "\033[36m" if _COLOR else ""
_GREEN = "\033[32m" if _COLOR else ""
_YELLOW = "\033[33m" if _COLOR else ""


_MODE_STYLES: dict[str, tuple[str, str]] = {
    "live": (_GREEN, "live"),
    "export": (_YELLOW, "export"),
}


def _mode_badge(mode: str) -> str:
    """Return a styled [mode] badge."""
    color, label = _MODE_STYLES.get(mode, (_DIM, mode))
    return f"{color}[{label}]{_RESET}"


def _clickable_url(url: str) -> str:
    """Wrap *url* in an OSC 8 hyperlink escape if the terminal supports it."""
    if not _COLOR:
        return url
    return f"\033]8;;{url}\033\\{_BOLD}{_CYAN}{url}{_RESET}\033]8;;\033\\"


KEY_HELP = "j/space next  k prev  g first  G last  r reload  ^L redraw  q quit"


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def print_banner(
    config: SlidecastConfig,
    slide_count: int,
    mode: str,
    *,
    load_ms: float = 0.0,
    warnings: list[str] | None = None,
) -> None:
    """Print the slidecast startup banner to stderr.

    Args:
        config: Resolved SlidecastConfig.
        slide_count: Number of slides loaded.
        mode: ``"live"`` or ``"export"``.
        load_ms: Time spent loading the presentation in milliseconds.
        warnings: Optional list of warning messages to display.

    """
    from slidecast import __version__

    header = f"  {_BOLD}slidecast{_RESET} {_DIM}v{__version__}{_RESET}  {_mode_badge(mode)}"

    lines: list[str] = [
        "",
        header,
        f"  {_DIM}{'─' * 43}{_RESET}",
    ]

    slides_label = "slide" if slide_count == 1 else "slides"
    timing = f" {_DIM}in {load_ms:.0f}ms{_RESET}" if load_ms > 0 else ""
    lines.append(f"  {_DIM}├─{_RESET} {slide_count} {slides_label} loaded{timing}")
    lines.append(f"  {_DIM}├─{_RESET} source: {_DIM}{config.presentation}{_RESET}")
    lines.append(f"  {_DIM}├─{_RESET} style: {_DIM}{config.stylesheet}{_RESET}")

    if mode == "export":
        lines.append(f"  {_DIM}└─{_RESET} output: {_DIM}{config.output}{_RESET}")
    else:
        lines.append(f"  {_DIM}├─{_RESET} assets: {_DIM}{config.asset_dir}{_RESET}")
        lines.append(
            f"  {_DIM}└─{_RESET} {_GREEN}live{_RESET} "
            f"— viewers follow on {_DIM}/{_RESET}"
        )
        lines.append("")
        lines.append(f"  {_clickable_url(config.url)}")
        lines.append("")
        lines.append(f"  {_DIM}{KEY_HELP}{_RESET}")

    if warnings:
        lines.append("")
        lines.extend(f"  {_YELLOW}!{_RESET} {w}" for w in warnings)

    lines.append("")

    print("\n".join(lines), file=sys.stderr)
