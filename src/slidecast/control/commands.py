"""Presenter commands and key decoding.

``decode_key`` maps one keypress (a character or a terminal escape
sequence) to a ``Command``.  It is pure; reading the terminal is the
console's job.
"""

from enum import Enum


class Command(Enum):
    """Everything the presenter can ask the controller to do."""

    NEXT = "next"
    PREV = "prev"
    FIRST = "first"
    LAST = "last"
    RELOAD = "reload"
    QUIT = "quit"
    REDRAW = "redraw"
    UNKNOWN = "unknown"


# Terminal escape sequences (xterm / VT100)
KEY_UP = "\x1b[A"
KEY_DOWN = "\x1b[B"
KEY_RIGHT = "\x1b[C"
KEY_LEFT = "\x1b[D"
KEY_PAGE_UP = "\x1b[5~"
KEY_PAGE_DOWN = "\x1b[6~"

CTRL_C = "\x03"
CTRL_D = "\x04"
CTRL_L = "\x0c"

KEYMAP: dict[str, Command] = {
    "g": Command.FIRST,
    "G": Command.LAST,
    "j": Command.NEXT,
    "t": Command.NEXT,
    " ": Command.NEXT,
    KEY_RIGHT: Command.NEXT,
    KEY_DOWN: Command.NEXT,
    KEY_PAGE_DOWN: Command.NEXT,
    "k": Command.PREV,
    "n": Command.PREV,
    KEY_LEFT: Command.PREV,
    KEY_UP: Command.PREV,
    KEY_PAGE_UP: Command.PREV,
    "r": Command.RELOAD,
    "q": Command.QUIT,
    CTRL_C: Command.QUIT,
    CTRL_D: Command.QUIT,
    CTRL_L: Command.REDRAW,
}


def decode_key(key: str) -> Command:
    """Return the command bound to *key*, or ``Command.UNKNOWN``."""
    return KEYMAP.get(key, Command.UNKNOWN)


def decode_line(line: str) -> Command:
    """Decode one line of non-interactive input.

    A line is either a single bound key (``j``, ``q``, ...) or a command
    name (``next``, ``reload``, ...).  Surrounding whitespace is ignored,
    except that a line holding only a space means "next".
    """
    text = line.rstrip("\r\n")
    if text == " ":
        return Command.NEXT
    text = text.strip()
    if len(text) == 1:
        return decode_key(text)
    try:
        return Command(text.lower())
    except ValueError:
        return Command.UNKNOWN
