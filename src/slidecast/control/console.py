"""Terminal console — reads presenter keys and draws the current slide.

On a TTY the console switches stdin to cbreak mode so single keypresses
arrive without Enter, and restores the previous mode on exit.  When stdin
is not a TTY (piped input, tests) it reads one command per line; end of
input counts as QUIT.

Drawing clears the screen and prints the current slide's markdown with a
status line underneath.
"""

from __future__ import annotations

import os
import sys
import threading
from typing import TYPE_CHECKING, TextIO

from slidecast.control.commands import Command, decode_key, decode_line

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from types import TracebackType

    from slidecast.live.state import Snapshot

_CLEAR = "\033[2J\033[H"
_REVERSE = "\033[7m"
_RESET = "\033[0m"


def split_keys(data: str) -> list[str]:
    """Split one terminal read into keys.

    An escape sequence is kept whole; any other text is one key per char.
    """
    keys: list[str] = []
    i = 0
    while i < len(data):
        if data[i] == "\x1b":
            end = i + 1
            if end < len(data) and data[end] == "[":
                end += 1
                # CSI parameters, then one final byte in @..~
                while end < len(data) and not ("@" <= data[end] <= "~"):
                    end += 1
                end = min(end + 1, len(data))
            keys.append(data[i:end])
            i = end
        else:
            keys.append(data[i])
            i += 1
    return keys


class Console:
    """Presenter's terminal.

    Use as a context manager so the terminal mode is always restored.

    Args:
        stdin: Input stream.
        stdout: Output stream for slide drawing.
        status: Returns extra status text (viewers, URL, last error).

    """

    def __init__(
        self,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        *,
        status: Callable[[], str] | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._status = status
        self._saved_mode: list[object] | None = None
        self._draw_lock = threading.Lock()

    @property
    def interactive(self) -> bool:
        """True when keys are read one at a time from a terminal."""
        return _isatty(self._stdin)

    # ----- Terminal mode -----

    def __enter__(self) -> Console:
        if self.interactive:
            import termios
            import tty

            fd = self._stdin.fileno()
            self._saved_mode = termios.tcgetattr(fd)
            tty.setcbreak(fd)
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.restore()

    def restore(self) -> None:
        """Put the terminal back the way it was.  Safe to call twice."""
        if self._saved_mode is None:
            return
        import termios

        termios.tcsetattr(self._stdin.fileno(), termios.TCSADRAIN, self._saved_mode)
        self._saved_mode = None

    # ----- Input -----

    def keys(self) -> Iterator[str]:
        """Yield raw keys until end of input."""
        if not self.interactive:
            for line in self._stdin:
                yield line
            return

        fd = self._stdin.fileno()
        while True:
            data = os.read(fd, 32)
            if not data:
                return
            yield from split_keys(data.decode("utf-8", errors="replace"))

    def commands(self) -> Iterator[Command]:
        """Yield decoded commands; end of input yields a final QUIT."""
        decode = decode_key if self.interactive else decode_line
        for key in self.keys():
            yield decode(key)
        yield Command.QUIT

    # ----- Output -----

    def draw(self, snapshot: Snapshot) -> None:
        """Clear the screen and show *snapshot*'s current slide.

        Called from the controller thread after each command and from the
        server thread when a viewer connects or leaves.
        """
        with self._draw_lock:
            self._draw(snapshot)

    def _draw(self, snapshot: Snapshot) -> None:
        out = self._stdout
        color = _isatty(out)
        status = f"{snapshot.title}  {snapshot.current}/{snapshot.total}"
        if self._status is not None:
            extra = self._status()
            if extra:
                status = f"{status}  {extra}"

        if color:
            out.write(_CLEAR)
        out.write(snapshot.raw_current)
        out.write("\n")
        if color:
            out.write(f"{_REVERSE} {status} {_RESET}\n")
        else:
            out.write(f"[{status}]\n")
        out.flush()


def _isatty(stream: TextIO) -> bool:
    return hasattr(stream, "isatty") and stream.isatty()
