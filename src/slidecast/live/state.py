"""Authoritative presentation state.

``StateStore`` owns the one ``PresentationState`` of the process.  The
controller is its only writer; every viewer connection reads it.

Reads take the shared side of a reader-writer lock and writes take the
exclusive side.  Lock scope is limited to in-memory field updates: a reload
reads and renders the new content *before* acquiring the write lock, then
swaps every field in a single acquisition so no reader can observe slides
from one reload paired with a total or title from another.

Thread Safety:
    All public methods are safe to call from any thread.  ``Snapshot`` is
    frozen and may be shared freely once returned.

"""

from __future__ import annotations

import threading
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from slidecast.content.slides import read_source, render_slides
from slidecast.content.styles import load_stylesheet

if TYPE_CHECKING:
    from slidecast._types import (
        Generation,
        SlideIndex,
        SlideRenderer,
        SourceReader,
        StyleLoader,
        StyleRef,
    )


class ReadWriteLock:
    """Many readers or one writer.

    Writers are preferred: once a writer is waiting, new readers block until
    it has finished, so a steady stream of viewers cannot starve the
    controller.
    """

    __slots__ = ("_cond", "_readers", "_writer", "_writers_waiting")

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            while self._writer or self._writers_waiting:
                self._cond.wait()
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                while self._writer or self._readers:
                    self._cond.wait()
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


@dataclass(frozen=True, slots=True)
class Snapshot:
    """Consistent view of the presentation state at one instant.

    Attributes:
        current: 1-indexed current slide (0 only while nothing is loaded).
        total: Number of slides in the active content version.
        generation: Number of successful reloads so far.
        title: Presentation title.
        slides: Rendered HTML sections.
        raw_slides: Markdown source per slide.
        stylesheet: CSS text applied to the deck.
        instance: Token of the serving process; pages from another
            process carry a different one.

    """

    current: SlideIndex
    total: int
    generation: Generation
    title: str
    slides: tuple[str, ...]
    raw_slides: tuple[str, ...]
    stylesheet: str
    instance: str

    @property
    def raw_current(self) -> str:
        """Markdown source of the current slide ("" when nothing is loaded)."""
        if not self.total:
            return ""
        return self.raw_slides[self.current - 1]


class StateStore:
    """Owner of the single authoritative presentation state.

    The store starts empty (generation 0, no slides).  ``open()`` performs
    the initial load, after which generation is 1.  Each store also gets a
    random ``instance`` token, fixed for its lifetime, so a viewer whose page
    came from an earlier process can be told apart from one that is merely
    behind.

    Args:
        reader: Reads presentation source text from a path.
        renderer: Turns source text into a ``Deck``.
        style_loader: Resolves a stylesheet reference to CSS text.

    """

    def __init__(
        self,
        *,
        reader: SourceReader = read_source,
        renderer: SlideRenderer = render_slides,
        style_loader: StyleLoader = load_stylesheet,
    ) -> None:
        self._reader = reader
        self._renderer = renderer
        self._style_loader = style_loader
        self._lock = ReadWriteLock()
        self._instance = uuid.uuid4().hex[:12]

        self._current: SlideIndex = 0
        self._total = 0
        self._generation: Generation = 0
        self._title = ""
        self._slides: tuple[str, ...] = ()
        self._raw_slides: tuple[str, ...] = ()
        self._stylesheet = ""

    @classmethod
    def open(
        cls,
        source: Path,
        stylesheet: StyleRef,
        *,
        reader: SourceReader = read_source,
        renderer: SlideRenderer = render_slides,
        style_loader: StyleLoader = load_stylesheet,
    ) -> StateStore:
        """Create a store and perform the initial load.

        Raises:
            LoadError: The initial content could not be loaded.

        """
        store = cls(reader=reader, renderer=renderer, style_loader=style_loader)
        store.reload(source, stylesheet)
        return store

    # ----- Writes -----

    def goto_slide(self, target: SlideIndex) -> SlideIndex:
        """Move to *target*, clamped into ``[1, total]``.

        Returns:
            The position actually stored.

        """
        with self._lock.write():
            if self._total:
                self._current = min(max(target, 1), self._total)
            return self._current

    def reload(self, source: Path, stylesheet: StyleRef) -> Generation:
        """Re-read *source* and *stylesheet* and swap them in atomically.

        Nothing is mutated when loading fails.  When the new deck is shorter
        than the current position, the position moves to the last slide.

        Returns:
            The new generation.

        Raises:
            LoadError: The source or stylesheet could not be loaded, or the
                source has no slides.

        """
        deck = self._renderer(self._reader(Path(source)))
        css = self._style_loader(stylesheet)

        with self._lock.write():
            self._title = deck.title
            self._slides = deck.slides
            self._raw_slides = deck.raw_slides
            self._stylesheet = css
            self._total = deck.total
            self._current = min(max(self._current, 1), self._total)
            self._generation += 1
            return self._generation

    # ----- Reads -----

    def snapshot(self) -> Snapshot:
        """Return every field under one shared-lock acquisition."""
        with self._lock.read():
            return self._snapshot()

    @contextmanager
    def reading(self) -> Iterator[Snapshot]:
        """Hold the shared lock while the caller works with a snapshot.

        Used to render a whole page under a single acquisition.
        """
        with self._lock.read():
            yield self._snapshot()

    def position(self) -> tuple[Generation, SlideIndex]:
        """Return ``(generation, current)`` read together."""
        with self._lock.read():
            return self._generation, self._current

    @property
    def instance(self) -> str:
        """Token identifying this store; never changes."""
        return self._instance

    @property
    def current(self) -> SlideIndex:
        with self._lock.read():
            return self._current

    @property
    def total(self) -> int:
        with self._lock.read():
            return self._total

    @property
    def generation(self) -> Generation:
        with self._lock.read():
            return self._generation

    def _snapshot(self) -> Snapshot:
        return Snapshot(
            current=self._current,
            total=self._total,
            generation=self._generation,
            title=self._title,
            slides=self._slides,
            raw_slides=self._raw_slides,
            stylesheet=self._stylesheet,
            instance=self._instance,
        )
