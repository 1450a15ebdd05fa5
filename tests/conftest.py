"""Shared test fixtures for slidecast."""

from __future__ import annotations

import asyncio
import threading
from pathlib import Path

import pytest

from slidecast.content.slides import SLIDE_SEPARATOR, Deck
from slidecast.live.signal import ChangeSignal
from slidecast.live.state import StateStore


def deck_source(count: int, *, title: str = "Talk") -> str:
    """Markdown source with *count* slides; the first starts with a title."""
    slides = [f"# {title}"] + [f"## Slide {i}\n\nBody {i}." for i in range(2, count + 1)]
    return SLIDE_SEPARATOR.join(slides[:count]) + "\n"


def plain_renderer(source: str) -> Deck:
    """Renderer without markdown: each slide becomes a bare section.

    Raises ``LoadError`` on empty input, like the real renderer.
    """
    from slidecast._errors import LoadError

    content = source.strip()
    if not content:
        msg = "tried to load a presentation without slides"
        raise LoadError(msg)
    chunks = content.split(SLIDE_SEPARATOR)
    slides = tuple(f"<section id='s{i}'>{c}</section>" for i, c in enumerate(chunks, start=1))
    title = chunks[0][2:] if chunks[0].startswith("# ") else "slidecast"
    return Deck(title=title, slides=slides, raw_slides=tuple(c + "\n" for c in chunks))


def inline_styles(ref: str) -> str:
    """Style loader that echoes the reference as a CSS comment."""
    return f"/* {ref} */"


def waiting(signal: ChangeSignal) -> int:
    """Number of watchers currently blocked on *signal*."""
    return len(signal._waiters)


async def settle(rounds: int = 10) -> None:
    """Let the event loop run pending callbacks and woken tasks."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def deck_file(tmp_path: Path) -> Path:
    """A four-slide presentation on disk."""
    path = tmp_path / "talk.md"
    path.write_text(deck_source(4))
    return path


@pytest.fixture
def store(deck_file: Path) -> StateStore:
    """State store loaded from ``deck_file`` (generation 1, slide 1 of 4)."""
    return StateStore.open(
        deck_file, "builtin:none", renderer=plain_renderer, style_loader=inline_styles
    )


@pytest.fixture
def signal() -> ChangeSignal:
    return ChangeSignal()


@pytest.fixture
def shutdown() -> threading.Event:
    return threading.Event()
