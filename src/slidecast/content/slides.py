"""Slide rendering — markdown source to ordered slide sections.

A presentation is one markdown document. Slides are separated by two blank
lines. A slide whose first line is ``.name`` (or ``.one two``) gets
``class='name'`` (``class='one two'``) on its section. Markdown is parsed with Patitas, then a few HTML fix-ups make
image-only paragraphs easy to size with plain CSS.

Thread Safety:
    ``render_slides`` is a pure function; the Patitas ``Markdown`` instance
    keeps its config in a ContextVar and is safe for concurrent use.

"""

from __future__ import annotations

import html
import re
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from slidecast._errors import LoadError

if TYPE_CHECKING:
    from patitas import Markdown

DEFAULT_TITLE = "slidecast"
SLIDE_SEPARATOR = "\n\n\n"

_CLASS_MACRO = re.compile(r"^\.(.+)\n")

# Image fix-ups, applied in this order to each rendered slide.
_IMG = r"<img[^<>]+/?>"
_IMAGE_SINGLE = re.compile(rf"<p>({_IMG})</p>")
_IMAGE_CAPTION_BEFORE = re.compile(rf"<p>(.+)\n({_IMG})</p>")
_IMAGE_CAPTION_AFTER = re.compile(rf"<p>({_IMG})\n(.+)</p>")
_IMAGE_MULTI = re.compile(rf"<p>((?:{_IMG}\n?){{2,}}\n?)</p>")

_EXTERNAL_LINK = re.compile(r'<a href="(https?://[^"]*)"')


@dataclass(frozen=True, slots=True)
class Deck:
    """Output of the rendering collaborator.

    Attributes:
        title: Presentation title (first ``# `` heading line, or the default).
        slides: Rendered ``<section>`` HTML, one per slide.
        raw_slides: Markdown source per slide, same order and length.

    """

    title: str
    slides: tuple[str, ...]
    raw_slides: tuple[str, ...]

    def __post_init__(self) -> None:
        if len(self.slides) != len(self.raw_slides):
            msg = "rendered and raw slide sequences differ in length"
            raise ValueError(msg)

    @property
    def total(self) -> int:
        """Number of slides."""
        return len(self.slides)


def read_source(path: Path) -> str:
    """Read a presentation source file.

    Raises:
        LoadError: The file does not end in ``.md`` or cannot be read.

    """
    if path.suffix != ".md":
        msg = f"{path} doesn't end in '.md'; not markdown?"
        raise LoadError(msg)
    try:
        return path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        msg = f"cannot read presentation {path}: {exc}"
        raise LoadError(msg) from exc


def render_slides(source: str) -> Deck:
    """Split markdown *source* into slides and render each to HTML.

    Raises:
        LoadError: The source contains no slides.

    """
    # drops leading/trailing blank lines (and so trailing empty slides)
    content = source.strip()
    if not content:
        msg = "tried to load a presentation without slides"
        raise LoadError(msg)

    from patitas import Markdown

    md = Markdown(plugins=["table", "strikethrough", "autolinks"])
    slides: list[str] = []
    raw_slides: list[str] = []
    for idx, chunk in enumerate(content.split(SLIDE_SEPARATOR), start=1):
        slides.append(_render_section(md, idx, chunk))
        raw_slides.append(_strip_macro(chunk) + "\n")

    title = DEFAULT_TITLE
    if content.startswith("# "):
        title = content.split("\n", 1)[0][2:].strip() or DEFAULT_TITLE

    return Deck(title=title, slides=tuple(slides), raw_slides=tuple(raw_slides))


def _strip_macro(chunk: str) -> str:
    return _CLASS_MACRO.sub("", chunk, count=1)


def _render_section(md: Markdown, idx: int, chunk: str) -> str:
    """Render one slide as ``<section id='sN'>``."""
    opening = f"<section id='s{idx}'"
    macro = _CLASS_MACRO.match(chunk)
    if macro:
        classes = html.escape(" ".join(macro.group(1).split()), quote=True)
        opening += f" class='{classes}'"
        chunk = chunk[macro.end():]

    body = md(chunk)
    body = _fix_images(body)
    body = _EXTERNAL_LINK.sub(r'<a href="\1" target="_blank" rel="noreferrer"', body)
    return f"{opening}>\n{body}</section>\n"


def _fix_images(body: str) -> str:
    """Unwrap image-only paragraphs and split captions into their own paragraph."""
    body = _IMAGE_SINGLE.sub(r"\1", body)
    body = _IMAGE_CAPTION_BEFORE.sub(r"<p>\1</p>\n\2", body)
    body = _IMAGE_CAPTION_AFTER.sub(r"\1\n<p>\2</p>", body)
    return _IMAGE_MULTI.sub(r"\1", body)
