"""Static export — write the deck as one standalone HTML file.

The exported page has every slide, the stylesheet inlined, and keyboard
navigation in the browser.  It has no event stream and needs no server.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

from slidecast._errors import ExportError
from slidecast.live.render import render_deck

if TYPE_CHECKING:
    from slidecast.live.state import StateStore


@dataclass(frozen=True, slots=True)
class ExportResult:
    """Result of a standalone export.

    Attributes:
        output_path: Absolute path of the written file.
        size_bytes: Size of the written file in bytes.
        slide_count: Number of slides in the exported deck.
        duration_ms: Time taken to render and write.

    """

    output_path: Path
    size_bytes: int
    slide_count: int
    duration_ms: float


def export_deck(store: StateStore, path: Path) -> ExportResult:
    """Render *store*'s deck without live updates and write it to *path*.

    Raises:
        ExportError: The file could not be written.

    """
    start = time.perf_counter()
    output_path = Path(path).resolve()

    with store.reading() as snapshot:
        html = render_deck(snapshot, live=False)
        slide_count = snapshot.total

    data = html.encode("utf-8")
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_bytes(data)
    except OSError as exc:
        msg = f"cannot write {output_path}: {exc}"
        raise ExportError(msg) from exc

    return ExportResult(
        output_path=output_path,
        size_bytes=len(data),
        slide_count=slide_count,
        duration_ms=(time.perf_counter() - start) * 1000,
    )
