"""Shared type definitions for slidecast."""

from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from slidecast.content.slides import Deck

# 1-indexed slide position
type SlideIndex = int

# Reload counter of the presentation content
type Generation = int

# A stylesheet reference: "builtin:<name>" or a file path
type StyleRef = str

# Rendering collaborator: markdown source text -> Deck
type SlideRenderer = Callable[[str], Deck]

# Stylesheet collaborator: reference -> CSS text
type StyleLoader = Callable[[StyleRef], str]

# Source collaborator: presentation path -> markdown text
type SourceReader = Callable[[Path], str]
