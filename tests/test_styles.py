"""Tests for slidecast.content.styles and slidecast.theme."""

from __future__ import annotations

from pathlib import Path

import pytest

from slidecast._errors import LoadError
from slidecast.content.styles import load_stylesheet
from slidecast.theme import builtin_stylesheet_path, builtin_stylesheets, get_template_dir


class TestLoadStylesheet:
    """load_stylesheet() resolution."""

    def test_builtin(self) -> None:
        assert "builtin:dark" in load_stylesheet("builtin:dark")

    def test_builtin_none_exists(self) -> None:
        load_stylesheet("builtin:none")

    def test_unknown_builtin(self) -> None:
        with pytest.raises(LoadError, match="unknown builtin") as exc_info:
            load_stylesheet("builtin:nope")
        assert "available: dark, none, serif" in str(exc_info.value)

    def test_builtin_cannot_escape_theme(self) -> None:
        with pytest.raises(LoadError):
            load_stylesheet("builtin:../templates/deck")

    def test_file(self, tmp_path: Path) -> None:
        css = tmp_path / "talk.css"
        css.write_text("h1 { color: red; }")
        assert load_stylesheet(str(css)) == "h1 { color: red; }"

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(LoadError, match="cannot read stylesheet"):
            load_stylesheet(str(tmp_path / "missing.css"))


class TestTheme:
    """Bundled theme paths."""

    def test_template_dir_has_deck(self) -> None:
        assert (get_template_dir() / "deck.html").is_file()

    def test_builtin_names(self) -> None:
        assert {"none", "dark", "serif"} <= set(builtin_stylesheets())

    def test_builtin_path_rejects_separators(self) -> None:
        assert builtin_stylesheet_path("a/b") is None
        assert builtin_stylesheet_path("") is None
