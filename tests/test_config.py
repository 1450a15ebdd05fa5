"""Tests for slidecast.config and slidecast.config_loader."""

from pathlib import Path

import pytest

from slidecast._errors import ConfigError
from slidecast.config import SlidecastConfig
from slidecast.config_loader import load_config


class TestSlidecastConfig:
    """SlidecastConfig — frozen dataclass with sensible defaults."""

    def test_defaults(self, tmp_path: Path) -> None:
        config = SlidecastConfig(presentation=tmp_path / "talk.md")
        assert config.output is None
        assert config.host == "localhost"
        assert config.port == 8080
        assert config.stylesheet == "builtin:none"
        assert config.keepalive_interval == 30.0
        assert config.grace_period == 1.0
        assert config.shutdown_timeout == 1.0

    def test_frozen(self, tmp_path: Path) -> None:
        config = SlidecastConfig(presentation=tmp_path / "talk.md")
        with pytest.raises(AttributeError):
            config.port = 9000  # type: ignore[misc]

    def test_paths_resolved(self) -> None:
        config = SlidecastConfig(presentation=Path("talk.md"), asset_dir=Path("img"))
        assert config.presentation.is_absolute()
        assert config.asset_dir.is_absolute()
        assert config.root == config.presentation.parent

    def test_bind_and_url(self, tmp_path: Path) -> None:
        config = SlidecastConfig(presentation=tmp_path / "talk.md", host="0.0.0.0", port=9000)
        assert config.bind == "0.0.0.0:9000"
        assert config.url == "http://0.0.0.0:9000/"

    @pytest.mark.parametrize(
        "overrides",
        [
            {"port": -1},
            {"port": 70000},
            {"keepalive_interval": 0.5},
            {"keepalive_interval": 301.0},
            {"grace_period": -1.0},
            {"shutdown_timeout": 0.0},
        ],
    )
    def test_invalid_values(self, tmp_path: Path, overrides: dict[str, object]) -> None:
        with pytest.raises(ConfigError):
            SlidecastConfig(presentation=tmp_path / "talk.md", **overrides)  # type: ignore[arg-type]


class TestLoadConfig:
    """load_config() — file config merged with overrides."""

    def test_no_file(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "talk.md")
        assert config.port == 8080

    def test_yaml_file(self, tmp_path: Path) -> None:
        (tmp_path / "slidecast.yaml").write_text(
            "port: 9001\nstylesheet: builtin:dark\nunknown_key: 1\n"
        )
        config = load_config(tmp_path / "talk.md")
        assert config.port == 9001
        assert config.stylesheet == "builtin:dark"

    def test_yaml_section(self, tmp_path: Path) -> None:
        (tmp_path / "slidecast.yml").write_text("slidecast:\n  grace_period: 2.5\n")
        assert load_config(tmp_path / "talk.md").grace_period == 2.5

    def test_toml_file(self, tmp_path: Path) -> None:
        (tmp_path / "slidecast.toml").write_text(
            '[slidecast]\nhost = "0.0.0.0"\nasset_dir = "img"\n'
        )
        config = load_config(tmp_path / "talk.md")
        assert config.host == "0.0.0.0"
        assert config.asset_dir.name == "img"

    def test_overrides_win(self, tmp_path: Path) -> None:
        (tmp_path / "slidecast.yaml").write_text("port: 9001\n")
        config = load_config(tmp_path / "talk.md", port=9002)
        assert config.port == 9002

    def test_none_overrides_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "slidecast.yaml").write_text("stylesheet: builtin:serif\n")
        config = load_config(tmp_path / "talk.md", stylesheet=None, host=None)
        assert config.stylesheet == "builtin:serif"
        assert config.host == "localhost"

    def test_broken_yaml_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "slidecast.yaml").write_text("port: [unclosed\n")
        assert load_config(tmp_path / "talk.md").port == 8080

    def test_output_normalized(self, tmp_path: Path) -> None:
        config = load_config(tmp_path / "talk.md", output="out.html")
        assert config.output == Path("out.html")
