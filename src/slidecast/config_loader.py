"""Load SlidecastConfig from slidecast.yaml if present.

Merges file config with CLI kwargs. CLI overrides file.
"""

from __future__ import annotations

from pathlib import Path

from slidecast.config import SlidecastConfig

_KNOWN_KEYS = (
    "output", "host", "port", "stylesheet", "asset_dir",
    "keepalive_interval", "grace_period", "shutdown_timeout",
)


def load_config(presentation: Path, **overrides: object) -> SlidecastConfig:
    """Load SlidecastConfig for *presentation*, optionally merging a config file.

    Looks for slidecast.yaml, slidecast.yml, or slidecast.toml next to the
    presentation. If found, loads and merges with overrides. Overrides
    take precedence; ``None`` overrides are ignored so unset CLI flags do
    not mask file values.
    """
    presentation = Path(presentation)
    file_config = _read_slidecast_config(presentation.resolve().parent)
    merged = {**file_config, **{k: v for k, v in overrides.items() if v is not None}}
    # Normalize paths
    for key in ("output", "asset_dir"):
        if key in merged and not isinstance(merged[key], Path):
            merged[key] = Path(str(merged[key]))
    return SlidecastConfig(presentation=presentation, **merged)


def _read_slidecast_config(root: Path) -> dict[str, object]:
    """Read slidecast config from yaml/toml if present. Returns empty dict otherwise."""
    for name in ("slidecast.yaml", "slidecast.yml"):
        path = root / name
        if path.is_file():
            return _parse_yaml(path)
    toml_path = root / "slidecast.toml"
    if toml_path.is_file():
        return _parse_toml(toml_path)
    return {}


def _parse_yaml(path: Path) -> dict[str, object]:
    """Parse YAML config. Returns empty dict on error."""
    import yaml

    try:
        data = yaml.safe_load(path.read_text()) or {}
    except (OSError, yaml.YAMLError):
        return {}
    if not isinstance(data, dict):
        return {}
    return _flatten_slidecast_section(data)


def _parse_toml(path: Path) -> dict[str, object]:
    """Parse TOML config. Returns empty dict on error."""
    import tomllib

    try:
        data = tomllib.loads(path.read_text())
    except (OSError, tomllib.TOMLDecodeError):
        return {}
    return _flatten_slidecast_section(data)


def _flatten_slidecast_section(data: dict[str, object]) -> dict[str, object]:
    """Extract slidecast.* keys into top-level config."""
    result: dict[str, object] = {}
    section = data.get("slidecast")
    if isinstance(section, dict):
        for k, v in section.items():
            if k in _KNOWN_KEYS:
                result[k] = v
    for k, v in data.items():
        if k != "slidecast" and k in _KNOWN_KEYS:
            result[k] = v
    return result
