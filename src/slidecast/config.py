"""Slidecast configuration.

SlidecastConfig is the central configuration object, frozen after creation.
"""

from dataclasses import dataclass, field
from pathlib import Path

from slidecast._errors import ConfigError


@dataclass(frozen=True, slots=True)
class SlidecastConfig:
    """Configuration for one presentation.

    Attributes:
        presentation: Path to the markdown source. Always resolved to an
            absolute path on construction.
        output: When set, export a standalone HTML file here instead of serving.
        host: Bind address for the live server.
        port: Bind port for the live server.
        stylesheet: Extra stylesheet, either ``builtin:<name>`` or a file path.
        asset_dir: Directory served under ``/assets`` (images, fonts, ...).
        keepalive_interval: Seconds of stream inactivity before a heartbeat
            is sent so browsers and proxies keep the connection open.
        grace_period: Seconds to wait at shutdown so connected viewers can
            receive the close directive.
        shutdown_timeout: Seconds open connections get to finish after the
            grace period before the server force-closes them.

    """

    presentation: Path
    output: Path | None = None
    host: str = "localhost"
    port: int = 8080
    stylesheet: str = "builtin:none"
    asset_dir: Path = field(default_factory=lambda: Path("."))
    keepalive_interval: float = 30.0
    grace_period: float = 1.0
    shutdown_timeout: float = 1.0

    def __post_init__(self) -> None:
        if not self.presentation.is_absolute():
            object.__setattr__(self, "presentation", self.presentation.resolve())
        if not self.asset_dir.is_absolute():
            object.__setattr__(self, "asset_dir", self.asset_dir.resolve())

        if not 0 <= self.port <= 65535:
            msg = f"port must be between 0 and 65535 (got {self.port})"
            raise ConfigError(msg)
        # chirp rejects heartbeat intervals outside [1, 300] seconds
        if not 1.0 <= self.keepalive_interval <= 300.0:
            msg = f"keepalive_interval must be between 1 and 300 seconds (got {self.keepalive_interval})"
            raise ConfigError(msg)
        if self.grace_period < 0:
            msg = f"grace_period must be >= 0 (got {self.grace_period})"
            raise ConfigError(msg)
        if self.shutdown_timeout <= 0:
            msg = f"shutdown_timeout must be > 0 (got {self.shutdown_timeout})"
            raise ConfigError(msg)

    @property
    def bind(self) -> str:
        """``host:port`` as passed on the command line."""
        return f"{self.host}:{self.port}"

    @property
    def url(self) -> str:
        """URL viewers open in their browser."""
        return f"http://{self.bind}/"

    @property
    def root(self) -> Path:
        """Directory containing the presentation (where config files live)."""
        return self.presentation.parent
