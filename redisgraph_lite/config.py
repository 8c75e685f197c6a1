"""Configuration for redisgraph-lite.

Simple dataclass-based configuration with sensible defaults.
Override via environment variables with REDISGRAPH_LITE_ prefix.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from redisgraph_lite.log_config import get_logger

log = get_logger("config")

# Load .env file if present
try:
    from dotenv import load_dotenv

    _pkg_dir = Path(__file__).parent.parent
    _env_loaded = load_dotenv(_pkg_dir / ".env")
    log.debug(f"Loaded .env file: {_env_loaded}")
except ImportError:
    log.debug("python-dotenv not installed, using environment variables directly")


def _get_env(key: str, default: str) -> str:
    """Get environment variable with REDISGRAPH_LITE_ prefix."""
    return os.getenv(f"REDISGRAPH_LITE_{key}", default)


def _get_env_bool(key: str, default: bool) -> bool:
    """Get boolean environment variable."""
    val = os.getenv(f"REDISGRAPH_LITE_{key}")
    if val is None:
        return default
    return val.lower() in ("true", "1", "yes")


@dataclass
class GraphConfig:
    """Connection and query settings for one graph session.

    Attributes:
        graph_name: Graph identifier every command is scoped to (required)
        host: Redis host address (default: localhost)
        port: Redis port (default: 6379)
        password: Redis password, if the server requires AUTH
        db: Redis logical database index (default: 0)
        compact: Request the compact reply format with --compact (default: True)
    """

    graph_name: str = field(default_factory=lambda: _get_env("GRAPH_NAME", ""))
    host: str = field(default_factory=lambda: _get_env("HOST", "localhost"))
    port: int = field(default_factory=lambda: int(_get_env("PORT", "6379")))
    password: str | None = field(
        default_factory=lambda: _get_env("PASSWORD", "") or None
    )
    db: int = field(default_factory=lambda: int(_get_env("DB", "0")))
    compact: bool = field(default_factory=lambda: _get_env_bool("COMPACT", True))

    def __post_init__(self):
        log.debug(f"graph_name={self.graph_name!r}")
        log.debug(f"host={self.host}, port={self.port}, db={self.db}")
        log.debug(f"compact={self.compact}")

    @property
    def redis_url(self) -> str:
        """redis:// URL for this configuration (password omitted)."""
        return f"redis://{self.host}:{self.port}/{self.db}"
