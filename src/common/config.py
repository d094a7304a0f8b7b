"""Engine configuration loaded from YAML files under configs/."""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Generic, TypeVar

import yaml

T = TypeVar("T")

CONFIG_DIR = Path(__file__).resolve().parents[2] / "configs"
CONFIG_ENV_VAR = "BRIEF_CONFIG"


@dataclass
class ClusteringConfig:
    similarity_threshold: float = 0.32
    min_token_length: int = 2


@dataclass
class RankingConfig:
    breadth_weight: float = 3.0
    volume_weight: float = 1.0
    recency_weight: float = 0.5
    recency_hours: int = 6
    top_limit: int = 30
    top_publishers: int = 5


@dataclass
class RepresentativeConfig:
    min_articles: int = 3
    max_articles: int = 6


@dataclass
class DatabaseConfig:
    url_env: str = "DATABASE_URL"
    echo: bool = False


@dataclass
class ServerConfig:
    host: str = "0.0.0.0"
    port: int = 8000


@dataclass
class EngineConfig:
    clustering: ClusteringConfig = field(default_factory=ClusteringConfig)
    ranking: RankingConfig = field(default_factory=RankingConfig)
    representative: RepresentativeConfig = field(default_factory=RepresentativeConfig)
    database: DatabaseConfig = field(default_factory=DatabaseConfig)
    server: ServerConfig = field(default_factory=ServerConfig)


def find_config_path(
    config_name: str | None,
    config_dir: Path = CONFIG_DIR,
    default_name: str = "prod",
    env_var: str | None = CONFIG_ENV_VAR,
) -> Path:
    """Find config file path, checking env var and defaults.

    Args:
        config_name: Name of config (without .yaml) or None for default
        config_dir: Directory containing config files
        default_name: Default config name if config_name is None
        env_var: Environment variable to check for config name

    Returns:
        Path to the config file

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    if config_name is None:
        config_name = os.environ.get(env_var, default_name) if env_var else default_name

    config_path = config_dir / f"{config_name}.yaml"
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    return config_path


def load_yaml(path: Path) -> dict:
    """Load YAML file and return dict."""
    with open(path) as f:
        return yaml.safe_load(f) or {}


def load_config(config_name: str | None = None, config_dir: Path = CONFIG_DIR) -> EngineConfig:
    """Load configuration from YAML file.

    Args:
        config_name: Name of config file (without .yaml extension).
                    If None, uses BRIEF_CONFIG env var or "prod".

    Returns:
        Loaded EngineConfig object
    """
    return parse_config(load_yaml(find_config_path(config_name, config_dir)))


def parse_config(data: dict) -> EngineConfig:
    """Parse config dictionary into EngineConfig, falling back to defaults."""
    clustering = data.get("clustering", {})
    ranking = data.get("ranking", {})
    representative = data.get("representative", {})
    database = data.get("database", {})
    server = data.get("server", {})

    return EngineConfig(
        clustering=ClusteringConfig(
            similarity_threshold=float(clustering.get("similarity_threshold", 0.32)),
            min_token_length=int(clustering.get("min_token_length", 2)),
        ),
        ranking=RankingConfig(
            breadth_weight=float(ranking.get("breadth_weight", 3.0)),
            volume_weight=float(ranking.get("volume_weight", 1.0)),
            recency_weight=float(ranking.get("recency_weight", 0.5)),
            recency_hours=int(ranking.get("recency_hours", 6)),
            top_limit=int(ranking.get("top_limit", 30)),
            top_publishers=int(ranking.get("top_publishers", 5)),
        ),
        representative=RepresentativeConfig(
            min_articles=int(representative.get("min_articles", 3)),
            max_articles=int(representative.get("max_articles", 6)),
        ),
        database=DatabaseConfig(
            url_env=database.get("url_env", "DATABASE_URL"),
            echo=bool(database.get("echo", False)),
        ),
        server=ServerConfig(
            host=server.get("host", "0.0.0.0"),
            port=int(server.get("port", 8000)),
        ),
    )


class ConfigSingleton(Generic[T]):
    """Generic config singleton manager.

    Provides get/set/reset pattern for managing a global config instance.
    """

    def __init__(self, loader: Callable[[], T] | None = None):
        self._config: T | None = None
        self._loader = loader

    def get(self) -> T:
        """Get the config, loading it lazily if needed."""
        if self._config is None:
            if self._loader is None:
                raise RuntimeError("No config loaded and no loader set")
            self._config = self._loader()
        return self._config

    def set(self, config: T) -> None:
        """Set the config directly."""
        self._config = config

    def reset(self) -> None:
        """Reset the config, forcing reload on next get()."""
        self._config = None


_manager: ConfigSingleton[EngineConfig] = ConfigSingleton(load_config)
get_config = _manager.get
set_config = _manager.set
reset_config = _manager.reset
