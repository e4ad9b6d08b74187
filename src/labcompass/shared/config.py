"""
Configuration Module - Load and validate application settings.
==============================================================

Loads configuration from:
1. config/settings.yaml (defaults)
2. Environment variables from .env file
3. Environment variables from system

Environment variables override YAML defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

load_dotenv()


def _find_project_root() -> Path:
    """Find the project root directory by looking for pyproject.toml."""
    current = Path(__file__).resolve()
    for parent in [current] + list(current.parents):
        if (parent / "pyproject.toml").exists():
            return parent
    return Path.cwd()


PROJECT_ROOT = _find_project_root()
CONFIG_DIR = PROJECT_ROOT / "config"
DEFAULT_CONFIG_FILE = CONFIG_DIR / "settings.yaml"


# ─────────────────────────────────────────────────────────────────────────────
# Nested Configuration Models
# ─────────────────────────────────────────────────────────────────────────────


class ApiConfig(BaseModel):
    """Directory backend connection settings."""

    base_url: str = "http://localhost:3001/api"
    timeout: float = 5.0
    max_retries: int = 2
    retry_min_wait: float = 0.5
    retry_max_wait: float = 2.0
    user_agent: str = "LabCompass/0.1.0"


class CacheConfig(BaseModel):
    """TTL for the data-access caches, in seconds."""

    catalog_ttl: float = 300.0
    trending_ttl: float = 300.0


class SearchConfig(BaseModel):
    """Search tuning knobs."""

    # Inclusion cutoff for any field match
    min_relevance: float = 0.3
    # 0 means no cap on the number of displayed results
    max_results: int = 0


class LoggingConfig(BaseModel):
    """Logging settings."""

    level: str = "INFO"
    format: str = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
    rich_console: bool = True
    file: str = ""


class PathsConfig(BaseModel):
    """Data paths configuration."""

    data_dir: str = "data"
    catalog_file: str = "data/catalog.json"

    def resolve(self, base_path: Path) -> "ResolvedPaths":
        """Resolve paths relative to a base path."""
        return ResolvedPaths(
            data_dir=base_path / self.data_dir,
            catalog_file=base_path / self.catalog_file,
        )


class ResolvedPaths(BaseModel):
    """Resolved absolute paths."""

    data_dir: Path
    catalog_file: Path


# ─────────────────────────────────────────────────────────────────────────────
# Main Settings Class
# ─────────────────────────────────────────────────────────────────────────────


class Settings(BaseSettings):
    """
    Main application settings.

    Loads from:
    1. config/settings.yaml (defaults)
    2. Environment variables

    Environment variables override YAML settings.
    """

    model_config = SettingsConfigDict(
        env_prefix="",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    # Top-level environment overrides
    api_url: Optional[str] = Field(default=None, validation_alias="LABCOMPASS_API_URL")
    api_timeout: Optional[float] = Field(default=None, validation_alias="API_TIMEOUT")
    log_level: Optional[str] = Field(default=None, validation_alias="LOG_LEVEL")

    # Nested configurations (from YAML)
    api: ApiConfig = Field(default_factory=ApiConfig)
    cache: CacheConfig = Field(default_factory=CacheConfig)
    search: SearchConfig = Field(default_factory=SearchConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    paths: PathsConfig = Field(default_factory=PathsConfig)

    _project_root: Path = PROJECT_ROOT
    _resolved_paths: Optional[ResolvedPaths] = None

    @field_validator("api_url", mode="before")
    @classmethod
    def strip_trailing_slash(cls, v: Any) -> Optional[str]:
        """Normalize the override so paths can be appended with '/'."""
        if v is None or v == "":
            return None
        return str(v).rstrip("/")

    @property
    def project_root(self) -> Path:
        """Get the project root directory."""
        return self._project_root

    @property
    def resolved_paths(self) -> ResolvedPaths:
        """Get resolved absolute paths."""
        if self._resolved_paths is None:
            self._resolved_paths = self.paths.resolve(self._project_root)
        return self._resolved_paths

    def get_effective_api_url(self) -> str:
        """Get the backend base URL (env override or config)."""
        if self.api_url:
            return self.api_url
        return self.api.base_url.rstrip("/")

    def get_effective_timeout(self) -> float:
        """Get the per-request timeout (env override or config)."""
        if self.api_timeout is not None:
            return self.api_timeout
        return self.api.timeout

    def get_effective_log_level(self) -> str:
        """Get the effective log level (env override or config)."""
        if self.log_level:
            return self.log_level.upper()
        return self.logging.level.upper()


def _load_yaml_config(config_path: Path) -> dict[str, Any]:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, encoding="utf-8") as f:
        data = yaml.safe_load(f)
        return data if data else {}


def _create_settings(config_path: Optional[Path] = None) -> Settings:
    """Create settings instance by merging YAML defaults with environment."""
    if config_path is None:
        config_path = DEFAULT_CONFIG_FILE

    yaml_config = _load_yaml_config(config_path)
    return Settings(**yaml_config)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Get the singleton settings instance.

    Example:
        >>> settings = get_settings()
        >>> settings.cache.catalog_ttl
        300.0
    """
    return _create_settings()


def reload_settings() -> Settings:
    """Force reload of settings (clears cache)."""
    get_settings.cache_clear()
    return get_settings()
