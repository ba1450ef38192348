"""Configuration models for swrcache."""

from __future__ import annotations

from datetime import timedelta
from pathlib import Path
from typing import Literal, Self

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_CACHE_ROOT = Path("~/.cache/swrcache")


class ConfigBase(BaseModel):
    """Base class for swrcache configurations.

    Provides loading from JSON/YAML files with defaults.
    """

    model_config = ConfigDict(extra="ignore")  # Forward compatibility

    @classmethod
    def default_path(cls) -> Path:
        """Return the default config file path for this config type."""
        raise NotImplementedError(f"{cls.__name__} must implement default_path()")

    @classmethod
    def load_or_default(cls, path: Path | str | None = None) -> Self:
        """Load config from path or the default path.

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValidationError: If config is invalid
        """
        from swrcache.core.config.loader import load_config

        if path is None:
            path = cls.default_path()
        raw = load_config(path)
        return cls.model_validate(raw)


class CacheConfig(BaseModel):
    """Record store and expiry configuration."""

    backend: Literal["fs", "memory", "null"] = Field(
        default="fs",
        description="Record store: 'fs' (files), 'memory' (in-process key-value), 'null' (disabled)",
    )

    cache_root: Path = Field(
        default=DEFAULT_CACHE_ROOT,
        description="Application-private cache root (fs backend)",
    )

    subdir: str = Field(
        default="cache_request_data",
        min_length=1,
        pattern=r"^[A-Za-z0-9._-]+$",
        description="Subdirectory of cache_root holding the records (fs backend)",
    )

    key_prefix: str = Field(
        default="swrcache:",
        min_length=1,
        description="Key namespace (memory backend); purge only removes keys under it",
    )

    default_max_age_seconds: float | None = Field(
        default=None,
        gt=0,
        description="Max record age when a request passes none (None = never expire)",
    )

    @property
    def default_max_age(self) -> timedelta | None:
        """Default max age as a timedelta."""
        if self.default_max_age_seconds is None:
            return None
        return timedelta(seconds=self.default_max_age_seconds)


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: str = Field(default="INFO", pattern="^(DEBUG|INFO|WARNING|ERROR|CRITICAL)$")
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    structured: bool = Field(default=False, description="Emit one JSON object per log line")


class AppConfig(ConfigBase):
    """Application-level configuration."""

    cache: CacheConfig = Field(default_factory=CacheConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def default_path(cls) -> Path:
        return Path("swrcache.yaml")
