"""Configuration for swrcache."""

from swrcache.core.config.loader import detect_format, load_app_config, load_config
from swrcache.core.config.models import AppConfig, CacheConfig, ConfigBase, LoggingConfig

__all__ = [
    "AppConfig",
    "CacheConfig",
    "ConfigBase",
    "LoggingConfig",
    "detect_format",
    "load_app_config",
    "load_config",
]
