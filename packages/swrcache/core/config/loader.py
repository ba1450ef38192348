"""Configuration loading utilities with JSON and YAML support."""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

import yaml

from swrcache.core.config.models import AppConfig

logger = logging.getLogger(__name__)

CACHE_ROOT_ENV = "SWRCACHE_CACHE_ROOT"
LOG_LEVEL_ENV = "SWRCACHE_LOG_LEVEL"


def detect_format(file_path: Path | str) -> str:
    """Detect config file format from extension.

    Args:
        file_path: Path to config file

    Returns:
        Format string: "json" or "yaml"

    Raises:
        ValueError: If format cannot be determined

    Example:
        >>> detect_format("swrcache.json")
        'json'
        >>> detect_format("swrcache.yml")
        'yaml'
    """
    suffix = Path(file_path).suffix.lower()

    if suffix == ".json":
        return "json"
    elif suffix in [".yaml", ".yml"]:
        return "yaml"
    else:
        raise ValueError(f"Unsupported config format: {suffix}")


def load_config(path: str | Path) -> dict[str, Any]:
    """Load and return raw configuration dictionary.

    Args:
        path: Path to config file (.json, .yaml, or .yml)

    Returns:
        Raw configuration dictionary (empty for an empty YAML file)

    Raises:
        FileNotFoundError: If config file does not exist
        ValueError: If format is not supported or file content is invalid
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Config file does not exist: {path}")

    fmt = detect_format(path)

    if fmt == "json":
        try:
            with path.open("r", encoding="utf-8") as f:
                content = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in {path}: {e}") from e
    else:
        try:
            with path.open("r", encoding="utf-8") as f:
                content = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in {path}: {e}") from e
        # safe_load returns None for empty files
        if content is None:
            content = {}

    if not isinstance(content, dict):
        raise ValueError(f"Config root must be a mapping in {path}")
    return content


def load_app_config(path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration.

    Without an explicit path, swrcache.yaml is used when present and
    defaults otherwise. Environment variables override the cache root and
    log level after loading.

    Args:
        path: Path to app config file (None for the default path)

    Returns:
        Validated AppConfig instance

    Raises:
        FileNotFoundError: If an explicit path does not exist
        ValidationError: If config is invalid
    """
    if path is None and not AppConfig.default_path().exists():
        config = AppConfig()
    else:
        path = AppConfig.default_path() if path is None else path
        config = AppConfig.model_validate(load_config(path))
        logger.debug(f"Loaded config from {path}")

    return _apply_env_overrides(config)


def _apply_env_overrides(config: AppConfig) -> AppConfig:
    """Return a copy of config with environment overrides applied."""
    cache_updates: dict[str, Any] = {}
    logging_updates: dict[str, Any] = {}

    cache_root = os.getenv(CACHE_ROOT_ENV)
    if cache_root:
        cache_updates["cache_root"] = Path(cache_root)

    log_level = os.getenv(LOG_LEVEL_ENV)
    if log_level:
        logging_updates["level"] = log_level.upper()

    if not cache_updates and not logging_updates:
        return config

    # Re-validate so overrides go through the same field constraints
    data = config.model_dump()
    data["cache"].update(cache_updates)
    data["logging"].update(logging_updates)
    return AppConfig.model_validate(data)
