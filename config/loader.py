"""
Configuration loader.

Loads configuration from:
1. Default values (built-in)
2. TOML config file (marketlens.toml or ~/.config/marketlens/config.toml)
3. Environment variables

Priority: env vars > config file > defaults
"""

import logging
import os
import tomllib
from functools import lru_cache
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from .schema import EngineConfig

logger = logging.getLogger(__name__)

# Config file search paths (in priority order)
CONFIG_PATHS = [
    Path("marketlens.toml"),                          # Current directory
    Path(".marketlens.toml"),                         # Hidden in current directory
    Path.home() / ".config" / "marketlens" / "config.toml",  # User config
]

# Environment variable prefix
ENV_PREFIX = "MARKETLENS_"


class ConfigError(Exception):
    """Configuration error with helpful message."""

    def __init__(self, message: str, source: str | None = None, field: str | None = None):
        self.source = source
        self.field = field
        super().__init__(message)

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.source:
            parts.append(f"Source: {self.source}")
        if self.field:
            parts.append(f"Field: {self.field}")
        return " | ".join(parts)


def _load_toml_file(path: Path) -> dict[str, Any]:
    """Load TOML file if it exists."""
    if not path.exists():
        return {}

    try:
        with open(path, "rb") as f:
            data = tomllib.load(f)
        logger.info(f"Loaded config from: {path}")
        return data
    except (tomllib.TOMLDecodeError, OSError) as e:
        raise ConfigError(f"Failed to parse TOML: {e}", source=str(path)) from e


def _find_config_file() -> Path | None:
    """Find the first existing config file."""
    for path in CONFIG_PATHS:
        if path.exists():
            return path
    return None


def _apply_env_overrides(config_data: dict[str, Any]) -> dict[str, Any]:
    """Overlay MARKETLENS_* environment variables onto file data."""
    if timeframes_env := os.environ.get(f"{ENV_PREFIX}TIMEFRAMES"):
        trend = dict(config_data.get("trend", {}))
        trend["timeframes"] = [t.strip() for t in timeframes_env.split(",") if t.strip()]
        config_data["trend"] = trend
        logger.debug(f"Timeframes overridden from environment: {trend['timeframes']}")

    if timeout_env := os.environ.get(f"{ENV_PREFIX}TIMEOUT_SECONDS"):
        try:
            timeout = float(timeout_env)
        except ValueError as e:
            raise ConfigError(
                f"Invalid timeout: {timeout_env!r}",
                source="environment",
                field="orchestrator.timeout_seconds",
            ) from e
        orchestrator = dict(config_data.get("orchestrator", {}))
        orchestrator["timeout_seconds"] = timeout
        config_data["orchestrator"] = orchestrator

    return config_data


def _deep_merge(base: dict, override: dict) -> dict:
    """Deep merge two dictionaries."""
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def validate_config(config_data: dict[str, Any], source: str | None = None) -> EngineConfig:
    """
    Validate raw configuration data.

    Raises:
        ConfigError: Naming the first invalid field
    """
    try:
        return EngineConfig(**config_data)
    except ValidationError as e:
        errors = e.errors()
        if errors:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get("loc", []))
            msg = first_error.get("msg", "Validation error")
            raise ConfigError(f"Invalid configuration: {msg}", source=source, field=field) from e
        raise ConfigError(f"Invalid configuration: {e}", source=source) from e


def merge_config(base: EngineConfig, overrides: dict[str, Any]) -> EngineConfig:
    """
    Return a new config with nested overrides applied on top of `base`.

    Example:
        >>> cfg = merge_config(EngineConfig(), {"alerts": {"rsi_overbought": 75}})
        >>> cfg.alerts.rsi_overbought
        75.0
    """
    return validate_config(_deep_merge(base.model_dump(), overrides), source="overrides")


def load_config(config_path: Path | str | None = None) -> EngineConfig:
    """
    Load and validate configuration.

    Args:
        config_path: Explicit path to config file (optional)

    Returns:
        Validated EngineConfig

    Raises:
        ConfigError: If configuration is invalid
    """
    config_data: dict[str, Any] = {}
    source = None

    # Load from config file
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {path}", source=str(path))
        config_data = _load_toml_file(path)
        source = str(path)
    else:
        found_path = _find_config_file()
        if found_path:
            config_data = _load_toml_file(found_path)
            source = str(found_path)

    config_data = _apply_env_overrides(config_data)

    return validate_config(config_data, source=source)


@lru_cache
def get_config() -> EngineConfig:
    """
    Get singleton configuration instance.

    Uses LRU cache to ensure config is loaded only once.
    """
    return load_config()


def reload_config(config_path: Path | str | None = None) -> EngineConfig:
    """
    Force reload configuration.

    Clears the cache and reloads from file/environment.
    """
    get_config.cache_clear()
    if config_path:
        return load_config(config_path)
    return get_config()
