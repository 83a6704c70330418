"""
Configuration management for frog-finder.

Loads configuration from YAML with ZERO defaults.
Every value must be explicitly specified or loading fails.
"""

from __future__ import annotations

import os
import re
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

__all__ = [
    "BatchConfig",
    "ConfigurationError",
    "DetectorConfig",
    "LoggingConfig",
    "MatchingConfig",
    "REDACTION_MARKER",
    "ServiceConfig",
    "Settings",
    "clear_settings_cache",
    "get_config_path",
    "get_safe_config",
    "get_settings",
    "is_sensitive_key",
    "load_settings",
    "load_yaml_config",
    "redact_sensitive_values",
]

CONFIG_ENV_VAR = "FROG_FINDER_CONFIG"
DEFAULT_CONFIG_FILENAME = "config.yaml"

# Keys containing any of these (case-insensitive) are redacted from dumps
SENSITIVE_KEYWORDS: frozenset[str] = frozenset(
    {"key", "secret", "password", "token", "credential", "auth", "private"}
)

_SENSITIVE_PATTERN = re.compile(
    r"(" + "|".join(re.escape(kw) for kw in SENSITIVE_KEYWORDS) + r")",
    re.IGNORECASE,
)

REDACTION_MARKER = "[REDACTED]"


class ConfigurationError(Exception):
    """Raised when configuration is invalid or missing."""

    pass


class ServiceConfig(BaseModel):
    """Application identity configuration."""

    model_config = ConfigDict(extra="forbid")

    name: str
    version: str


class DetectorConfig(BaseModel):
    """SIFT feature detector configuration."""

    model_config = ConfigDict(extra="forbid")

    max_points: int = Field(ge=2)
    target_threshold: float = Field(ge=0.0)
    standard_threshold: float = Field(ge=0.0)
    n_octave_layers: int = Field(ge=1)
    edge_threshold: float = Field(gt=0.0)
    sigma: float = Field(gt=0.0)


class MatchingConfig(BaseModel):
    """Ratio test configuration."""

    model_config = ConfigDict(extra="forbid")

    ratio: float = Field(gt=0.0, le=1.0)


class BatchConfig(BaseModel):
    """Batch execution configuration."""

    model_config = ConfigDict(extra="forbid")

    workers: int = Field(ge=1)
    best_only: bool


class LoggingConfig(BaseModel):
    """Logging configuration."""

    model_config = ConfigDict(extra="forbid")

    level: str


class Settings(BaseModel):
    """
    Root configuration container.

    All fields are REQUIRED. No defaults exist.
    Missing fields cause immediate failure.

    Usage:
        from frog_finder.config import get_settings
        settings = get_settings()
    """

    model_config = ConfigDict(extra="forbid")

    service: ServiceConfig
    detector: DetectorConfig
    matching: MatchingConfig
    batch: BatchConfig
    logging: LoggingConfig


def load_yaml_config(config_path: Path) -> dict[str, Any]:
    """
    Load and parse YAML configuration file.

    Args:
        config_path: Path to config.yaml

    Returns:
        Parsed configuration dictionary

    Raises:
        ConfigurationError: If file is missing, empty, or invalid
    """
    if not config_path.exists():
        raise ConfigurationError(
            f"Configuration file not found: {config_path}\n"
            f"Expected location: {config_path.absolute()}\n"
            f"Create the file or set {CONFIG_ENV_VAR} environment variable."
        )

    try:
        with config_path.open() as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {config_path}: {e}") from e

    if config is None:
        raise ConfigurationError(
            f"Configuration file is empty: {config_path}\n"
            f"All configuration values must be explicitly specified."
        )

    if not isinstance(config, dict):
        raise ConfigurationError(
            f"Configuration must be a YAML mapping, got {type(config).__name__}"
        )

    return config


def load_settings(yaml_config: dict[str, Any]) -> Settings:
    """
    Build typed settings from raw YAML config.

    Args:
        yaml_config: Parsed YAML configuration

    Returns:
        Validated settings

    Raises:
        ConfigurationError: If validation fails
    """
    try:
        return Settings(**yaml_config)
    except ValidationError as e:
        raise ConfigurationError(
            f"Configuration validation failed: {e}\n"
            f"All configuration values must be explicitly specified.\n"
            f"No default values are allowed."
        ) from e


def get_config_path() -> Path:
    """
    Determine configuration file path.

    Uses FROG_FINDER_CONFIG environment variable if set, otherwise defaults
    to ./config.yaml relative to working directory.

    Returns:
        Path to configuration file
    """
    config_path_str = os.environ.get(CONFIG_ENV_VAR)
    if config_path_str is None:
        config_path_str = DEFAULT_CONFIG_FILENAME
    return Path(config_path_str)


@lru_cache
def get_settings() -> Settings:
    """Load and cache settings from the resolved configuration path."""
    return load_settings(load_yaml_config(get_config_path()))


def clear_settings_cache() -> None:
    """Drop cached settings so the next call reloads from disk."""
    get_settings.cache_clear()


def is_sensitive_key(key: str) -> bool:
    """Check whether a configuration key names sensitive data."""
    return bool(_SENSITIVE_PATTERN.search(key))


def redact_sensitive_values(data: dict[str, Any], redaction_marker: str) -> dict[str, Any]:
    """
    Recursively redact sensitive values from a configuration mapping.

    Args:
        data: Configuration dictionary
        redaction_marker: String that replaces sensitive values

    Returns:
        New dictionary with sensitive values redacted
    """
    result: dict[str, Any] = {}

    for key, value in data.items():
        if is_sensitive_key(key):
            result[key] = redaction_marker
        elif isinstance(value, dict):
            result[key] = redact_sensitive_values(value, redaction_marker)
        elif isinstance(value, list):
            result[key] = [
                redact_sensitive_values(item, redaction_marker) if isinstance(item, dict) else item
                for item in value
            ]
        else:
            result[key] = value

    return result


def get_safe_config(settings: Settings | None = None) -> dict[str, Any]:
    """
    Dump configuration with sensitive values redacted.

    Args:
        settings: Settings to dump; the cached settings when omitted

    Returns:
        Configuration dictionary safe for logging
    """
    if settings is None:
        settings = get_settings()
    return redact_sensitive_values(settings.model_dump(), REDACTION_MARKER)
