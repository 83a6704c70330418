"""
Shared test configuration and fixtures.

This file contains pytest configuration that applies to all tests,
both unit and integration.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

import pytest
import yaml

from frog_finder.config import Settings, clear_settings_cache
from frog_finder.logging import LOGGER_NAME

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path


@pytest.fixture
def config_dict() -> dict[str, Any]:
    """Complete, valid configuration mapping."""
    return {
        "service": {"name": "frog_finder", "version": "0.1.0"},
        "detector": {
            "max_points": 50,
            "target_threshold": 0.04,
            "standard_threshold": 0.0,
            "n_octave_layers": 3,
            "edge_threshold": 10.0,
            "sigma": 1.6,
        },
        "matching": {"ratio": 0.6},
        "batch": {"workers": 1, "best_only": True},
        "logging": {"level": "WARNING"},
    }


@pytest.fixture
def settings(config_dict: dict[str, Any]) -> Settings:
    """Validated settings built from config_dict."""
    return Settings(**config_dict)


@pytest.fixture
def config_file(tmp_path: Path, config_dict: dict[str, Any]) -> Path:
    """config_dict written to a YAML file."""
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump(config_dict))
    return path


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Iterator[None]:
    """Ensure no cached settings leak between tests."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture(autouse=True)
def _restore_package_logger() -> Iterator[None]:
    """Undo handler and level changes made by setup_logging."""
    yield
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
