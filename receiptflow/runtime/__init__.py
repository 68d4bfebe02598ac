"""Runtime infrastructure for receiptflow.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Path resolution via get_paths(), ProjectPaths
- Extraction settings via load_settings(), ExtractionSettings

Usage:
    from receiptflow.runtime import get_logger, get_paths, load_settings

    logger = get_logger(__name__)
    settings = load_settings()
"""

from receiptflow.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from receiptflow.runtime.paths import ProjectPaths, get_paths, reset_paths
from receiptflow.runtime.settings import ExtractionSettings, load_settings

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
    # Settings
    "ExtractionSettings",
    "load_settings",
]
