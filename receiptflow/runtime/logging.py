"""Centralized logging configuration for receiptflow.

Usage:
    from receiptflow.runtime import get_logger
    logger = get_logger(__name__)

    logger.info("Sending receipt text to extraction service...")

Environment variables:
    RECEIPTFLOW_LOG_LEVEL: Set log level (DEBUG, INFO, WARNING, ERROR). Default: INFO
"""

import logging
import os
import sys

DEFAULT_LOG_LEVEL = logging.INFO

LOG_NAMESPACE = "receiptflow"
LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_LEVEL_MAP = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_logging_configured = False


def configure_logging(level: int | None = None) -> None:
    """Configure the receiptflow logger namespace.

    Args:
        level: Log level to use. If None, reads from RECEIPTFLOW_LOG_LEVEL env var
               or uses DEFAULT_LOG_LEVEL.
    """
    global _logging_configured

    if _logging_configured:
        return

    if level is None:
        env_level = os.environ.get("RECEIPTFLOW_LOG_LEVEL", "").upper()
        level = _LEVEL_MAP.get(env_level, DEFAULT_LOG_LEVEL)

    log_format = LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(log_format))

    root_logger = logging.getLogger(LOG_NAMESPACE)
    root_logger.setLevel(level)
    root_logger.addHandler(handler)
    root_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given module name.

    Module names already inside the receiptflow package are used as-is.
    """
    configure_logging()

    if name == LOG_NAMESPACE or name.startswith(f"{LOG_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOG_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the log level at runtime."""
    logger = logging.getLogger(LOG_NAMESPACE)
    logger.setLevel(level)

    for handler in logger.handlers:
        if level == logging.DEBUG:
            handler.setFormatter(logging.Formatter(LOG_FORMAT_DEBUG))
        else:
            handler.setFormatter(logging.Formatter(LOG_FORMAT))
