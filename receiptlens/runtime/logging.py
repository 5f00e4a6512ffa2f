"""Logging for the receiptlens namespace.

Modules call ``get_logger(__name__)``. The level comes from
RECEIPTLENS_LOG_LEVEL (DEBUG, INFO, WARNING, ERROR; default INFO) and the
CLI raises it to DEBUG with ``--verbose``.
"""

import logging
import os
import sys

LOGGER_NAMESPACE = "receiptlens"

DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

LOG_LEVEL_ENV = "RECEIPTLENS_LOG_LEVEL"

_ENV_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "WARN": logging.WARNING,
    "ERROR": logging.ERROR,
}

_logging_configured = False


def _level_from_env() -> int:
    return _ENV_LEVELS.get(os.environ.get(LOG_LEVEL_ENV, "").strip().upper(), DEFAULT_LOG_LEVEL)


def configure_logging(level: int | None = None) -> None:
    """Attach a stderr handler to the namespace once.

    Args:
        level: Log level to use. Defaults to RECEIPTLENS_LOG_LEVEL, else INFO.
    """
    global _logging_configured

    if _logging_configured:
        return

    if level is None:
        level = _level_from_env()

    log_format = LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(log_format))

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(level)
    namespace_logger.addHandler(handler)
    namespace_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the receiptlens namespace, configuring it on first use."""
    configure_logging()

    # Module names already live under the namespace
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int) -> None:
    """Change the namespace level, switching to the line-numbered format for DEBUG."""
    logger = logging.getLogger(LOGGER_NAMESPACE)
    logger.setLevel(level)

    log_format = LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT
    for handler in logger.handlers:
        handler.setFormatter(logging.Formatter(log_format))
