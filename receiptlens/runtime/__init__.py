"""Runtime infrastructure for receiptlens.

This package provides process/runtime services including:
- Logging setup via get_logger()
- Settings via load_settings(), ServiceSettings
- The Document Intelligence HTTP client

Usage:
    from receiptlens.runtime import get_logger, load_settings

    logger = get_logger(__name__)
    settings = load_settings()
"""

from receiptlens.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    set_log_level,
)
from receiptlens.runtime.settings import ServiceSettings, load_settings
from receiptlens.runtime.analysis_client import (
    AnalysisOperationFailed,
    AnalysisOperationTimeout,
    AzureDocumentIntelligenceClient,
    DocumentAnalysisClient,
)

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Settings
    "load_settings",
    "ServiceSettings",
    # Service client
    "AzureDocumentIntelligenceClient",
    "DocumentAnalysisClient",
    "AnalysisOperationFailed",
    "AnalysisOperationTimeout",
]
