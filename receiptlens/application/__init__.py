"""Application layer: the receipt image analyzer and its workflows."""

from receiptlens.application.analyzer import ReceiptImageAnalyzer
from receiptlens.application.errors import (
    AnalysisAuthenticationError,
    AnalysisFailureKind,
    AnalysisInvalidRequestError,
    AnalysisTransportError,
    AnalysisUnknownError,
    InvalidReceiptImage,
    ReceiptAnalysisError,
)

__all__ = [
    "ReceiptImageAnalyzer",
    "AnalysisFailureKind",
    "ReceiptAnalysisError",
    "AnalysisTransportError",
    "AnalysisAuthenticationError",
    "AnalysisInvalidRequestError",
    "AnalysisUnknownError",
    "InvalidReceiptImage",
]
