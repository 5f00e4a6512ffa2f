"""Core domain models for receiptlens.

This module provides the core data models used throughout the project:
- AnalyzeResult, AnalyzedDocument and the AnalyzedField variants: service input
- ReceiptAnalysisResult and its parts: mapped receipt output

Usage:
    from receiptlens.domain import AnalyzeResult, ReceiptAnalysisResult
"""

from receiptlens.domain.analyzed_document import (
    AbsentField,
    AnalyzedDocument,
    AnalyzedField,
    AnalyzeResult,
    CurrencyField,
    DateField,
    FloatField,
    IntegerField,
    ListField,
    MappingField,
    StringField,
    TimeField,
)
from receiptlens.domain.receipt import (
    PROVIDER_NAME,
    RECEIPT_MODEL_ID,
    ReceiptAmount,
    ReceiptAnalysisResult,
    ReceiptClassification,
    ReceiptLineItem,
    ReceiptModelInfo,
    ReceiptOcrData,
    ReceiptSummary,
)

__all__ = [
    # Service input
    "AbsentField",
    "AnalyzedDocument",
    "AnalyzedField",
    "AnalyzeResult",
    "CurrencyField",
    "DateField",
    "FloatField",
    "IntegerField",
    "ListField",
    "MappingField",
    "StringField",
    "TimeField",
    # Receipt output
    "PROVIDER_NAME",
    "RECEIPT_MODEL_ID",
    "ReceiptAmount",
    "ReceiptAnalysisResult",
    "ReceiptClassification",
    "ReceiptLineItem",
    "ReceiptModelInfo",
    "ReceiptOcrData",
    "ReceiptSummary",
]
