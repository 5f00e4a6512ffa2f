"""Receipt mapping: payload decoding, field mapping and formatting."""

from receiptlens.receipt.field_mapper import (
    DEFAULT_THRESHOLDS,
    ConfidenceThresholds,
    classify,
    map_receipt,
)
from receiptlens.receipt.formatter import format_receipt_summary, receipt_to_dict
from receiptlens.receipt.payload import decode_analyze_result, decode_field

__all__ = [
    "ConfidenceThresholds",
    "DEFAULT_THRESHOLDS",
    "classify",
    "decode_analyze_result",
    "decode_field",
    "format_receipt_summary",
    "map_receipt",
    "receipt_to_dict",
]
