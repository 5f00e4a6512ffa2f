"""Receipt workflows."""

from receiptlens.application.receipts.analyze import (
    ReceiptAnalysisOutcome,
    ReceiptAnalysisRequest,
    run_receipt_analysis,
)

__all__ = [
    "ReceiptAnalysisOutcome",
    "ReceiptAnalysisRequest",
    "run_receipt_analysis",
]
