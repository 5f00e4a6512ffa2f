"""Data models for analyzed receipts."""

from dataclasses import dataclass, field
from datetime import date, time
from decimal import Decimal
from enum import Enum

RECEIPT_MODEL_ID = "prebuilt-receipt"
PROVIDER_NAME = "AzureAI"


class ReceiptClassification(Enum):
    """How likely the analyzed image is a receipt."""

    LOOKS_LIKE_RECEIPT = "looks_like_receipt"
    PROBABLY_RECEIPT = "probably_receipt"
    UNCERTAIN = "uncertain"
    NOT_A_RECEIPT = "not_a_receipt"


@dataclass(frozen=True)
class ReceiptAmount:
    """Monetary value rounded to cents."""

    value: Decimal
    # None when the service reported a plain number instead of a currency
    currency: str | None = None


@dataclass(frozen=True)
class ReceiptLineItem:
    """A single line item on a receipt."""

    description: str | None = None
    quantity: Decimal | None = None
    unit_price: ReceiptAmount | None = None
    total_price: ReceiptAmount | None = None
    # Confidence of the item row itself, recorded even when low
    confidence: float | None = None


@dataclass(frozen=True)
class ReceiptSummary:
    classification: ReceiptClassification = ReceiptClassification.NOT_A_RECEIPT
    merchant_name: str | None = None
    merchant_address: str | None = None
    merchant_phone_number: str | None = None
    transaction_date: date | None = None
    transaction_time: time | None = None
    subtotal: ReceiptAmount | None = None
    tax: ReceiptAmount | None = None
    total: ReceiptAmount | None = None


@dataclass(frozen=True)
class ReceiptOcrData:
    raw_text: str = ""
    document_confidence: float | None = None


@dataclass(frozen=True)
class ReceiptModelInfo:
    provider: str = PROVIDER_NAME
    model_name: str = RECEIPT_MODEL_ID
    # Model identifier as reported back by the service
    model_id: str = ""


@dataclass(frozen=True)
class ReceiptAnalysisResult:
    """Receipt extracted from one analysis call."""

    summary: ReceiptSummary = field(default_factory=ReceiptSummary)
    items: tuple[ReceiptLineItem, ...] = ()
    ocr: ReceiptOcrData = field(default_factory=ReceiptOcrData)
    model: ReceiptModelInfo = field(default_factory=ReceiptModelInfo)
