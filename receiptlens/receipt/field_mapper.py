"""Map a generic analysis result onto the receipt model.

The mapper never raises on content: a missing field, a low-confidence field,
or a field of an unexpected type all end up as ``None`` in the output.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from datetime import date, time
from decimal import ROUND_HALF_EVEN, Decimal, InvalidOperation

from receiptlens.domain.analyzed_document import (
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
    RECEIPT_MODEL_ID,
    ReceiptAmount,
    ReceiptAnalysisResult,
    ReceiptClassification,
    ReceiptLineItem,
    ReceiptModelInfo,
    ReceiptOcrData,
    ReceiptSummary,
)

Fields = Mapping[str, AnalyzedField]

CENTS = Decimal("0.01")

HIGH_CONFIDENCE_THRESHOLD = 0.85
MEDIUM_CONFIDENCE_THRESHOLD = 0.70
MINIMUM_FIELD_CONFIDENCE = 0.60


@dataclass(frozen=True)
class ConfidenceThresholds:
    """Confidence cut-offs used for classification and field gating."""

    high: float = HIGH_CONFIDENCE_THRESHOLD
    medium: float = MEDIUM_CONFIDENCE_THRESHOLD
    minimum_field: float = MINIMUM_FIELD_CONFIDENCE

    def __post_init__(self) -> None:
        for name in ("high", "medium", "minimum_field"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise ValueError(f"{name} confidence threshold must be within [0, 1], got {value}")
        if self.medium > self.high:
            raise ValueError(f"medium threshold ({self.medium}) must not exceed high threshold ({self.high})")


DEFAULT_THRESHOLDS = ConfidenceThresholds()


def classify(
    document: AnalyzedDocument | None,
    thresholds: ConfidenceThresholds = DEFAULT_THRESHOLDS,
) -> ReceiptClassification:
    """Classify a candidate document by its overall confidence."""
    if document is None:
        return ReceiptClassification.NOT_A_RECEIPT
    if document.confidence >= thresholds.high:
        return ReceiptClassification.LOOKS_LIKE_RECEIPT
    if document.confidence >= thresholds.medium:
        return ReceiptClassification.PROBABLY_RECEIPT
    return ReceiptClassification.UNCERTAIN


def _gated_field(
    fields: Fields | None,
    name: str,
    thresholds: ConfidenceThresholds,
) -> AnalyzedField | None:
    """Return the named field unless it is missing or below the field threshold."""
    if not fields:
        return None
    found = fields.get(name)
    if found is None:
        return None
    # An unscored field is not a low-confidence field
    if found.confidence is not None and found.confidence < thresholds.minimum_field:
        return None
    return found


def _string_value(fields: Fields | None, name: str, thresholds: ConfidenceThresholds) -> str | None:
    found = _gated_field(fields, name, thresholds)
    return found.value if isinstance(found, StringField) else None


def _date_value(fields: Fields | None, name: str, thresholds: ConfidenceThresholds) -> date | None:
    found = _gated_field(fields, name, thresholds)
    return found.value if isinstance(found, DateField) else None


def _time_value(fields: Fields | None, name: str, thresholds: ConfidenceThresholds) -> time | None:
    found = _gated_field(fields, name, thresholds)
    return found.value if isinstance(found, TimeField) else None


def _to_decimal(value: float | int) -> Decimal | None:
    if isinstance(value, int):
        return Decimal(value)
    # str() keeps the shortest float repr, so 19.5 becomes Decimal("19.5") and not its binary expansion
    number = Decimal(str(value))
    return number if number.is_finite() else None


def _to_cents(value: float | int) -> Decimal | None:
    number = _to_decimal(value)
    if number is None:
        return None
    try:
        return number.quantize(CENTS, rounding=ROUND_HALF_EVEN)
    except InvalidOperation:
        # More digits than the decimal context can hold
        return None


def _amount_value(
    fields: Fields | None, name: str, thresholds: ConfidenceThresholds
) -> ReceiptAmount | None:
    """Read a monetary field, accepting currency, float or integer values.

    Non-finite or unrepresentably large amounts count as absent.
    """
    found = _gated_field(fields, name, thresholds)
    if isinstance(found, CurrencyField):
        value = _to_cents(found.amount)
        return ReceiptAmount(value=value, currency=found.currency_code) if value is not None else None
    if isinstance(found, (FloatField, IntegerField)):
        value = _to_cents(found.value)
        return ReceiptAmount(value=value) if value is not None else None
    return None


def _quantity_value(
    fields: Fields | None, name: str, thresholds: ConfidenceThresholds
) -> Decimal | None:
    found = _gated_field(fields, name, thresholds)
    if isinstance(found, (FloatField, IntegerField)):
        return _to_decimal(found.value)
    return None


def _line_items(document: AnalyzedDocument | None, thresholds: ConfidenceThresholds) -> tuple[ReceiptLineItem, ...]:
    if document is None:
        return ()
    items_field = document.fields.get("Items")
    if not isinstance(items_field, ListField):
        return ()

    items: list[ReceiptLineItem] = []
    for element in items_field.items:
        if not isinstance(element, MappingField):
            continue

        item = ReceiptLineItem(
            description=_string_value(element.fields, "Description", thresholds),
            quantity=_quantity_value(element.fields, "Quantity", thresholds),
            unit_price=_amount_value(element.fields, "Price", thresholds),
            total_price=_amount_value(element.fields, "TotalPrice", thresholds),
            confidence=element.confidence,
        )

        has_description = item.description is not None and item.description.strip() != ""
        if has_description or item.total_price is not None:
            items.append(item)

    return tuple(items)


def map_receipt(
    result: AnalyzeResult,
    include_ocr_content: bool = False,
    thresholds: ConfidenceThresholds = DEFAULT_THRESHOLDS,
) -> ReceiptAnalysisResult:
    """
    Build a receipt record from an analysis result.

    Only the first candidate document is used. Without one, the record is
    still fully formed and classified as NOT_A_RECEIPT.

    Args:
        result: Analysis result returned by the service client
        include_ocr_content: Copy the full recognized text and document confidence
        thresholds: Classification and field gating cut-offs

    Returns:
        Immutable receipt record
    """
    document = result.first_document
    fields = document.fields if document is not None else None

    summary = ReceiptSummary(
        classification=classify(document, thresholds),
        merchant_name=_string_value(fields, "MerchantName", thresholds),
        merchant_address=_string_value(fields, "MerchantAddress", thresholds),
        merchant_phone_number=_string_value(fields, "MerchantPhoneNumber", thresholds),
        transaction_date=_date_value(fields, "TransactionDate", thresholds),
        transaction_time=_time_value(fields, "TransactionTime", thresholds),
        subtotal=_amount_value(fields, "Subtotal", thresholds),
        tax=_amount_value(fields, "TotalTax", thresholds),
        total=_amount_value(fields, "Total", thresholds),
    )

    if include_ocr_content:
        ocr = ReceiptOcrData(
            raw_text=result.content or "",
            document_confidence=document.confidence if document is not None else None,
        )
    else:
        ocr = ReceiptOcrData()

    return ReceiptAnalysisResult(
        summary=summary,
        items=_line_items(document, thresholds),
        ocr=ocr,
        model=ReceiptModelInfo(model_name=RECEIPT_MODEL_ID, model_id=result.model_id),
    )
