"""Tests for mapping analysis results onto the receipt model."""

from __future__ import annotations

from datetime import date, time
from decimal import Decimal

import pytest

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
    ReceiptAmount,
    ReceiptClassification,
    ReceiptOcrData,
    ReceiptSummary,
)
from receiptlens.receipt.field_mapper import ConfidenceThresholds, classify, map_receipt


def _document(confidence: float = 0.9, **fields: AnalyzedField) -> AnalyzedDocument:
    return AnalyzedDocument(doc_type="receipt.retailMeal", confidence=confidence, fields=fields)


def _result(*documents: AnalyzedDocument, content: str | None = "RAW TEXT") -> AnalyzeResult:
    return AnalyzeResult(model_id="prebuilt-receipt", content=content, documents=documents)


def _item(confidence: float | None = 0.9, **fields: AnalyzedField) -> MappingField:
    return MappingField(fields=fields, confidence=confidence)


def _items_of(*elements: AnalyzedField) -> AnalyzeResult:
    return _result(_document(Items=ListField(items=elements, confidence=0.9)))


@pytest.mark.parametrize(
    ("confidence", "expected"),
    [
        (1.0, ReceiptClassification.LOOKS_LIKE_RECEIPT),
        (0.85, ReceiptClassification.LOOKS_LIKE_RECEIPT),
        (0.8499, ReceiptClassification.PROBABLY_RECEIPT),
        (0.70, ReceiptClassification.PROBABLY_RECEIPT),
        (0.6999, ReceiptClassification.UNCERTAIN),
        (0.60, ReceiptClassification.UNCERTAIN),
        (0.0, ReceiptClassification.UNCERTAIN),
    ],
)
def test_classification_partitions_confidence(confidence: float, expected: ReceiptClassification) -> None:
    assert classify(_document(confidence)) == expected
    assert map_receipt(_result(_document(confidence))).summary.classification == expected


def test_classification_without_document_is_not_a_receipt() -> None:
    assert classify(None) == ReceiptClassification.NOT_A_RECEIPT


def test_custom_thresholds_keep_medium_and_field_gate_separate() -> None:
    thresholds = ConfidenceThresholds(high=0.95, medium=0.5, minimum_field=0.8)
    result = map_receipt(
        _result(_document(0.6, MerchantName=StringField("Contoso", confidence=0.7))),
        thresholds=thresholds,
    )

    assert result.summary.classification == ReceiptClassification.PROBABLY_RECEIPT
    assert result.summary.merchant_name is None


@pytest.mark.parametrize(
    "kwargs",
    [
        {"high": 1.2},
        {"minimum_field": -0.1},
        {"high": 0.6, "medium": 0.7},
    ],
)
def test_invalid_thresholds_are_rejected(kwargs: dict[str, float]) -> None:
    with pytest.raises(ValueError):
        ConfidenceThresholds(**kwargs)


def test_no_documents_yields_empty_not_a_receipt_record() -> None:
    result = map_receipt(_result(content="some text"))

    assert result.summary == ReceiptSummary(classification=ReceiptClassification.NOT_A_RECEIPT)
    assert result.items == ()
    assert result.ocr == ReceiptOcrData()
    assert result.model.provider == "AzureAI"
    assert result.model.model_name == "prebuilt-receipt"


def test_no_documents_with_ocr_requested_copies_text_only() -> None:
    result = map_receipt(_result(content="some text"), include_ocr_content=True)

    assert result.summary.classification == ReceiptClassification.NOT_A_RECEIPT
    assert result.ocr.raw_text == "some text"
    assert result.ocr.document_confidence is None


def test_only_first_document_is_used() -> None:
    first = _document(0.75, MerchantName=StringField("First", confidence=0.9))
    second = _document(0.99, MerchantName=StringField("Second", confidence=0.9))

    result = map_receipt(_result(first, second))

    assert result.summary.merchant_name == "First"
    assert result.summary.classification == ReceiptClassification.PROBABLY_RECEIPT


def test_summary_fields_are_extracted_by_type() -> None:
    document = _document(
        MerchantName=StringField("Contoso", confidence=0.9),
        MerchantAddress=StringField("1 Main St", confidence=0.9),
        MerchantPhoneNumber=StringField("+1 555 0100", confidence=0.9),
        TransactionDate=DateField(date(2024, 3, 1), confidence=0.9),
        TransactionTime=TimeField(time(13, 59), confidence=0.9),
        Subtotal=CurrencyField(10.0, "USD", confidence=0.9),
        TotalTax=FloatField(0.8, confidence=0.9),
        Total=IntegerField(11, confidence=0.9),
    )

    summary = map_receipt(_result(document)).summary

    assert summary.merchant_name == "Contoso"
    assert summary.merchant_address == "1 Main St"
    assert summary.merchant_phone_number == "+1 555 0100"
    assert summary.transaction_date == date(2024, 3, 1)
    assert summary.transaction_time == time(13, 59)
    assert summary.subtotal == ReceiptAmount(Decimal("10.00"), "USD")
    assert summary.tax == ReceiptAmount(Decimal("0.80"))
    assert summary.total == ReceiptAmount(Decimal("11.00"))


@pytest.mark.parametrize(
    "low_field",
    [
        StringField("Contoso", confidence=0.59),
        DateField(date(2024, 1, 1), confidence=0.1),
        TimeField(time(9, 0), confidence=0.0),
        CurrencyField(5.0, "USD", confidence=0.5999),
        FloatField(5.0, confidence=0.3),
        IntegerField(5, confidence=0.2),
    ],
)
def test_low_confidence_fields_are_absent(low_field: AnalyzedField) -> None:
    document = _document(
        MerchantName=low_field,
        TransactionDate=low_field,
        TransactionTime=low_field,
        Total=low_field,
    )

    summary = map_receipt(_result(document)).summary

    assert summary.merchant_name is None
    assert summary.transaction_date is None
    assert summary.transaction_time is None
    assert summary.total is None


def test_field_at_exact_minimum_confidence_is_kept() -> None:
    result = map_receipt(_result(_document(MerchantName=StringField("Contoso", confidence=0.60))))
    assert result.summary.merchant_name == "Contoso"


def test_unscored_field_is_not_treated_as_low_confidence() -> None:
    result = map_receipt(_result(_document(MerchantName=StringField("Contoso", confidence=None))))
    assert result.summary.merchant_name == "Contoso"


def test_wrong_typed_fields_are_absent() -> None:
    document = _document(
        MerchantName=IntegerField(42, confidence=0.99),
        MerchantAddress=AbsentField(confidence=0.99),
        TransactionDate=StringField("2024-03-01", confidence=0.99),
        TransactionTime=DateField(date(2024, 3, 1), confidence=0.99),
        Subtotal=StringField("10.00", confidence=0.99),
        Total=ListField(items=(), confidence=0.99),
    )

    summary = map_receipt(_result(document)).summary

    assert summary.merchant_name is None
    assert summary.merchant_address is None
    assert summary.transaction_date is None
    assert summary.transaction_time is None
    assert summary.subtotal is None
    assert summary.total is None


def test_currency_amount_is_rounded_to_cents_with_code() -> None:
    result = map_receipt(_result(_document(Total=CurrencyField(19.999, "USD", confidence=0.9))))
    assert result.summary.total == ReceiptAmount(Decimal("20.00"), "USD")


def test_float_amount_is_rounded_without_code() -> None:
    total = map_receipt(_result(_document(Total=FloatField(19.5, confidence=0.9)))).summary.total

    assert total == ReceiptAmount(Decimal("19.50"))
    assert str(total.value) == "19.50"
    assert total.currency is None


def test_integer_amount_has_two_places_without_code() -> None:
    total = map_receipt(_result(_document(Total=IntegerField(20, confidence=0.9)))).summary.total

    assert total == ReceiptAmount(Decimal("20.00"))
    assert str(total.value) == "20.00"


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (0.125, "0.12"),
        (0.135, "0.14"),
        (2.675, "2.68"),
        (2.665, "2.66"),
    ],
)
def test_amounts_round_half_to_even(amount: float, expected: str) -> None:
    total = map_receipt(_result(_document(Total=FloatField(amount, confidence=0.9)))).summary.total
    assert str(total.value) == expected


def test_line_items_extract_fields_and_keep_item_confidence() -> None:
    result = map_receipt(
        _items_of(
            _item(
                confidence=0.2,
                Description=StringField("Coffee", confidence=0.9),
                Quantity=FloatField(2.0, confidence=0.9),
                Price=CurrencyField(3.5, "USD", confidence=0.9),
                TotalPrice=CurrencyField(7.0, "USD", confidence=0.9),
            )
        )
    )

    assert len(result.items) == 1
    item = result.items[0]
    assert item.description == "Coffee"
    assert item.quantity == Decimal("2.0")
    assert item.unit_price == ReceiptAmount(Decimal("3.50"), "USD")
    assert item.total_price == ReceiptAmount(Decimal("7.00"), "USD")
    assert item.confidence == 0.2


def test_line_item_quantity_accepts_numbers_but_never_currency() -> None:
    result = map_receipt(
        _items_of(
            _item(Description=StringField("A", confidence=0.9), Quantity=IntegerField(3, confidence=0.9)),
            _item(Description=StringField("B", confidence=0.9), Quantity=FloatField(1.25, confidence=0.9)),
            _item(Description=StringField("C", confidence=0.9), Quantity=CurrencyField(2.0, "USD", confidence=0.9)),
            _item(Description=StringField("D", confidence=0.9), Quantity=FloatField(4.0, confidence=0.1)),
        )
    )

    assert [item.quantity for item in result.items] == [Decimal(3), Decimal("1.25"), None, None]


def test_line_item_with_description_and_no_total_is_kept() -> None:
    result = map_receipt(_items_of(_item(Description=StringField("Tea", confidence=0.9))))

    assert len(result.items) == 1
    assert result.items[0].description == "Tea"
    assert result.items[0].total_price is None


def test_line_item_with_total_and_no_description_is_kept() -> None:
    result = map_receipt(_items_of(_item(TotalPrice=IntegerField(4, confidence=0.9))))

    assert len(result.items) == 1
    assert result.items[0].description is None
    assert result.items[0].total_price == ReceiptAmount(Decimal("4.00"))


@pytest.mark.parametrize(
    "element",
    [
        _item(),
        _item(Description=StringField("", confidence=0.9)),
        _item(Description=StringField("   ", confidence=0.9)),
        _item(Description=StringField("Hidden", confidence=0.3), TotalPrice=FloatField(1.0, confidence=0.3)),
    ],
)
def test_empty_line_items_are_dropped(element: MappingField) -> None:
    assert map_receipt(_items_of(element)).items == ()


def test_non_mapping_elements_are_skipped_without_affecting_siblings() -> None:
    result = map_receipt(
        _items_of(
            _item(Description=StringField("Bagel", confidence=0.9)),
            StringField("not an item", confidence=0.9),
            AbsentField(confidence=0.9),
            _item(Description=StringField("Juice", confidence=0.9)),
        )
    )

    assert [item.description for item in result.items] == ["Bagel", "Juice"]


def test_items_field_that_is_not_a_list_yields_no_items() -> None:
    document = _document(Items=MappingField(fields={"Description": StringField("x", confidence=0.9)}, confidence=0.9))
    assert map_receipt(_result(document)).items == ()


def test_ocr_content_is_passed_through_only_when_requested() -> None:
    result = _result(_document(0.77), content="Contoso\nTotal 10.00")

    with_ocr = map_receipt(result, include_ocr_content=True)
    without_ocr = map_receipt(result)

    assert with_ocr.ocr == ReceiptOcrData(raw_text="Contoso\nTotal 10.00", document_confidence=0.77)
    assert without_ocr.ocr == ReceiptOcrData()


def test_missing_content_becomes_empty_raw_text() -> None:
    result = map_receipt(_result(_document(0.9), content=None), include_ocr_content=True)
    assert result.ocr.raw_text == ""
    assert result.ocr.document_confidence == 0.9


def test_model_info_reports_service_model_id() -> None:
    result = map_receipt(AnalyzeResult(model_id="prebuilt-receipt:2024-11-30", documents=()))

    assert result.model.model_id == "prebuilt-receipt:2024-11-30"
    assert result.model.model_name == "prebuilt-receipt"


def test_mapping_is_deterministic() -> None:
    result = _result(
        _document(
            0.9,
            MerchantName=StringField("Contoso", confidence=0.9),
            Total=CurrencyField(12.345, "EUR", confidence=0.9),
            Items=ListField(items=(_item(Description=StringField("X", confidence=0.9)),), confidence=0.9),
        )
    )

    assert map_receipt(result, include_ocr_content=True) == map_receipt(result, include_ocr_content=True)


@pytest.mark.parametrize(
    "total",
    [
        FloatField(1e27, confidence=0.9),
        FloatField(float("inf"), confidence=0.9),
        FloatField(float("-inf"), confidence=0.9),
        FloatField(float("nan"), confidence=0.9),
        CurrencyField(1e27, "USD", confidence=0.9),
        CurrencyField(float("inf"), "USD", confidence=0.9),
        CurrencyField(float("nan"), "USD", confidence=0.9),
        IntegerField(10**30, confidence=0.9),
    ],
)
def test_unrepresentable_amounts_are_absent(total: AnalyzedField) -> None:
    result = map_receipt(_result(_document(Total=total, Subtotal=FloatField(12.5, confidence=0.9))))

    assert result.summary.total is None
    assert result.summary.subtotal == ReceiptAmount(Decimal("12.50"))


def test_largest_representable_amount_is_kept() -> None:
    result = map_receipt(_result(_document(Total=IntegerField(10**25, confidence=0.9))))

    assert result.summary.total == ReceiptAmount(Decimal(10**25).quantize(Decimal("0.01")))


def test_non_finite_line_item_numbers_are_absent() -> None:
    result = map_receipt(
        _items_of(
            _item(
                Description=StringField("Flour", confidence=0.9),
                Quantity=FloatField(float("nan"), confidence=0.9),
                Price=FloatField(1e27, confidence=0.9),
                TotalPrice=CurrencyField(float("inf"), "USD", confidence=0.9),
            ),
            _item(
                Description=StringField("Sugar", confidence=0.9),
                Quantity=FloatField(float("inf"), confidence=0.9),
            ),
            _item(
                Description=StringField("Rice", confidence=0.9),
                Quantity=FloatField(1e27, confidence=0.9),
            ),
        )
    )

    flour, sugar, rice = result.items
    assert (flour.quantity, flour.unit_price, flour.total_price) == (None, None, None)
    assert sugar.quantity is None
    assert rice.quantity == Decimal("1e27")
