"""Decode Document Intelligence JSON payloads into typed analysis results."""

from __future__ import annotations

import math
from datetime import date, time
from typing import Any

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


def _confidence(raw: dict[str, Any]) -> float | None:
    value = raw.get("confidence")
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return float(value)


def _parse_date(value: Any) -> date | None:
    if not isinstance(value, str):
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _parse_time(value: Any) -> time | None:
    if not isinstance(value, str):
        return None
    try:
        return time.fromisoformat(value)
    except ValueError:
        return None


def _finite_float(value: Any) -> float | None:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    try:
        number = float(value)
    except OverflowError:
        return None
    return number if math.isfinite(number) else None


def _whole_number(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and math.isfinite(value) and value.is_integer():
        return int(value)
    return None


def _string_like(raw: dict[str, Any], value_key: str) -> str | None:
    value = raw.get(value_key)
    if isinstance(value, str):
        return value
    content = raw.get("content")
    return content if isinstance(content, str) else None


def decode_field(raw: Any) -> AnalyzedField:
    """
    Decode one service field into its typed variant.

    Unknown types and missing or malformed values decode to AbsentField,
    keeping the reported confidence.
    """
    if not isinstance(raw, dict):
        return AbsentField()

    confidence = _confidence(raw)
    field_type = raw.get("type")

    if field_type == "string":
        value = raw.get("valueString")
        if isinstance(value, str):
            return StringField(value=value, confidence=confidence)

    elif field_type == "phoneNumber":
        text = _string_like(raw, "valuePhoneNumber")
        if text is not None:
            return StringField(value=text, confidence=confidence)

    elif field_type == "countryRegion":
        value = raw.get("valueCountryRegion")
        if isinstance(value, str):
            return StringField(value=value, confidence=confidence)

    elif field_type == "address":
        # valueAddress is structured; the flat text lives in content
        content = raw.get("content")
        if isinstance(content, str):
            return StringField(value=content, confidence=confidence)

    elif field_type == "date":
        parsed_date = _parse_date(raw.get("valueDate"))
        if parsed_date is not None:
            return DateField(value=parsed_date, confidence=confidence)

    elif field_type == "time":
        parsed_time = _parse_time(raw.get("valueTime"))
        if parsed_time is not None:
            return TimeField(value=parsed_time, confidence=confidence)

    elif field_type == "integer":
        whole = _whole_number(raw.get("valueInteger"))
        if whole is not None:
            return IntegerField(value=whole, confidence=confidence)

    elif field_type == "number":
        number = _finite_float(raw.get("valueNumber"))
        if number is not None:
            return FloatField(value=number, confidence=confidence)

    elif field_type == "currency":
        currency = raw.get("valueCurrency")
        amount = _finite_float(currency.get("amount")) if isinstance(currency, dict) else None
        if isinstance(currency, dict) and amount is not None:
            code = currency.get("currencyCode")
            return CurrencyField(
                amount=amount,
                currency_code=code if isinstance(code, str) and code else None,
                confidence=confidence,
            )

    elif field_type == "array":
        elements = raw.get("valueArray")
        if isinstance(elements, list):
            return ListField(items=tuple(decode_field(e) for e in elements), confidence=confidence)

    elif field_type == "object":
        members = raw.get("valueObject")
        if isinstance(members, dict):
            return MappingField(
                fields={str(name): decode_field(member) for name, member in members.items()},
                confidence=confidence,
            )

    return AbsentField(confidence=confidence)


def _decode_document(raw: dict[str, Any]) -> AnalyzedDocument:
    raw_fields = raw.get("fields")
    fields: dict[str, AnalyzedField] = {}
    if isinstance(raw_fields, dict):
        fields = {str(name): decode_field(value) for name, value in raw_fields.items()}

    confidence = _confidence(raw)
    doc_type = raw.get("docType")
    return AnalyzedDocument(
        doc_type=doc_type if isinstance(doc_type, str) else "",
        confidence=confidence if confidence is not None else 0.0,
        fields=fields,
    )


def decode_analyze_result(payload: dict[str, Any]) -> AnalyzeResult:
    """
    Decode an analyze payload into an AnalyzeResult.

    Accepts either the polled operation body (with an ``analyzeResult`` key)
    or the bare ``analyzeResult`` object.

    Args:
        payload: Parsed JSON from the service

    Returns:
        Typed analysis result
    """
    body = payload.get("analyzeResult", payload)
    if not isinstance(body, dict):
        body = {}

    documents = body.get("documents")
    decoded: tuple[AnalyzedDocument, ...] = ()
    if isinstance(documents, list):
        decoded = tuple(_decode_document(d) for d in documents if isinstance(d, dict))

    model_id = body.get("modelId")
    content = body.get("content")
    return AnalyzeResult(
        model_id=model_id if isinstance(model_id, str) else "",
        content=content if isinstance(content, str) else None,
        documents=decoded,
    )
