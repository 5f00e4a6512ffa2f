"""Shared pytest fixtures for receiptlens tests."""

from __future__ import annotations

import copy
from typing import Any

import pytest

# Trimmed prebuilt-receipt analyzeResult in the shape the service returns it
SAMPLE_ANALYZE_RESULT: dict[str, Any] = {
    "apiVersion": "2024-11-30",
    "modelId": "prebuilt-receipt",
    "content": "Contoso\n123 Main Street\nRedmond, WA 98052\n1 Surface Pro 6 $999.00\nTotal $1203.39",
    "documents": [
        {
            "docType": "receipt.retailMeal",
            "confidence": 0.92,
            "fields": {
                "MerchantName": {
                    "type": "string",
                    "valueString": "Contoso",
                    "content": "Contoso",
                    "confidence": 0.98,
                },
                "MerchantAddress": {
                    "type": "address",
                    "content": "123 Main Street\nRedmond, WA 98052",
                    "valueAddress": {"houseNumber": "123", "road": "Main Street", "city": "Redmond"},
                    "confidence": 0.95,
                },
                "MerchantPhoneNumber": {
                    "type": "phoneNumber",
                    "valuePhoneNumber": "+19876543210",
                    "content": "987-654-3210",
                    "confidence": 0.88,
                },
                "TransactionDate": {"type": "date", "valueDate": "2019-06-10", "confidence": 0.97},
                "TransactionTime": {"type": "time", "valueTime": "13:59:00", "confidence": 0.96},
                "Subtotal": {
                    "type": "currency",
                    "valueCurrency": {"amount": 1098.99, "currencyCode": "USD", "currencySymbol": "$"},
                    "confidence": 0.97,
                },
                "TotalTax": {
                    "type": "currency",
                    "valueCurrency": {"amount": 104.4, "currencyCode": "USD"},
                    "confidence": 0.55,
                },
                "Total": {"type": "number", "valueNumber": 1203.39, "confidence": 0.93},
                "Items": {
                    "type": "array",
                    "valueArray": [
                        {
                            "type": "object",
                            "confidence": 0.91,
                            "valueObject": {
                                "Description": {
                                    "type": "string",
                                    "valueString": "Surface Pro 6",
                                    "confidence": 0.95,
                                },
                                "Quantity": {"type": "number", "valueNumber": 1, "confidence": 0.9},
                                "TotalPrice": {
                                    "type": "currency",
                                    "valueCurrency": {"amount": 999.0, "currencyCode": "USD"},
                                    "confidence": 0.94,
                                },
                            },
                        },
                        {
                            "type": "object",
                            "confidence": 0.42,
                            "valueObject": {
                                "Description": {
                                    "type": "string",
                                    "valueString": "SurfacePen",
                                    "confidence": 0.81,
                                },
                                "Quantity": {"type": "integer", "valueInteger": 2, "confidence": 0.77},
                                "Price": {"type": "number", "valueNumber": 49.995, "confidence": 0.7},
                            },
                        },
                        {"type": "object", "confidence": 0.3, "valueObject": {}},
                    ],
                },
            },
        }
    ],
}


@pytest.fixture
def analyze_result_payload() -> dict[str, Any]:
    """A fresh copy of the sample analyzeResult body."""
    return copy.deepcopy(SAMPLE_ANALYZE_RESULT)


@pytest.fixture
def operation_payload(analyze_result_payload: dict[str, Any]) -> dict[str, Any]:
    """The sample result wrapped in a succeeded operation body, as returned when polling."""
    return {
        "status": "succeeded",
        "createdDateTime": "2024-11-30T10:00:00Z",
        "lastUpdatedDateTime": "2024-11-30T10:00:03Z",
        "analyzeResult": analyze_result_payload,
    }
