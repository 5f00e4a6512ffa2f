"""Typed view of a document-analysis result.

Every field returned by the analysis service is one of the variants below.
Each variant only carries the value its type allows, so a string field can
never hold a number.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date, time
from typing import Union


@dataclass(frozen=True)
class AbsentField:
    """Field reported by the service without a usable value."""

    confidence: float | None = None


@dataclass(frozen=True)
class StringField:
    value: str
    confidence: float | None = None


@dataclass(frozen=True)
class DateField:
    value: date
    confidence: float | None = None


@dataclass(frozen=True)
class TimeField:
    value: time
    confidence: float | None = None


@dataclass(frozen=True)
class IntegerField:
    value: int
    confidence: float | None = None


@dataclass(frozen=True)
class FloatField:
    value: float
    confidence: float | None = None


@dataclass(frozen=True)
class CurrencyField:
    amount: float
    currency_code: str | None = None
    confidence: float | None = None


@dataclass(frozen=True)
class ListField:
    items: tuple[AnalyzedField, ...] = ()
    confidence: float | None = None


@dataclass(frozen=True)
class MappingField:
    fields: Mapping[str, AnalyzedField] = field(default_factory=dict)
    confidence: float | None = None


AnalyzedField = Union[
    AbsentField,
    StringField,
    DateField,
    TimeField,
    IntegerField,
    FloatField,
    CurrencyField,
    ListField,
    MappingField,
]


@dataclass(frozen=True)
class AnalyzedDocument:
    """One candidate receipt found in the analyzed image."""

    doc_type: str
    confidence: float
    fields: Mapping[str, AnalyzedField] = field(default_factory=dict)


@dataclass(frozen=True)
class AnalyzeResult:
    """Top-level result of one analysis call."""

    model_id: str = ""
    content: str | None = None
    documents: tuple[AnalyzedDocument, ...] = ()

    @property
    def first_document(self) -> AnalyzedDocument | None:
        return self.documents[0] if self.documents else None
