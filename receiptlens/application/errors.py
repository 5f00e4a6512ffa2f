"""Errors raised by the receipt image analyzer."""

from __future__ import annotations

from typing import Literal

import httpx

from receiptlens.runtime.analysis_client import AnalysisOperationFailed, AnalysisOperationTimeout

AnalysisFailureKind = Literal["transport", "authentication", "invalid_request", "unknown"]

_TRANSPORT_STATUS_CODES = frozenset({408, 429, 500, 502, 503, 504})
_AUTHENTICATION_STATUS_CODES = frozenset({401, 403})
_INVALID_REQUEST_STATUS_CODES = frozenset({400, 404, 413, 415, 422})
_INVALID_REQUEST_ERROR_CODES = frozenset(
    {
        "InvalidRequest",
        "InvalidArgument",
        "InvalidContent",
        "InvalidContentLength",
        "InvalidContentDimensions",
    }
)


class InvalidReceiptImage(ValueError):
    """Raised before any remote call when the image payload is missing or empty."""


class ReceiptAnalysisError(RuntimeError):
    """Base class for failed analysis calls. The original error is chained as __cause__."""

    kind: AnalysisFailureKind = "unknown"

    @property
    def cause(self) -> BaseException | None:
        return self.__cause__


class AnalysisTransportError(ReceiptAnalysisError):
    """The service could not be reached, timed out or was temporarily unavailable."""

    kind: AnalysisFailureKind = "transport"


class AnalysisAuthenticationError(ReceiptAnalysisError):
    """The service rejected the configured key."""

    kind: AnalysisFailureKind = "authentication"


class AnalysisInvalidRequestError(ReceiptAnalysisError):
    """The service rejected the request or the document itself."""

    kind: AnalysisFailureKind = "invalid_request"


class AnalysisUnknownError(ReceiptAnalysisError):
    kind: AnalysisFailureKind = "unknown"


def classify_failure(exc: Exception) -> ReceiptAnalysisError:
    """
    Wrap an exception from the analysis call into the matching error kind.

    The caller is expected to ``raise classify_failure(exc) from exc`` so the
    original error stays attached.
    """
    if isinstance(exc, httpx.HTTPStatusError):
        status_code = exc.response.status_code
        message = f"Analysis service returned HTTP {status_code}"
        if status_code in _AUTHENTICATION_STATUS_CODES:
            return AnalysisAuthenticationError(message)
        if status_code in _INVALID_REQUEST_STATUS_CODES:
            return AnalysisInvalidRequestError(message)
        if status_code in _TRANSPORT_STATUS_CODES:
            return AnalysisTransportError(message)
        return AnalysisUnknownError(message)

    if isinstance(exc, (httpx.TransportError, AnalysisOperationTimeout)):
        return AnalysisTransportError(f"Analysis service unavailable: {exc}")

    if isinstance(exc, AnalysisOperationFailed):
        if exc.code in _INVALID_REQUEST_ERROR_CODES:
            return AnalysisInvalidRequestError(str(exc))
        return AnalysisUnknownError(str(exc))

    return AnalysisUnknownError(f"Failed to analyze receipt image: {exc}")
