"""Async HTTP client for the Document Intelligence analyze operation.

Submits a document, then polls the long-running operation until the service
reports a final status. Failed requests are not retried.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Protocol

import httpx

from receiptlens.domain.analyzed_document import AnalyzeResult
from receiptlens.receipt.payload import decode_analyze_result
from receiptlens.runtime.logging import get_logger
from receiptlens.runtime.settings import (
    DEFAULT_API_VERSION,
    DEFAULT_POLL_INTERVAL,
    DEFAULT_POLL_TIMEOUT,
    DEFAULT_REQUEST_TIMEOUT,
)

logger = get_logger(__name__)

API_KEY_HEADER = "Ocp-Apim-Subscription-Key"


class DocumentAnalysisClient(Protocol):
    """Capability the analyzer needs from a document-analysis service."""

    async def analyze(self, model_id: str, document: bytes) -> AnalyzeResult: ...


class AnalysisOperationFailed(RuntimeError):
    """Raised when the service finishes an analyze operation unsuccessfully."""

    def __init__(self, status: str, code: str | None = None, message: str | None = None) -> None:
        self.status = status
        self.code = code
        self.message = message
        detail = f"{code}: {message}" if code else (message or "no error details")
        super().__init__(f"Analyze operation {status}: {detail}")


class AnalysisOperationTimeout(RuntimeError):
    """Raised when an analyze operation does not settle within the poll timeout."""


def _error_details(payload: Any) -> tuple[str | None, str | None]:
    """Return (code, message), preferring the innermost error the service reports."""
    if not isinstance(payload, dict):
        return None, None
    error = payload.get("error")
    if not isinstance(error, dict):
        return None, None
    inner = error.get("innererror")
    if isinstance(inner, dict) and inner.get("code"):
        return str(inner.get("code")), inner.get("message") or error.get("message")
    code = error.get("code")
    return (str(code) if code else None), error.get("message")


def _retry_after(response: httpx.Response, default: float) -> float:
    value = response.headers.get("retry-after")
    if value is None:
        return default
    try:
        return max(float(value), 0.0)
    except ValueError:
        return default


class AzureDocumentIntelligenceClient:
    """Minimal REST client for ``documentModels/{model_id}:analyze``."""

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        *,
        api_version: str = DEFAULT_API_VERSION,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
        poll_timeout: float = DEFAULT_POLL_TIMEOUT,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not endpoint or not endpoint.strip():
            raise ValueError("endpoint must not be blank")
        if not api_key or not api_key.strip():
            raise ValueError("api_key must not be blank")

        self.endpoint = endpoint.strip().rstrip("/")
        self.api_version = api_version
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self._http = httpx.AsyncClient(
            headers={API_KEY_HEADER: api_key.strip()},
            timeout=request_timeout,
            transport=transport,
        )

    def _analyze_url(self, model_id: str) -> str:
        return f"{self.endpoint}/documentintelligence/documentModels/{model_id}:analyze"

    async def analyze(self, model_id: str, document: bytes) -> AnalyzeResult:
        """
        Analyze a document and wait for the operation to complete.

        Args:
            model_id: Document model to run, e.g. "prebuilt-receipt"
            document: Raw document bytes

        Returns:
            Decoded analysis result

        Raises:
            httpx.HTTPStatusError: The service rejected a request
            httpx.TransportError: The service could not be reached
            AnalysisOperationFailed: The operation finished as failed or canceled
            AnalysisOperationTimeout: The operation did not finish in time
        """
        logger.info("Submitting %d bytes to model %s", len(document), model_id)
        start_time = time.monotonic()

        response = await self._http.post(
            self._analyze_url(model_id),
            params={"api-version": self.api_version},
            content=document,
            headers={"Content-Type": "application/octet-stream"},
        )
        response.raise_for_status()

        operation_url = response.headers.get("operation-location")
        if response.status_code != 202 or not operation_url:
            # Some gateways answer synchronously with the final body
            payload = response.json()
            return self._settle(payload, start_time)

        deadline = start_time + self.poll_timeout
        delay = _retry_after(response, self.poll_interval)
        while True:
            if time.monotonic() + delay > deadline:
                raise AnalysisOperationTimeout(
                    f"Analyze operation did not complete within {self.poll_timeout:.0f} seconds"
                )
            await asyncio.sleep(delay)

            poll = await self._http.get(operation_url)
            poll.raise_for_status()
            payload = poll.json()
            status = payload.get("status") if isinstance(payload, dict) else None
            logger.debug("Analyze operation status: %s", status)

            if status in ("notStarted", "running"):
                delay = _retry_after(poll, self.poll_interval)
                continue
            return self._settle(payload, start_time)

    def _settle(self, payload: Any, start_time: float) -> AnalyzeResult:
        status = payload.get("status", "succeeded") if isinstance(payload, dict) else None
        if status != "succeeded":
            code, message = _error_details(payload)
            raise AnalysisOperationFailed(str(status), code, message)

        elapsed_time = time.monotonic() - start_time
        logger.info("Analyze operation completed in %.2f seconds", elapsed_time)
        return decode_analyze_result(payload)

    async def aclose(self) -> None:
        await self._http.aclose()

    async def __aenter__(self) -> AzureDocumentIntelligenceClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
