"""Analyze receipt images with the prebuilt receipt model."""

from __future__ import annotations

import time

from receiptlens.application.errors import InvalidReceiptImage, classify_failure
from receiptlens.domain.receipt import RECEIPT_MODEL_ID, ReceiptAnalysisResult
from receiptlens.receipt.field_mapper import DEFAULT_THRESHOLDS, ConfidenceThresholds, map_receipt
from receiptlens.runtime.analysis_client import AzureDocumentIntelligenceClient, DocumentAnalysisClient
from receiptlens.runtime.logging import get_logger
from receiptlens.runtime.settings import ServiceSettings

logger = get_logger(__name__)


class ReceiptImageAnalyzer:
    """Send receipt images to the analysis service and map the results.

    Cancelling the task awaiting ``analyze`` aborts the in-flight service
    call; the cancellation propagates unchanged.
    """

    def __init__(
        self,
        endpoint: str,
        api_key: str,
        *,
        thresholds: ConfidenceThresholds | None = None,
        client: DocumentAnalysisClient | None = None,
    ) -> None:
        """
        Args:
            endpoint: Document Intelligence resource endpoint URL
            api_key: Resource key
            thresholds: Classification and field gating cut-offs
            client: Analysis client to use instead of the default HTTP client
        """
        if not endpoint or not endpoint.strip():
            raise ValueError("endpoint must not be blank")
        if not api_key or not api_key.strip():
            raise ValueError("api_key must not be blank")

        self.thresholds = thresholds or DEFAULT_THRESHOLDS
        self._owns_client = client is None
        self.client: DocumentAnalysisClient = client or AzureDocumentIntelligenceClient(endpoint, api_key)

    @classmethod
    def from_settings(cls, settings: ServiceSettings) -> ReceiptImageAnalyzer:
        # Validate before building the HTTP client so blank settings fail the same way
        if not settings.endpoint.strip():
            raise ValueError("endpoint must not be blank")
        if not settings.api_key.strip():
            raise ValueError("api_key must not be blank")

        client = AzureDocumentIntelligenceClient(
            settings.endpoint,
            settings.api_key,
            api_version=settings.api_version,
            poll_interval=settings.poll_interval,
            poll_timeout=settings.poll_timeout,
            request_timeout=settings.request_timeout,
        )
        analyzer = cls(settings.endpoint, settings.api_key, thresholds=settings.thresholds, client=client)
        analyzer._owns_client = True
        return analyzer

    async def analyze(self, receipt_image: bytes | None, include_ocr_content: bool = False) -> ReceiptAnalysisResult:
        """
        Analyze one receipt image.

        Args:
            receipt_image: Image bytes, must not be empty
            include_ocr_content: Copy the recognized text and document confidence into the result

        Returns:
            Mapped receipt record

        Raises:
            InvalidReceiptImage: The image is None or empty
            ReceiptAnalysisError: The service call failed; see ``kind``
        """
        if receipt_image is None:
            raise InvalidReceiptImage("Receipt image is required")
        if len(receipt_image) == 0:
            raise InvalidReceiptImage("Receipt image cannot be empty")

        start_time = time.monotonic()
        try:
            analyze_result = await self.client.analyze(RECEIPT_MODEL_ID, bytes(receipt_image))
        except Exception as exc:
            error = classify_failure(exc)
            logger.error("Receipt analysis failed (%s): %s", error.kind, exc)
            raise error from exc

        result = map_receipt(analyze_result, include_ocr_content=include_ocr_content, thresholds=self.thresholds)
        logger.info(
            "Analyzed receipt in %.2f seconds: %s, %d items",
            time.monotonic() - start_time,
            result.summary.classification.name,
            len(result.items),
        )
        return result

    async def aclose(self) -> None:
        if self._owns_client and isinstance(self.client, AzureDocumentIntelligenceClient):
            await self.client.aclose()

    async def __aenter__(self) -> ReceiptImageAnalyzer:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()
