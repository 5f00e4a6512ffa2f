"""Receipt analysis workflow orchestration."""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Literal

from PIL import Image

from receiptlens.application.analyzer import ReceiptImageAnalyzer
from receiptlens.application.errors import AnalysisFailureKind, InvalidReceiptImage, ReceiptAnalysisError
from receiptlens.domain.receipt import ReceiptAnalysisResult
from receiptlens.receipt.image_prep import prepare_image_bytes
from receiptlens.runtime.logging import get_logger
from receiptlens.runtime.settings import ServiceSettings

logger = get_logger(__name__)

AnalysisStatus = Literal[
    "file_not_found",
    "invalid_image",
    "analysis_failed",
    "analyzed",
]


@dataclass(frozen=True)
class ReceiptAnalysisRequest:
    """Inputs for running the receipt analysis workflow."""

    image_path: Path
    settings: ServiceSettings
    include_ocr_content: bool = False
    downscale: bool = False
    build_analyzer: Callable[[ServiceSettings], ReceiptImageAnalyzer] | None = None


@dataclass(frozen=True)
class ReceiptAnalysisOutcome:
    """Outcome from the receipt analysis workflow."""

    status: AnalysisStatus
    result: ReceiptAnalysisResult | None = None
    error: str | None = None
    failure_kind: AnalysisFailureKind | None = None


async def _analyze(request: ReceiptAnalysisRequest, image_bytes: bytes) -> ReceiptAnalysisResult:
    build = request.build_analyzer or ReceiptImageAnalyzer.from_settings
    async with build(request.settings) as analyzer:
        return await analyzer.analyze(image_bytes, include_ocr_content=request.include_ocr_content)


def run_receipt_analysis(request: ReceiptAnalysisRequest) -> ReceiptAnalysisOutcome:
    """Run analysis flow: read image -> optional downscale -> analyze -> map."""
    if not request.image_path.is_file():
        return ReceiptAnalysisOutcome(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    image_bytes = request.image_path.read_bytes()
    if request.downscale and image_bytes:
        try:
            image_bytes = prepare_image_bytes(image_bytes)
        except Image.DecompressionBombError as exc:
            return ReceiptAnalysisOutcome(status="invalid_image", error=f"Image too large to decode: {exc}")
        except OSError as exc:
            # Pillow raises UnidentifiedImageError (an OSError) for unreadable images
            return ReceiptAnalysisOutcome(status="invalid_image", error=f"Cannot read image: {exc}")

    try:
        result = asyncio.run(_analyze(request, image_bytes))
    except InvalidReceiptImage as exc:
        return ReceiptAnalysisOutcome(status="invalid_image", error=str(exc))
    except ReceiptAnalysisError as exc:
        return ReceiptAnalysisOutcome(
            status="analysis_failed",
            error=str(exc),
            failure_kind=exc.kind,
        )

    logger.debug("Analysis of %s finished", request.image_path.name)
    return ReceiptAnalysisOutcome(status="analyzed", result=result)
