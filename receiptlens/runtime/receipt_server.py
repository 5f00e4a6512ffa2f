"""FastAPI server that analyzes uploaded receipt images."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from receiptlens.application.analyzer import ReceiptImageAnalyzer
from receiptlens.application.errors import InvalidReceiptImage, ReceiptAnalysisError
from receiptlens.receipt.formatter import receipt_to_dict
from receiptlens.runtime.logging import get_logger
from receiptlens.runtime.settings import load_settings

logger = get_logger(__name__)

FAILURE_STATUS_CODES = {
    "invalid_request": 422,
    "authentication": 502,
    "transport": 503,
    "unknown": 502,
}

_TRUE_VALUES = {"1", "true", "yes", "on"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Build the analyzer from settings unless one was installed already."""
    created = None
    if getattr(app.state, "analyzer", None) is None:
        created = ReceiptImageAnalyzer.from_settings(load_settings())
        app.state.analyzer = created
        logger.info("Receipt analyzer ready")
    try:
        yield
    finally:
        if created is not None:
            await created.aclose()
            app.state.analyzer = None


app = FastAPI(title="Receipt Analyzer", lifespan=lifespan)


@app.post("/analyze")
async def analyze_receipt(request: Request) -> JSONResponse:
    """Analyze the first file in a multipart upload and return the receipt as JSON."""
    analyzer: ReceiptImageAnalyzer | None = getattr(request.app.state, "analyzer", None)
    if analyzer is None:
        return JSONResponse({"status": "error", "message": "Analyzer is not configured"}, status_code=503)

    form = await request.form()
    file = None
    for key, value in form.items():
        logger.debug("Form field: key=%r, type=%s", key, type(value).__name__)
        if hasattr(value, "read"):
            file = value
            break

    if file is None:
        return JSONResponse({"status": "error", "message": "No file found in request"}, status_code=400)

    contents = await file.read()
    include_ocr = request.query_params.get("include_ocr", "").lower() in _TRUE_VALUES

    try:
        result = await analyzer.analyze(contents, include_ocr_content=include_ocr)
    except InvalidReceiptImage as e:
        return JSONResponse({"status": "error", "message": str(e)}, status_code=400)
    except ReceiptAnalysisError as e:
        return JSONResponse(
            {"status": "error", "kind": e.kind, "message": "Receipt analysis failed"},
            status_code=FAILURE_STATUS_CODES[e.kind],
        )

    return JSONResponse({"status": "success", "receipt": receipt_to_dict(result)})


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}
