"""FastAPI server exposing receipt parsing over HTTP."""

from typing import Any

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from PIL import UnidentifiedImageError
from pydantic import BaseModel

from cupom.receipt.formatter import receipt_to_dict
from cupom.receipt.ocr_helpers import ocr_result_to_text, prepare_image_bytes
from cupom.receipt.ocr_result_parser import parse_receipt_text
from cupom.receipt.structured_normalizer import normalize_structured_receipt, summary_from_payload
from cupom.runtime.item_category_rules import load_item_category_rules
from cupom.runtime.line_classifier_rules import load_line_classifier_rules
from cupom.runtime.logging import get_logger
from cupom.runtime.receipt_pipeline import (
    SERVICE_TIMEOUT_SECONDS,
    ReceiptServiceUnavailable,
    get_extraction_service_url,
    get_ocr_service_url,
)

logger = get_logger(__name__)

app = FastAPI(title="Cupom Receipt Parser")


class ParseTextRequest(BaseModel):
    text: str


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"status": "error", "message": message}, status_code=status_code)


def _success(receipt_payload: dict[str, Any]) -> JSONResponse:
    return JSONResponse({"status": "success", "receipt": receipt_payload})


async def _post_image_to_service(service_url: str, endpoint: str, filename: str, contents: bytes) -> dict[str, Any]:
    """Forward a prepared image to a capability endpoint and return its JSON object."""
    url = f"{service_url}/{endpoint}"
    try:
        async with httpx.AsyncClient(timeout=SERVICE_TIMEOUT_SECONDS) as client:
            response = await client.post(url, files={"file": (filename, contents, "image/jpeg")})
    except httpx.RequestError as e:
        logger.error("Receipt service unavailable at %s: %s", url, e)
        raise ReceiptServiceUnavailable(f"Failed to connect to {url}") from e

    if response.status_code != 200:
        logger.error("Receipt service error at %s: %s", url, response.status_code)
        raise ReceiptServiceUnavailable(f"Receipt service error: {response.status_code}")
    try:
        payload = response.json()
    except ValueError as e:
        raise ReceiptServiceUnavailable("Receipt service returned invalid JSON") from e
    if not isinstance(payload, dict):
        raise ReceiptServiceUnavailable("Receipt service returned a non-object JSON body")
    return payload


async def _read_uploaded_image(request: Request) -> tuple[str, bytes] | None:
    """Return (filename, bytes) of the first file field in a multipart form."""
    form = await request.form()
    for key, value in form.items():
        logger.debug("Form field: key=%r, type=%s", key, type(value))
        if hasattr(value, "read"):
            contents = await value.read()
            return getattr(value, "filename", None) or "receipt.jpg", contents
    return None


async def _prepare_upload(request: Request) -> tuple[str, bytes] | JSONResponse:
    upload = await _read_uploaded_image(request)
    if upload is None:
        return _error("No file found in request", 400)
    filename, contents = upload
    try:
        return filename, prepare_image_bytes(contents)
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Rejected upload %s: %s", filename, e)
        return _error("Uploaded file is not a readable image", 400)


@app.post("/parse")
async def parse_text(body: ParseTextRequest) -> JSONResponse:
    """Parse raw OCR text supplied by the caller."""
    receipt = parse_receipt_text(
        body.text,
        classifier_rules=load_line_classifier_rules(),
        category_rules=load_item_category_rules(),
    )
    return _success(receipt_to_dict(receipt))


@app.post("/upload")
async def upload_receipt(request: Request) -> JSONResponse:
    """Receive a receipt photo, OCR it and parse the resulting text."""
    prepared = await _prepare_upload(request)
    if isinstance(prepared, JSONResponse):
        return prepared
    filename, image_bytes = prepared

    try:
        ocr_result = await _post_image_to_service(get_ocr_service_url(), "ocr", filename, image_bytes)
    except ReceiptServiceUnavailable as e:
        return _error(str(e), 502)

    receipt = parse_receipt_text(
        ocr_result_to_text(ocr_result),
        classifier_rules=load_line_classifier_rules(),
        category_rules=load_item_category_rules(),
    )
    logger.info("Parsed %s: %d items, %d warnings", filename, len(receipt.items), len(receipt.warnings))
    return _success(receipt_to_dict(receipt))


@app.post("/upload/structured")
async def upload_structured_receipt(request: Request) -> JSONResponse:
    """Receive a receipt photo and normalize the extraction service's segmentation."""
    prepared = await _prepare_upload(request)
    if isinstance(prepared, JSONResponse):
        return prepared
    filename, image_bytes = prepared

    try:
        payload = await _post_image_to_service(get_extraction_service_url(), "extract", filename, image_bytes)
        summary = summary_from_payload(payload)
    except ReceiptServiceUnavailable as e:
        return _error(str(e), 502)
    except ValueError as e:
        logger.error("Malformed extraction payload for %s: %s", filename, e)
        return _error(f"Malformed extraction payload: {e}", 502)

    receipt = normalize_structured_receipt(summary, category_rules=load_item_category_rules())
    logger.info("Normalized %s: %d items, %d warnings", filename, len(receipt.items), len(receipt.warnings))
    return _success(receipt_to_dict(receipt))


@app.post("/normalize")
async def normalize_payload(request: Request) -> JSONResponse:
    """Normalize a structured receipt payload posted as JSON."""
    try:
        payload = await request.json()
    except ValueError:
        return _error("Request body must be JSON", 422)
    try:
        summary = summary_from_payload(payload)
    except ValueError as e:
        return _error(str(e), 422)

    receipt = normalize_structured_receipt(summary, category_rules=load_item_category_rules())
    return _success(receipt_to_dict(receipt))


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
