"""Runtime clients for the external receipt capabilities (non-HTTP-server)."""

import os
import time
from pathlib import Path

import httpx
from PIL import UnidentifiedImageError

from cupom.domain.receipt import StructuredReceiptSummary
from cupom.receipt.ocr_helpers import ocr_result_to_text, prepare_image_bytes
from cupom.receipt.structured_normalizer import summary_from_payload
from cupom.runtime.logging import get_logger

logger = get_logger(__name__)

DEFAULT_OCR_SERVICE_URL = "http://localhost:8001"
DEFAULT_EXTRACTION_SERVICE_URL = "http://localhost:8002"
SERVICE_TIMEOUT_SECONDS = 60.0


class ReceiptServiceUnavailable(RuntimeError):
    """Raised when an OCR or extraction service cannot be reached or returns an error."""


class ReceiptImageInvalid(ValueError):
    """Raised when a receipt file cannot be decoded as an image."""


def get_ocr_service_url() -> str:
    return os.environ.get("OCR_SERVICE_URL", DEFAULT_OCR_SERVICE_URL).rstrip("/")


def get_extraction_service_url() -> str:
    return os.environ.get("EXTRACTION_SERVICE_URL", DEFAULT_EXTRACTION_SERVICE_URL).rstrip("/")


def _post_image(
    service_url: str,
    endpoint: str,
    filename: str,
    image_bytes: bytes,
    client: httpx.Client | None,
) -> httpx.Response:
    """POST a prepared JPEG to a capability endpoint and return the 200 response."""
    url = f"{service_url.rstrip('/')}/{endpoint}"
    files = {"file": (filename, image_bytes, "image/jpeg")}
    start_time = time.time()
    try:
        if client is None:
            response = httpx.post(url, files=files, timeout=SERVICE_TIMEOUT_SECONDS)
        else:
            response = client.post(url, files=files)
    except httpx.RequestError as e:
        logger.error("Failed to connect to %s: %s", url, e)
        raise ReceiptServiceUnavailable(f"Failed to connect to {url}: {e}") from e

    logger.info("%s returned %s in %.2f seconds", url, response.status_code, time.time() - start_time)
    if response.status_code != 200:
        # Response bodies may echo receipt text; log the status only.
        logger.error("Receipt service error: %s", response.status_code)
        raise ReceiptServiceUnavailable(f"Receipt service error: {response.status_code}")
    return response


def _read_image(image_path: Path) -> bytes:
    try:
        return prepare_image_bytes(image_path.read_bytes())
    except (UnidentifiedImageError, OSError) as e:
        logger.warning("Cannot read receipt image %s: %s", image_path, e)
        raise ReceiptImageInvalid(f"Not a readable image: {image_path}") from e


def _json_object(response: httpx.Response) -> dict:
    try:
        payload = response.json()
    except ValueError as e:
        raise ReceiptServiceUnavailable("Receipt service returned invalid JSON") from e
    if not isinstance(payload, dict):
        raise ReceiptServiceUnavailable("Receipt service returned a non-object JSON body")
    return payload


def call_ocr_service(
    image_path: Path,
    ocr_url: str | None = None,
    *,
    client: httpx.Client | None = None,
) -> str:
    """
    Send a receipt image to the OCR service and return its raw text.

    Raises:
        ReceiptServiceUnavailable: Transport failure, non-200 status or a
            body that is not a JSON object.
        ReceiptImageInvalid: The file is not a decodable image.
    """
    service_url = ocr_url or get_ocr_service_url()
    logger.info("Sending receipt to OCR service at %s...", service_url)
    image_bytes = _read_image(image_path)
    response = _post_image(service_url, "ocr", image_path.name, image_bytes, client)
    return ocr_result_to_text(_json_object(response))


def call_extraction_service(
    image_path: Path,
    extraction_url: str | None = None,
    *,
    client: httpx.Client | None = None,
) -> StructuredReceiptSummary:
    """
    Send a receipt image to the structured extraction service.

    Raises:
        ReceiptServiceUnavailable: Transport failure, non-200 status or a
            payload that cannot be read as a receipt summary.
        ReceiptImageInvalid: The file is not a decodable image.
    """
    service_url = extraction_url or get_extraction_service_url()
    logger.info("Sending receipt to extraction service at %s...", service_url)
    image_bytes = _read_image(image_path)
    response = _post_image(service_url, "extract", image_path.name, image_bytes, client)
    try:
        return summary_from_payload(_json_object(response))
    except ValueError as e:
        raise ReceiptServiceUnavailable(f"Malformed extraction payload: {e}") from e
