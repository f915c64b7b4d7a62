"""Receipt scan workflow orchestration."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Literal

from cupom.receipt.ocr_result_parser import parse_receipt_text
from cupom.receipt.structured_normalizer import normalize_structured_receipt
from cupom.runtime import get_logger, load_item_category_rules, load_line_classifier_rules
from cupom.runtime.receipt_pipeline import (
    ReceiptImageInvalid,
    ReceiptServiceUnavailable,
    call_extraction_service,
    call_ocr_service,
)

if TYPE_CHECKING:
    from cupom.domain.receipt import ParsedReceipt

logger = get_logger(__name__)

ScanStatus = Literal[
    "file_not_found",
    "invalid_image",
    "service_unavailable",
    "parsed",
]
ScanMode = Literal["ocr", "extraction"]


@dataclass(frozen=True)
class ReceiptScanRequest:
    """Inputs for running receipt scan workflow."""

    image_path: Path
    mode: ScanMode = "ocr"
    service_url: str | None = None


@dataclass(frozen=True)
class ReceiptScanResult:
    """Outcome from receipt scan workflow."""

    status: ScanStatus
    receipt: ParsedReceipt | None = None
    error: str | None = None


def run_receipt_scan(request: ReceiptScanRequest) -> ReceiptScanResult:
    """Run scan flow: image -> capability service -> ParsedReceipt.

    In "ocr" mode the OCR text goes through the text parser; in
    "extraction" mode the service's own segmentation is normalized.
    """
    if not request.image_path.exists():
        return ReceiptScanResult(
            status="file_not_found",
            error=f"Receipt file not found: {request.image_path}",
        )

    category_rules = load_item_category_rules()
    try:
        if request.mode == "extraction":
            summary = call_extraction_service(request.image_path, request.service_url)
            receipt = normalize_structured_receipt(summary, category_rules=category_rules)
        else:
            raw_text = call_ocr_service(request.image_path, request.service_url)
            receipt = parse_receipt_text(
                raw_text,
                classifier_rules=load_line_classifier_rules(),
                category_rules=category_rules,
            )
    except ReceiptImageInvalid as exc:
        return ReceiptScanResult(
            status="invalid_image",
            error=str(exc),
        )
    except ReceiptServiceUnavailable as exc:
        return ReceiptScanResult(
            status="service_unavailable",
            error=str(exc),
        )

    logger.info(
        "Scanned %s: %s, %d items, %d warnings",
        request.image_path.name,
        receipt.store_name,
        len(receipt.items),
        len(receipt.warnings),
    )
    return ReceiptScanResult(status="parsed", receipt=receipt)
