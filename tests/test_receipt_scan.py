"""Tests for the receipt scan application workflow."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

import pytest

from cupom.application.receipts import ReceiptScanRequest, run_receipt_scan
from cupom.domain.receipt import StructuredReceiptItem, StructuredReceiptSummary
from cupom.runtime.receipt_pipeline import ReceiptServiceUnavailable


@pytest.fixture
def image(tmp_path: Path) -> Path:
    path = tmp_path / "cupom.jpg"
    path.write_bytes(b"image")
    return path


def test_missing_file(tmp_path: Path) -> None:
    result = run_receipt_scan(ReceiptScanRequest(image_path=tmp_path / "nope.jpg"))

    assert result.status == "file_not_found"
    assert result.receipt is None
    assert result.error is not None


def test_ocr_mode_parses_text(image: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "cupom.application.receipts.scan.call_ocr_service",
        lambda image_path, ocr_url=None: "PADARIA CENTRAL PAULISTA\nPAO 5,00\nTOTAL 5,00",
    )

    result = run_receipt_scan(ReceiptScanRequest(image_path=image))

    assert result.status == "parsed"
    assert result.receipt is not None
    assert result.receipt.source == "ocr"
    assert result.receipt.items_total == Decimal("5.00")


def test_extraction_mode_normalizes(image: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(
        "cupom.application.receipts.scan.call_extraction_service",
        lambda image_path, extraction_url=None: StructuredReceiptSummary(
            store="Posto",
            total_amount=Decimal("50"),
            items=[StructuredReceiptItem(description="GASOLINA", total=Decimal("50"))],
        ),
    )

    result = run_receipt_scan(ReceiptScanRequest(image_path=image, mode="extraction"))

    assert result.status == "parsed"
    assert result.receipt is not None
    assert result.receipt.source == "extraction"
    assert result.receipt.items[0].suggested_category == "Gasolina"


def test_service_unavailable(image: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    def unavailable(image_path: Path, extraction_url: str | None = None) -> StructuredReceiptSummary:
        raise ReceiptServiceUnavailable("Receipt service error: 503")

    monkeypatch.setattr("cupom.application.receipts.scan.call_extraction_service", unavailable)

    result = run_receipt_scan(ReceiptScanRequest(image_path=image, mode="extraction"))

    assert result.status == "service_unavailable"
    assert result.error == "Receipt service error: 503"


@pytest.mark.parametrize("mode", ["ocr", "extraction"])
def test_non_image_file_is_invalid_image(tmp_path: Path, mode: str) -> None:
    path = tmp_path / "cupom.jpg"
    path.write_bytes(b"not an image")

    result = run_receipt_scan(ReceiptScanRequest(image_path=path, mode=mode, service_url="http://service.test"))

    assert result.status == "invalid_image"
    assert result.receipt is None
    assert result.error is not None and "Not a readable image" in result.error
