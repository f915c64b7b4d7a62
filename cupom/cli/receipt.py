"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import sys
from pathlib import Path

from cupom.application.receipts.scan import ReceiptScanRequest, ScanMode, run_receipt_scan
from cupom.domain.receipt import ParsedReceipt
from cupom.receipt.formatter import format_receipt_summary, receipt_to_dict
from cupom.receipt.ocr_result_parser import parse_receipt_text
from cupom.runtime import get_logger, load_item_category_rules, load_line_classifier_rules

logger = get_logger(__name__)


def _print_receipt(receipt: ParsedReceipt, as_json: bool) -> None:
    if as_json:
        print(json.dumps(receipt_to_dict(receipt), indent=2, ensure_ascii=False))
    else:
        print(format_receipt_summary(receipt))


def cmd_parse(args: argparse.Namespace) -> int:
    """Parse OCR text from a file (or stdin) and print the result."""
    if args.file:
        text_path = Path(args.file)
        if not text_path.exists():
            logger.error("Text file not found: %s", text_path)
            print(f"Error: Text file not found: {text_path}")
            return 1
        raw_text = text_path.read_text(encoding="utf-8")
    else:
        raw_text = sys.stdin.read()

    receipt = parse_receipt_text(
        raw_text,
        classifier_rules=load_line_classifier_rules(),
        category_rules=load_item_category_rules(),
    )
    _print_receipt(receipt, args.json)
    return 0


def _run_scan(image: str, mode: ScanMode, service_url: str | None, as_json: bool) -> int:
    result = run_receipt_scan(
        ReceiptScanRequest(
            image_path=Path(image),
            mode=mode,
            service_url=service_url,
        )
    )

    if result.status in ("file_not_found", "invalid_image"):
        logger.error("%s", result.error)
        print(f"Error: {result.error}")
        return 1

    if result.status == "service_unavailable":
        logger.error("%s", result.error)
        print(f"Receipt service unavailable: {result.error}")
        print("Make sure the OCR/extraction service is running before scanning receipts.")
        return 1

    if result.receipt is None:
        print("Scan failed: missing receipt output.")
        return 1

    _print_receipt(result.receipt, as_json)
    return 0


def cmd_scan(args: argparse.Namespace) -> int:
    """OCR a receipt image and parse the returned text."""
    return _run_scan(args.image, "ocr", args.ocr_url, args.json)


def cmd_extract(args: argparse.Namespace) -> int:
    """Normalize a receipt image segmented by the extraction service."""
    return _run_scan(args.image, "extraction", args.extraction_url, args.json)


def cmd_serve(args: argparse.Namespace) -> int:
    """Start the FastAPI receipt server."""
    import uvicorn

    from cupom.runtime import receipt_server as server

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/parse | /upload | /upload/structured | /normalize")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)
    return 0
