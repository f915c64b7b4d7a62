"""Pure receipt parsing core: no file I/O, network or logging.

Usage:
    from cupom.receipt import parse_receipt_text, normalize_structured_receipt
"""

from cupom.receipt.item_categories import suggest_category
from cupom.receipt.line_classifier import classify_receipt_line
from cupom.receipt.money import parse_money
from cupom.receipt.ocr_result_parser import parse_receipt_text
from cupom.receipt.structured_normalizer import normalize_structured_receipt, summary_from_payload

__all__ = [
    "classify_receipt_line",
    "normalize_structured_receipt",
    "parse_money",
    "parse_receipt_text",
    "suggest_category",
    "summary_from_payload",
]
