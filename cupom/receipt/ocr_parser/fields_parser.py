"""Store name/date/printed total extraction helpers."""

import re
from datetime import date
from decimal import Decimal

from ..date_utils import BR_DATE_PATTERN, parse_br_date
from ..line_classifier import LineClassifier
from ..money import parse_money
from .common import (
    AMOUNT_ONLY_LINE,
    STORE_NAME_MIN_ALNUM,
    STORE_NAME_SCAN_LINES,
    TRAILING_PRICE,
    UNKNOWN_STORE,
)


def _extract_store_name(lines: list[str], classifier: LineClassifier) -> tuple[str, int | None]:
    """
    Pick the store name from the receipt letterhead.

    Uses the first of the top lines that is plain text (no tax ID, no date,
    no price) with enough alphanumerics to be a name.

    Returns:
        Tuple of (store name, line index); index is None for the placeholder.
    """
    for i, line in enumerate(lines[:STORE_NAME_SCAN_LINES]):
        if classifier.classify(line) != "unknown":
            continue
        if BR_DATE_PATTERN.search(line) or TRAILING_PRICE.search(line):
            continue
        if len(re.sub(r"\W", "", line)) < STORE_NAME_MIN_ALNUM:
            continue
        # Clean up common OCR artifacts
        cleaned = re.sub(r"[^\w\s&'.\-]", "", line).strip(" .-")
        if cleaned:
            return cleaned, i
    return UNKNOWN_STORE, None


def _extract_date(lines: list[str]) -> date | None:
    """Extract the purchase date (returns None if unknown)."""
    for line in lines:
        parsed = parse_br_date(line)
        if parsed is not None:
            return parsed
    return None


def _extract_total(lines: list[str], classifier: LineClassifier) -> Decimal | None:
    """Extract the printed total payable from the first total line that has an amount."""
    for i, line in enumerate(lines):
        if classifier.classify(line) != "total":
            continue
        amount = parse_money(line, strict=True)
        if amount is not None:
            return amount
        # Label and amount split across lines: "VALOR A PAGAR R$" / "77,70"
        if i + 1 < len(lines) and AMOUNT_ONLY_LINE.match(lines[i + 1]):
            amount = parse_money(lines[i + 1], strict=True)
            if amount is not None:
                return amount
    return None
