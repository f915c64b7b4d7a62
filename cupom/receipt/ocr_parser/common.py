"""Shared constants and helpers for OCR receipt text parsing."""

import re

from ..line_classifier import ITEM_COUNT_FOOTER, fold_accents

# Only the first few lines are letterhead candidates for the store name.
STORE_NAME_SCAN_LINES = 5
STORE_NAME_MIN_ALNUM = 10
UNKNOWN_STORE = "Loja nao identificada"

# Column header that opens the item table, e.g. "ITEM CODIGO DESCRICAO QTD UN VL UNIT VL ITEM".
COLUMN_HEADER = re.compile(r"\bcod(?:igo)?\b.*\bdescricao\b")

# Price at the very end of a line; thousands-grouped form first.
TRAILING_PRICE = re.compile(r"(\d{1,3}(?:\.\d{3})+,\d{2}|\d+[.,]\d{2})\s*$")

# A line that carries nothing but an amount, e.g. "R$ 77,70" under a "TOTAL" label.
AMOUNT_ONLY_LINE = re.compile(r"^\s*(?:R\$|\$)?\s*-?[\d.,]+-?\s*$", re.IGNORECASE)

# Quantity/unit annotations trailing a description: "2 UN", "1UN X 6,99", "1,5 KG".
# Count units may touch the number; measure units need a space so "ARROZ 5KG" keeps its size.
COUNT_UNIT_ANNOTATION = re.compile(r"\s+\d+(?:[.,]\d+)?\s*(?:UN|UND|UNID|PC|PCT|CX)\b.*$", re.IGNORECASE)
MEASURE_UNIT_ANNOTATION = re.compile(r"\s+\d+(?:[.,]\d+)?\s+(?:KG|G|L|LT|ML)\b.*$", re.IGNORECASE)
# A description that is nothing but an annotation, e.g. "1 UN" or "2 UN X 4,50".
ANNOTATION_ONLY = re.compile(
    r"^\d+(?:[.,]\d+)?\s*(?:UN|UND|UNID|PC|PCT|CX|KG|G|L|LT|ML)\b(?:\s*[xX]\s*[\d.,]*)?$", re.IGNORECASE
)
# "2 X 14,95" multiplier left over after the line total was cut off.
QUANTITY_TIMES_PRICE = re.compile(r"\s+\d+(?:[.,]\d+)?\s*[xX]\s*\d+[.,]\d{2}\s*$")
TRAILING_CURRENCY = re.compile(r"\s*(?:R\$|\$)\s*$", re.IGNORECASE)
# Optional sequence number followed by an EAN/internal product code.
LEADING_ITEM_CODES = re.compile(r"^(?:\d{1,4}\s+)?\d{6,14}\s+")


def is_column_header(line: str) -> bool:
    """Return True for the item table header line."""
    return COLUMN_HEADER.search(fold_accents(line).lower()) is not None


def is_item_count_footer(line: str) -> bool:
    """Return True for the "QTD. TOTAL DE ITENS" line closing the item table."""
    return ITEM_COUNT_FOOTER.search(fold_accents(line).lower()) is not None


def find_item_window(lines: list[str]) -> tuple[int, int]:
    """
    Return the [start, end) range of lines that may hold items.

    Starts right after the column header and stops before the item-count
    footer; either bound falls back to the whole receipt when not found.
    """
    start = 0
    end = len(lines)
    for i, line in enumerate(lines):
        if is_column_header(line):
            start = i + 1
            break
    for i in range(start, len(lines)):
        if is_item_count_footer(lines[i]):
            end = i
            break
    return start, end


def clean_item_description(text: str) -> str:
    """Remove price leftovers, unit annotations and product codes from a description."""
    desc = re.sub(r"\s+", " ", text).strip()
    desc = TRAILING_CURRENCY.sub("", desc)
    desc = QUANTITY_TIMES_PRICE.sub("", desc)
    desc = COUNT_UNIT_ANNOTATION.sub("", desc)
    desc = MEASURE_UNIT_ANNOTATION.sub("", desc)
    desc = LEADING_ITEM_CODES.sub("", desc)
    desc = re.sub(r"[\s\-:*]+$", "", desc)
    if ANNOTATION_ONLY.match(desc):
        return ""
    return desc.strip()
