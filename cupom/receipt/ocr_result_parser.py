"""Parse raw OCR text into structured ParsedReceipt data."""

from cupom.domain.receipt import ParsedReceipt

from .item_categories import ItemCategoryRules
from .line_classifier import LineClassifier, LineClassifierRules
from .ocr_parser import _extract_date, _extract_items, _extract_store_name, _extract_total, find_item_window
from .reconciliation import RECEIPT_TOTAL_LABEL, flag_suspect_items, mismatch_warning, suspect_items_warning


def split_receipt_lines(raw_text: str) -> list[str]:
    """Split OCR text into trimmed, non-empty lines, preserving order."""
    return [line.strip() for line in raw_text.splitlines() if line.strip()]


def parse_receipt_text(
    raw_text: str,
    *,
    classifier_rules: LineClassifierRules | None = None,
    category_rules: ItemCategoryRules | None = None,
) -> ParsedReceipt:
    """
    Parse the raw OCR text of one receipt into a ParsedReceipt.

    This is a best-effort parser - results should be reviewed by the user,
    which is what the warnings and suspect flags are for.

    Args:
        raw_text: Full text returned by the OCR capability
        classifier_rules: Line classification keyword tables (defaults if None)
        category_rules: Item category keyword table (defaults if None)

    Returns:
        ParsedReceipt with items in order of appearance
    """
    lines = split_receipt_lines(raw_text)
    classifier = LineClassifier(classifier_rules)

    # Metadata is searched over every line; items only inside the item window.
    store_name, store_index = _extract_store_name(lines, classifier)
    receipt_date = _extract_date(lines)
    printed_total = _extract_total(lines, classifier)

    start, end = find_item_window(lines)
    items = _extract_items(
        lines,
        start,
        end,
        skip_indexes={store_index} if store_index is not None else set(),
        classifier=classifier,
        category_rules=category_rules,
    )

    receipt = ParsedReceipt(
        store_name=store_name,
        date=receipt_date,
        raw_total_from_receipt=printed_total,
        items=items,
        raw_text=raw_text,
        source="ocr",
    )

    warning = mismatch_warning(receipt.items_total, printed_total, total_label=RECEIPT_TOTAL_LABEL)
    if warning:
        receipt.warnings.append(warning)

    flag_suspect_items(receipt.items, printed_total)
    suspect_warning = suspect_items_warning(receipt.items)
    if suspect_warning:
        receipt.warnings.append(suspect_warning)

    return receipt
