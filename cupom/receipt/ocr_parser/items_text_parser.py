"""Text-line based receipt item extraction."""

from cupom.domain.receipt import ParsedLineItem, ReceiptLineType

from ..date_utils import BR_DATE_PATTERN
from ..item_categories import ItemCategoryRules, suggest_category
from ..line_classifier import LineClassifier
from ..money import parse_money
from .common import TRAILING_PRICE, clean_item_description

# Lines of these types never become items nor description fragments.
NON_ITEM_LINE_TYPES: frozenset[ReceiptLineType] = frozenset(
    {"total", "paid", "change", "payment_method", "header", "footer"}
)


def _fold_discount(items: list[ParsedLineItem], line: str) -> None:
    """Apply a discount line to the most recent item.

    Receipts print discounts as "-5,00", "5,00-" or, once OCR drops the
    sign, "5,00"; the absolute amount is always subtracted.
    """
    if not items:
        return
    amount = parse_money(line, strict=True)
    if amount is None:
        return
    last = items[-1]
    last.value = last.value - abs(amount)
    last.is_discount = True


def _extract_items(
    lines: list[str],
    start: int = 0,
    end: int | None = None,
    skip_indexes: frozenset[int] | set[int] = frozenset(),
    *,
    classifier: LineClassifier,
    category_rules: ItemCategoryRules | None = None,
) -> list[ParsedLineItem]:
    """
    Extract line items from the item window of a receipt.

    Lines without a trailing price are buffered as description fragments
    (OCR wraps long descriptions) and prepended to the next priced line.

    Args:
        lines: Trimmed, non-empty receipt lines
        start: First line index of the item window
        end: Line index where the item window stops (exclusive)
        skip_indexes: Line indexes already consumed as metadata (e.g. store name)
    """
    items: list[ParsedLineItem] = []
    pending: list[str] = []
    if end is None:
        end = len(lines)

    for i in range(start, end):
        line = lines[i]
        if i in skip_indexes:
            pending.clear()
            continue

        line_type = classifier.classify(line)
        if line_type == "discount":
            pending.clear()
            _fold_discount(items, line)
            continue
        if line_type in NON_ITEM_LINE_TYPES:
            pending.clear()
            continue

        match = TRAILING_PRICE.search(line)
        if match is None:
            # Date/time stamps are metadata, not wrapped descriptions.
            if BR_DATE_PATTERN.search(line):
                pending.clear()
            else:
                pending.append(line)
            continue

        value = parse_money(match.group(1), strict=True)
        if value is None:
            pending.clear()
            continue

        description = clean_item_description(" ".join([*pending, line[: match.start()]]))
        pending.clear()
        if not description:
            continue

        items.append(
            ParsedLineItem(
                description=description,
                value=value,
                raw_line=line,
                suggested_category=suggest_category(description, category_rules),
            )
        )

    return items
