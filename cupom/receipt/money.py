"""Brazilian currency text parsing (decimal comma, period thousands separator)."""

import re
from decimal import Decimal, InvalidOperation

# Explicit two-decimal price fragments, thousands-grouped form first so
# "1.234,56" is not split into "1.23" and "4,56". A leading minus must touch the
# digits; "TOTAL - 5,00" uses the hyphen as a separator.
PRICE_FRAGMENT = re.compile(r"(?:(?<![\w-])-)?(?:\d{1,3}(?:\.\d{3})+,\d{2}|\d+[.,]\d{2})(?!\d)-?")
DOT_DECIMAL = re.compile(r"^-?\d+\.\d{2}-?$")


def _to_decimal(clean: str) -> Decimal | None:
    if not re.search(r"\d", clean):
        return None
    # Receipts print discounts as "5,00-"; move the trailing sign to the front.
    if clean.endswith("-") and not clean.startswith("-"):
        clean = "-" + clean[:-1]
    try:
        value = Decimal(clean)
    except InvalidOperation:
        return None
    if not value.is_finite():
        return None
    return value


def parse_money(text: str, *, strict: bool = False) -> Decimal | None:
    """
    Parse a localized money fragment such as "R$ 1.234,56" into a Decimal.

    Args:
        text: Text that may contain currency symbols, thousands separators
            and a decimal comma.
        strict: Prefer the last explicit two-decimal fragment on the line
            (e.g. "29,90" in "2 UN X 14,95 29,90") before stripping digits,
            so quantities and document numbers are not read as prices.

    Returns:
        The parsed amount, or None if the text has no usable numeric content.
    """
    if not text:
        return None

    if strict:
        fragments = PRICE_FRAGMENT.findall(text)
        if fragments:
            fragment = re.sub(r"\s", "", fragments[-1])
            if DOT_DECIMAL.match(fragment):
                # OCR often reads the decimal comma as a period.
                return _to_decimal(fragment)
            text = fragment

    clean = re.sub(r"[^\d,.\-]", "", text)
    clean = clean.replace(".", "")
    clean = clean.replace(",", ".", 1)
    return _to_decimal(clean)
