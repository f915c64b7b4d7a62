"""Numeric reconciliation shared by the OCR text and extraction receipt paths."""

from collections.abc import Iterable
from decimal import Decimal

from cupom.domain.receipt import ParsedLineItem

# Absorbs rounding noise without hiding a misread line.
MISMATCH_TOLERANCE = Decimal("0.05")
# An item costing more than 120% of the whole receipt is almost certainly a misread.
SUSPECT_TOTAL_RATIO = Decimal("1.2")
# Absolute per-item ceiling, in receipt currency units.
SUSPECT_ABSOLUTE_CEILING = Decimal("500")

RECEIPT_TOTAL_LABEL = "total do cupom"
EXTRACTION_TOTAL_LABEL = "total retornado pelo servico de extracao"


def totals_mismatch(items_total: Decimal, authoritative_total: Decimal | None) -> bool:
    """Return True when both totals are known and differ by more than the tolerance."""
    if authoritative_total is None:
        return False
    return abs(items_total - authoritative_total) > MISMATCH_TOLERANCE


def mismatch_warning(
    items_total: Decimal,
    authoritative_total: Decimal | None,
    *,
    total_label: str = RECEIPT_TOTAL_LABEL,
) -> str | None:
    """
    Build the user-facing warning for an items-sum/total discrepancy.

    Args:
        items_total: Sum of the parsed item values.
        authoritative_total: Printed or service-reported total; None skips the check.
        total_label: How the authoritative total is named in the message.

    Returns:
        The warning text, or None when the totals agree within tolerance.
    """
    if not totals_mismatch(items_total, authoritative_total):
        return None
    assert authoritative_total is not None
    return (
        f"A soma dos itens (R$ {items_total:.2f}) difere do {total_label} "
        f"(R$ {authoritative_total:.2f}). Confira se alguma linha nao foi lida "
        "corretamente (ex: troco, desconto, forma de pagamento)."
    )


def is_suspect_value(
    value: Decimal,
    authoritative_total: Decimal | None,
    *,
    ceiling: Decimal = SUSPECT_ABSOLUTE_CEILING,
) -> bool:
    """Return True if an item value is implausible for this receipt."""
    if authoritative_total is not None and value > authoritative_total * SUSPECT_TOTAL_RATIO:
        return True
    return value > ceiling


def flag_suspect_items(
    items: Iterable[ParsedLineItem],
    authoritative_total: Decimal | None,
    *,
    ceiling: Decimal = SUSPECT_ABSOLUTE_CEILING,
) -> list[ParsedLineItem]:
    """
    Mark implausible items as suspect and return the flagged ones.

    Flagging is advisory: items stay in the list and in every total.
    """
    flagged: list[ParsedLineItem] = []
    for item in items:
        if is_suspect_value(item.value, authoritative_total, ceiling=ceiling):
            item.suspect = True
            flagged.append(item)
    return flagged


def suspect_items_warning(items: Iterable[ParsedLineItem]) -> str | None:
    """Summarize suspect items in one warning line, or None if there are none."""
    suspects = [item for item in items if item.suspect]
    if not suspects:
        return None
    listed = ", ".join(f'"{item.description}" ({item.value:.2f})' for item in suspects)
    return f"Valores suspeitos: {listed}"
