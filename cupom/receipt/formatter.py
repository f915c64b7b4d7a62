"""Format ParsedReceipt data for review output and JSON responses."""

from decimal import Decimal
from typing import Any

from cupom.domain.receipt import ParsedLineItem, ParsedReceipt, round_money


def _money(value: Decimal | None) -> str | None:
    if value is None:
        return None
    return f"{round_money(value):.2f}"


def _quantity(value: Decimal) -> str:
    # "1" rather than "1.000" for whole quantities
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal("1")))
    return str(normalized)


def item_to_dict(item: ParsedLineItem) -> dict[str, Any]:
    """Serialize one item; money as 2-decimal strings to avoid float drift."""
    return {
        "id": item.item_id,
        "description": item.description,
        "quantity": _quantity(item.quantity),
        "unit_price": _money(item.unit_value),
        "total": _money(item.value),
        "is_discount": item.is_discount,
        "suspect": item.suspect,
        "suggested_category": item.suggested_category,
        "raw_line": item.raw_line,
    }


def receipt_to_dict(receipt: ParsedReceipt) -> dict[str, Any]:
    """Serialize a ParsedReceipt into a JSON-friendly dict."""
    return {
        "store_name": receipt.store_name,
        "date": receipt.date.isoformat() if receipt.date else None,
        "currency": receipt.currency,
        "source": receipt.source,
        "total": _money(receipt.authoritative_total),
        "raw_total_from_receipt": _money(receipt.raw_total_from_receipt),
        "items_total": _money(receipt.items_total),
        "items": [item_to_dict(item) for item in receipt.items],
        "warnings": list(receipt.warnings),
        "suggested_category": receipt.suggested_category,
        "raw_text": receipt.raw_text,
    }


def format_receipt_summary(receipt: ParsedReceipt) -> str:
    """Render a receipt as plain text for manual review in a terminal."""
    lines = [
        "=" * 60,
        "PARSED RECEIPT",
        "=" * 60,
        f"Store: {receipt.store_name}",
        f"Date: {receipt.date.isoformat() if receipt.date else 'UNKNOWN'}",
    ]
    if receipt.raw_total_from_receipt is not None:
        lines.append(f"Total: R$ {receipt.raw_total_from_receipt:.2f}")
    else:
        lines.append("Total: not found (using items sum)")
    lines.append(f"Items sum: R$ {receipt.items_total:.2f}")

    lines.append(f"\nItems ({len(receipt.items)}):")
    for i, item in enumerate(receipt.items, 1):
        qty_str = f" x{_quantity(item.quantity)}" if item.quantity != 1 else ""
        cat_str = f" [{item.suggested_category}]" if item.suggested_category else ""
        flags = []
        if item.is_discount:
            flags.append("desconto")
        if item.suspect:
            flags.append("SUSPEITO")
        flag_str = f" ({', '.join(flags)})" if flags else ""
        lines.append(f"  {i}. {item.description}{qty_str} - R$ {item.value:.2f}{cat_str}{flag_str}")

    if receipt.warnings:
        lines.append("\nWarnings:")
        lines.extend(f"  ! {warning}" for warning in receipt.warnings)
    lines.append("=" * 60)
    return "\n".join(lines)
