"""Normalize receipts already segmented by an external extraction service.

The service hands back store/date/total plus a list of line items with
quantity, unit price and line total, but field presence varies between
integrations. summary_from_payload() maps a loose JSON payload into a
StructuredReceiptSummary; normalize_structured_receipt() then derives the
missing figures and reconciles the item sum against the reported total.
"""

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

from cupom.domain.receipt import (
    ParsedLineItem,
    ParsedReceipt,
    StructuredReceiptItem,
    StructuredReceiptSummary,
)

from .date_utils import parse_purchase_date
from .item_categories import ItemCategoryRules, suggest_category
from .money import parse_money
from .reconciliation import EXTRACTION_TOTAL_LABEL, mismatch_warning

DEFAULT_STORE = "Cupom"
DEFAULT_ITEM_DESCRIPTION = "Item"
DEFAULT_CURRENCY = "BRL"

# Payload aliases seen across integrations, in lookup order.
STORE_KEYS = ("loja", "store", "store_name")
DATE_KEYS = ("data_compra", "purchase_date", "date", "created_date")
TOTAL_KEYS = ("total_cupom", "total_amount", "total", "total_itens")
CURRENCY_KEYS = ("moeda", "currency", "currency_code")
ITEMS_KEYS = ("itens", "items", "line_items")
SUGGESTED_CATEGORY_KEYS = ("suggestedCategory", "suggested_category")
ITEM_DESCRIPTION_KEYS = ("descricao", "description", "text")
ITEM_QUANTITY_KEYS = ("quantidade", "quantity")
ITEM_UNIT_PRICE_KEYS = ("valorUnitario", "unit_price", "preco_unitario")
ITEM_TOTAL_KEYS = ("total", "line_total", "total_item")
ITEM_CATEGORY_KEYS = ("categoria", "category")


def _first(payload: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = payload.get(key)
        if value is not None and value != "":
            return value
    return None


def _to_decimal(value: Any) -> Decimal | None:
    """Coerce a service number (int, float, "12.50", "1.234,56") into a Decimal."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, Decimal):
        return value if value.is_finite() else None
    if isinstance(value, (int, float)):
        result = Decimal(str(value))
        return result if result.is_finite() else None
    if isinstance(value, str):
        text = value.strip()
        if not text:
            return None
        if "," in text:
            return parse_money(text)
        try:
            result = Decimal(text)
        except InvalidOperation:
            return parse_money(text)
        return result if result.is_finite() else None
    return None


def _to_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def summary_from_payload(payload: Mapping[str, Any]) -> StructuredReceiptSummary:
    """
    Map a loosely-shaped extraction service payload into a StructuredReceiptSummary.

    Accepts Portuguese and English key aliases (e.g. "loja"/"store",
    "itens"/"items"/"line_items"). Unknown keys are ignored.

    Raises:
        ValueError: If the payload is not a mapping or its item list is not a list.
    """
    if not isinstance(payload, Mapping):
        raise ValueError(f"Structured receipt payload must be an object, got {type(payload).__name__}")

    store = _first(payload, STORE_KEYS)
    vendor = payload.get("vendor")
    if store is None and isinstance(vendor, Mapping):
        store = vendor.get("name")

    raw_items = _first(payload, ITEMS_KEYS) or []
    if not isinstance(raw_items, list):
        raise ValueError("Structured receipt items must be a list")

    items: list[StructuredReceiptItem] = []
    for raw_item in raw_items:
        if not isinstance(raw_item, Mapping):
            continue
        items.append(
            StructuredReceiptItem(
                id=_to_text(raw_item.get("id")),
                description=_to_text(_first(raw_item, ITEM_DESCRIPTION_KEYS)) or DEFAULT_ITEM_DESCRIPTION,
                quantity=_to_decimal(_first(raw_item, ITEM_QUANTITY_KEYS)),
                unit_price=_to_decimal(_first(raw_item, ITEM_UNIT_PRICE_KEYS)),
                total=_to_decimal(_first(raw_item, ITEM_TOTAL_KEYS)),
                category=_to_text(_first(raw_item, ITEM_CATEGORY_KEYS)),
            )
        )

    return StructuredReceiptSummary(
        store=_to_text(store),
        purchase_date=_to_text(_first(payload, DATE_KEYS)),
        total_amount=_to_decimal(_first(payload, TOTAL_KEYS)),
        currency=_to_text(_first(payload, CURRENCY_KEYS)),
        items=items,
        suggested_category=_to_text(_first(payload, SUGGESTED_CATEGORY_KEYS)),
    )


def _normalize_item(
    item: StructuredReceiptItem,
    index: int,
    category_rules: ItemCategoryRules | None,
) -> ParsedLineItem | None:
    """Derive quantity/unit price/total for one item; None if it has no amount at all."""
    # Clamp before any division.
    quantity = item.quantity if item.quantity is not None and item.quantity > 0 else Decimal("1")

    unit_price = item.unit_price
    total = item.total
    if unit_price is None and total is not None:
        unit_price = total / quantity
    if not total and unit_price is not None:
        total = unit_price * quantity
    if total is None or unit_price is None:
        return None

    description = item.description.strip() or DEFAULT_ITEM_DESCRIPTION
    return ParsedLineItem(
        description=description,
        value=total,
        quantity=quantity,
        unit_price=unit_price,
        item_id=item.id if item.id is not None else str(index),
        suggested_category=item.category or suggest_category(description, category_rules),
    )


def normalize_structured_receipt(
    summary: StructuredReceiptSummary,
    *,
    category_rules: ItemCategoryRules | None = None,
) -> ParsedReceipt:
    """
    Build a ParsedReceipt from an extraction service summary.

    Item boundaries come from the service as-is. Only the aggregate is
    double-checked: the item sum is compared against the reported grand
    total (falling back to the item sum when the service reports none).
    """
    items: list[ParsedLineItem] = []
    for index, structured_item in enumerate(summary.items):
        item = _normalize_item(structured_item, index, category_rules)
        if item is not None:
            items.append(item)

    receipt = ParsedReceipt(
        store_name=summary.store or DEFAULT_STORE,
        date=parse_purchase_date(summary.purchase_date),
        raw_total_from_receipt=None,
        items=items,
        currency=summary.currency or DEFAULT_CURRENCY,
        source="extraction",
        suggested_category=summary.suggested_category,
    )
    reported_total = summary.total_amount if summary.total_amount is not None else receipt.items_total
    receipt.raw_total_from_receipt = reported_total

    warning = mismatch_warning(receipt.items_total, reported_total, total_label=EXTRACTION_TOTAL_LABEL)
    if warning:
        receipt.warnings.append(warning)
    return receipt
