"""Data models for receipt parsing."""

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Literal

CENTS = Decimal("0.01")

ReceiptLineType = Literal[
    "item",
    "discount",
    "total",
    "paid",
    "change",
    "payment_method",
    "header",
    "footer",
    "unknown",
]

ReceiptSource = Literal["ocr", "extraction"]


def round_money(value: Decimal) -> Decimal:
    """Round a currency amount to two decimal places."""
    return value.quantize(CENTS, rounding=ROUND_HALF_UP)


@dataclass
class ParsedLineItem:
    """A single purchased line recognized on a receipt."""

    description: str
    value: Decimal
    raw_line: str = ""
    is_discount: bool = False
    suspect: bool = False
    suggested_category: str | None = None  # e.g., "Mercado"
    quantity: Decimal = Decimal("1")
    # Only set when the source states it; see unit_value.
    unit_price: Decimal | None = None
    item_id: str | None = None

    @property
    def total(self) -> Decimal:
        return self.value

    @property
    def unit_value(self) -> Decimal:
        if self.unit_price is not None:
            return self.unit_price
        return self.value / self.quantity


@dataclass
class ParsedReceipt:
    """Parsed receipt data shared by the OCR text and extraction paths."""

    store_name: str
    date: date | None
    raw_total_from_receipt: Decimal | None
    items: list[ParsedLineItem] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    raw_text: str = ""  # Original OCR text for reference
    currency: str = "BRL"
    source: ReceiptSource = "ocr"
    suggested_category: str | None = None

    @property
    def items_total(self) -> Decimal:
        """Sum of item values, always recomputed from the current items."""
        return round_money(sum((item.value for item in self.items), Decimal("0")))

    @property
    def authoritative_total(self) -> Decimal:
        """Printed/reported total when known, else the items sum."""
        if self.raw_total_from_receipt is not None:
            return self.raw_total_from_receipt
        return self.items_total


@dataclass
class StructuredReceiptItem:
    """One line item as segmented by an external extraction service."""

    description: str
    quantity: Decimal | None = None
    unit_price: Decimal | None = None
    total: Decimal | None = None
    id: str | None = None
    category: str | None = None


@dataclass
class StructuredReceiptSummary:
    """Receipt summary produced by an external extraction service."""

    store: str | None = None
    purchase_date: str | None = None
    total_amount: Decimal | None = None
    currency: str | None = None
    items: list[StructuredReceiptItem] = field(default_factory=list)
    suggested_category: str | None = None
