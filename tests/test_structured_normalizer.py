"""Tests for normalizing extraction service receipts."""

from datetime import date
from decimal import Decimal

import pytest

from cupom.domain.receipt import StructuredReceiptItem, StructuredReceiptSummary
from cupom.receipt.item_categories import build_item_category_rules
from cupom.receipt.structured_normalizer import (
    DEFAULT_STORE,
    normalize_structured_receipt,
    summary_from_payload,
)


def _summary(*items: StructuredReceiptItem, total: str | None = None) -> StructuredReceiptSummary:
    return StructuredReceiptSummary(
        store="Mercado Central",
        purchase_date="2025-03-01",
        total_amount=Decimal(total) if total is not None else None,
        items=list(items),
    )


def test_zero_quantity_does_not_divide_by_zero() -> None:
    receipt = normalize_structured_receipt(
        _summary(StructuredReceiptItem(description="Pizza", quantity=Decimal("0"), total=Decimal("30")))
    )

    item = receipt.items[0]
    assert item.quantity == Decimal("1")
    assert item.unit_price == Decimal("30")
    assert item.value == Decimal("30")


def test_unit_price_derived_from_total_and_quantity() -> None:
    receipt = normalize_structured_receipt(
        _summary(StructuredReceiptItem(description="Leite", quantity=Decimal("4"), total=Decimal("22.00")))
    )

    assert receipt.items[0].unit_price == Decimal("5.5")


def test_total_derived_from_unit_price() -> None:
    receipt = normalize_structured_receipt(
        _summary(StructuredReceiptItem(description="Ovos", quantity=Decimal("2"), unit_price=Decimal("9.50")))
    )

    assert receipt.items[0].value == Decimal("19.00")


def test_zero_total_is_recomputed_from_unit_price() -> None:
    receipt = normalize_structured_receipt(
        _summary(
            StructuredReceiptItem(
                description="Ovos",
                quantity=Decimal("3"),
                unit_price=Decimal("2.00"),
                total=Decimal("0"),
            )
        )
    )

    assert receipt.items[0].value == Decimal("6.00")


def test_item_without_any_amount_is_dropped() -> None:
    receipt = normalize_structured_receipt(
        _summary(
            StructuredReceiptItem(description="Sacola"),
            StructuredReceiptItem(description="Cafe", total=Decimal("15.00")),
        )
    )

    assert [item.description for item in receipt.items] == ["Cafe"]
    assert receipt.items[0].item_id == "1"


def test_defaults_for_missing_fields() -> None:
    receipt = normalize_structured_receipt(StructuredReceiptSummary())

    assert receipt.store_name == DEFAULT_STORE
    assert receipt.date is None
    assert receipt.currency == "BRL"
    assert receipt.items == []
    assert receipt.raw_total_from_receipt == Decimal("0")
    assert receipt.warnings == []
    assert receipt.source == "extraction"


def test_reported_total_falls_back_to_items_sum() -> None:
    receipt = normalize_structured_receipt(
        _summary(StructuredReceiptItem(description="Arroz", total=Decimal("29.90")))
    )

    assert receipt.raw_total_from_receipt == Decimal("29.90")
    assert receipt.warnings == []


def test_mismatch_against_reported_total_warns() -> None:
    receipt = normalize_structured_receipt(
        _summary(StructuredReceiptItem(description="Arroz", total=Decimal("29.90")), total="35.00")
    )

    assert len(receipt.warnings) == 1
    assert "29.90" in receipt.warnings[0]
    assert "35.00" in receipt.warnings[0]
    assert "servico de extracao" in receipt.warnings[0]


def test_service_category_wins_over_heuristic() -> None:
    receipt = normalize_structured_receipt(
        _summary(
            StructuredReceiptItem(description="Arroz", total=Decimal("10"), category="Feira"),
            StructuredReceiptItem(description="Feijao", total=Decimal("8")),
            StructuredReceiptItem(description="Sabao", total=Decimal("5")),
        ),
        category_rules=build_item_category_rules([{"rules": [{"keywords": ["SABAO"], "category": "Casa"}]}]),
    )

    assert [item.suggested_category for item in receipt.items] == ["Feira", "Mercado", "Casa"]


def test_summary_from_payload_portuguese_keys() -> None:
    summary = summary_from_payload(
        {
            "loja": "Mercado Central",
            "data_compra": "01/03/2025",
            "total_cupom": "1.234,56",
            "itens": [
                {"descricao": "TV", "quantidade": 1, "valorUnitario": "1.234,56", "total": 1234.56},
            ],
            "suggestedCategory": "Eletronicos",
        }
    )

    assert summary.store == "Mercado Central"
    assert summary.total_amount == Decimal("1234.56")
    assert summary.items[0].unit_price == Decimal("1234.56")
    assert summary.items[0].total == Decimal("1234.56")
    assert summary.suggested_category == "Eletronicos"

    receipt = normalize_structured_receipt(summary)
    assert receipt.date == date(2025, 3, 1)
    assert receipt.suggested_category == "Eletronicos"


def test_summary_from_payload_english_keys_and_vendor() -> None:
    summary = summary_from_payload(
        {
            "vendor": {"name": "Posto Shell"},
            "date": "2025-03-01 10:22:00",
            "total": 200.0,
            "currency_code": "BRL",
            "line_items": [
                {"id": 7, "description": "GASOLINA COMUM", "quantity": 32.5, "total": 200.0},
                "not-an-item",
            ],
        }
    )

    receipt = normalize_structured_receipt(summary)

    assert receipt.store_name == "Posto Shell"
    assert receipt.date == date(2025, 3, 1)
    assert len(receipt.items) == 1
    assert receipt.items[0].item_id == "7"
    assert receipt.items[0].quantity == Decimal("32.5")
    assert receipt.items[0].suggested_category == "Gasolina"
    assert receipt.warnings == []


def test_summary_from_payload_missing_description_uses_placeholder() -> None:
    summary = summary_from_payload({"items": [{"total": "3.50"}]})

    assert summary.items[0].description == "Item"
    assert summary.items[0].total == Decimal("3.50")


@pytest.mark.parametrize("payload", [["not", "a", "mapping"], "text", None])
def test_summary_from_payload_rejects_non_mapping(payload: object) -> None:
    with pytest.raises(ValueError):
        summary_from_payload(payload)  # type: ignore[arg-type]


def test_summary_from_payload_rejects_non_list_items() -> None:
    with pytest.raises(ValueError):
        summary_from_payload({"items": {"description": "x"}})
