"""Tests for items-sum reconciliation and suspect item flagging."""

from decimal import Decimal

from cupom.domain.receipt import ParsedLineItem, ParsedReceipt
from cupom.receipt.reconciliation import (
    EXTRACTION_TOTAL_LABEL,
    flag_suspect_items,
    is_suspect_value,
    mismatch_warning,
    suspect_items_warning,
    totals_mismatch,
)


def test_within_tolerance_has_no_warning() -> None:
    assert mismatch_warning(Decimal("100.00"), Decimal("100.04")) is None
    assert mismatch_warning(Decimal("100.00"), Decimal("100.05")) is None


def test_beyond_tolerance_warns_with_both_amounts() -> None:
    warning = mismatch_warning(Decimal("100.00"), Decimal("100.06"))

    assert warning is not None
    assert "100.00" in warning
    assert "100.06" in warning
    assert "total do cupom" in warning


def test_unknown_total_never_mismatches() -> None:
    assert not totals_mismatch(Decimal("10.00"), None)
    assert mismatch_warning(Decimal("10.00"), None) is None


def test_warning_names_the_total_source() -> None:
    warning = mismatch_warning(Decimal("10.00"), Decimal("20.00"), total_label=EXTRACTION_TOTAL_LABEL)

    assert warning is not None
    assert EXTRACTION_TOTAL_LABEL in warning


def test_suspect_relative_to_total() -> None:
    assert is_suspect_value(Decimal("70.00"), Decimal("50.00"))
    assert not is_suspect_value(Decimal("55.00"), Decimal("50.00"))
    assert not is_suspect_value(Decimal("60.00"), Decimal("50.00"))


def test_suspect_absolute_ceiling_without_total() -> None:
    assert is_suspect_value(Decimal("500.01"), None)
    assert not is_suspect_value(Decimal("500.00"), None)
    assert is_suspect_value(Decimal("120.00"), None, ceiling=Decimal("100"))


def test_flag_suspect_items_marks_and_keeps_items() -> None:
    items = [
        ParsedLineItem(description="CAFE", value=Decimal("70.00")),
        ParsedLineItem(description="LEITE", value=Decimal("55.00")),
    ]

    flagged = flag_suspect_items(items, Decimal("50.00"))

    assert flagged == [items[0]]
    assert items[0].suspect is True
    assert items[1].suspect is False
    assert len(items) == 2


def test_suspect_items_warning_lists_descriptions() -> None:
    items = [
        ParsedLineItem(description="CAFE", value=Decimal("70.00"), suspect=True),
        ParsedLineItem(description="LEITE", value=Decimal("5.00")),
    ]

    assert suspect_items_warning(items) == 'Valores suspeitos: "CAFE" (70.00)'
    assert suspect_items_warning(items[1:]) is None


def test_items_total_is_recomputed_from_items() -> None:
    receipt = ParsedReceipt(
        store_name="Loja",
        date=None,
        raw_total_from_receipt=None,
        items=[
            ParsedLineItem(description="A", value=Decimal("0.105")),
            ParsedLineItem(description="B", value=Decimal("1.00")),
        ],
    )

    assert receipt.items_total == Decimal("1.11")
    receipt.items[1].value = Decimal("2.00")
    assert receipt.items_total == Decimal("2.11")
    assert receipt.authoritative_total == Decimal("2.11")
