"""End-to-end tests for OCR text receipt processing.

Each test case consists of files in tests/receipts_e2e/:
  - Raw OCR text: <name>.txt
  - Expected results: <name>.expected.json
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any, cast

import pytest

from cupom.receipt.formatter import receipt_to_dict
from cupom.receipt.ocr_result_parser import parse_receipt_text

RECEIPTS_DIR = Path(__file__).parent / "receipts_e2e"

ITEM_FIELDS = ("description", "total", "is_discount", "suspect", "suggested_category")


@dataclass(frozen=True)
class E2ECase:
    name: str
    text_path: Path
    expected_path: Path


def find_e2e_test_cases() -> list[E2ECase]:
    """Find test cases by <name>.expected.json with a matching <name>.txt."""
    test_cases: list[E2ECase] = []
    for expected_path in RECEIPTS_DIR.glob("*.expected.json"):
        name = expected_path.name.removesuffix(".expected.json")
        text_path = RECEIPTS_DIR / f"{name}.txt"
        if text_path.exists():
            test_cases.append(E2ECase(name=name, text_path=text_path, expected_path=expected_path))
    return sorted(test_cases, key=lambda c: c.name)


def load_expected(expected_path: Path) -> dict[str, Any]:
    with open(expected_path, encoding="utf-8") as f:
        return cast(dict[str, Any], json.load(f))


def test_e2e_cases_present() -> None:
    assert find_e2e_test_cases(), f"No e2e receipts found in {RECEIPTS_DIR}"


@pytest.mark.parametrize("case", find_e2e_test_cases(), ids=lambda c: c.name)
def test_receipt_text_end_to_end(case: E2ECase) -> None:
    expected = load_expected(case.expected_path)

    receipt = parse_receipt_text(case.text_path.read_text(encoding="utf-8"))
    actual = receipt_to_dict(receipt)

    assert actual["store_name"] == expected["store_name"]
    assert actual["date"] == expected["date"]
    assert actual["total"] == expected["total"]
    assert actual["items_total"] == expected["items_total"]
    assert [{field: item[field] for field in ITEM_FIELDS} for item in actual["items"]] == expected["items"]
    assert len(actual["warnings"]) == expected["warning_count"], actual["warnings"]
