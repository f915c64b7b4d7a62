"""Tests for receipt item category suggestions."""

from pathlib import Path

import pytest

from cupom.receipt.item_categories import (
    FUEL,
    GIFTS,
    GROCERY,
    PET,
    build_item_category_rules,
    suggest_category,
    suggest_category_debug,
)
from cupom.runtime.item_category_rules import load_item_category_rules


@pytest.mark.parametrize(
    ("description", "expected"),
    [
        ("Feijão Carioca 1kg", GROCERY),
        ("ARROZ 5KG", GROCERY),
        ("file de peito", GROCERY),
        ("BISCOITO RECHEADO", GROCERY),
        ("GASOLINA COMUM", FUEL),
        ("Etanol", FUEL),
        ("RACAO GOLDEN 15KG", PET),
        ("RACA0 GOLDEN", PET),
        ("CAMISETA POLO", GIFTS),
    ],
)
def test_default_categories(description: str, expected: str) -> None:
    assert suggest_category(description) == expected


@pytest.mark.parametrize("description", ["DETERGENTE YPE", "", "   "])
def test_unmatched_description_has_no_category(description: str) -> None:
    assert suggest_category(description) is None


def test_config_rules_add_categories() -> None:
    rules = build_item_category_rules([{"rules": [{"keywords": ["detergente"], "category": "Casa"}]}])

    assert suggest_category("DETERGENTE YPE", rules) == "Casa"
    assert suggest_category("ARROZ", rules) == GROCERY


def test_config_rules_shadow_defaults() -> None:
    rules = build_item_category_rules([{"rules": [{"keywords": ["leite"], "category": "Laticinios"}]}])

    assert suggest_category("LEITE INTEGRAL", rules) == "Laticinios"


def test_later_config_layer_wins() -> None:
    rules = build_item_category_rules(
        [
            {"rules": [{"keywords": ["SABAO"], "category": "Limpeza"}]},
            {"rules": [{"keywords": ["SABAO"], "category": "Casa"}]},
        ]
    )

    assert suggest_category("SABAO EM PO", rules) == "Casa"


def test_invalid_config_rules_are_ignored() -> None:
    rules = build_item_category_rules(
        [
            {
                "rules": [
                    "not-a-table",
                    {"keywords": [], "category": "Vazio"},
                    {"keywords": ["SABAO"], "category": ""},
                ]
            }
        ],
        include_defaults=False,
    )

    assert rules.rules == ()


def test_without_defaults_only_config_rules_apply() -> None:
    rules = build_item_category_rules([{"rules": [{"keywords": "SABAO", "category": "Casa"}]}], include_defaults=False)

    assert suggest_category("ARROZ", rules) is None
    assert suggest_category("SABAO", rules) == "Casa"


def test_suggest_category_debug_lists_matches_in_order() -> None:
    matches = suggest_category_debug("RACAO PET CARNE")

    assert matches[0] == (GROCERY, "CARNE")
    assert (PET, "RACAO") in matches
    assert (PET, "PET") in matches


def test_runtime_loader_reads_project_toml(isolated_config_dir: Path) -> None:
    (isolated_config_dir / "item_categories.toml").write_text(
        """
[[rules]]
keywords = ["SABAO", "DETERGENTE"]
category = "Casa"
""",
        encoding="utf-8",
    )

    rules = load_item_category_rules()

    assert suggest_category("Detergente Limpol", rules) == "Casa"
    assert suggest_category("Leite", rules) == GROCERY


def test_runtime_loader_explicit_paths(tmp_path: Path) -> None:
    first = tmp_path / "base.toml"
    second = tmp_path / "local.toml"
    first.write_text('[[rules]]\nkeywords = ["CERVEJA"]\ncategory = "Bebidas"\n', encoding="utf-8")
    second.write_text('[[rules]]\nkeywords = ["CERVEJA"]\ncategory = "Lazer"\n', encoding="utf-8")

    rules = load_item_category_rules((str(first), str(second)))

    assert suggest_category("CERVEJA LATA", rules) == "Lazer"


def test_runtime_loader_missing_file_uses_defaults() -> None:
    rules = load_item_category_rules()

    assert rules == build_item_category_rules()
