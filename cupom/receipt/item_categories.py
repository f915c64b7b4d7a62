"""Spending-category suggestions for receipt line items.

Maps an item description to a category label by substring lookup:
the description is accent-folded and upper-cased, then rules are scanned in
order and the first keyword contained in the description wins.

To add new rules, put them in the project item_categories.toml:

    [[rules]]
    keywords = ["SABAO", "DETERGENTE"]
    category = "Casa"

Project rules are searched before the built-in table below, so they can
shadow a default keyword.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from functools import lru_cache
from typing import Any

from .line_classifier import fold_accents

GROCERY = "Mercado"
FUEL = "Gasolina"
PET = "Pet"
GIFTS = "Presentes"

# Order matters: the first matching keyword wins.
DEFAULT_CATEGORY_RULES: tuple[tuple[tuple[str, ...], str], ...] = (
    (
        (
            "CARNE",
            "FILE",
            "FRANGO",
            "LEITE",
            "QUEIJO",
            "IOGURTE",
            "MANTEIGA",
            "ARROZ",
            "FEIJAO",
            "ACUCAR",
            "CAFE",
            "MACARRAO",
            "FARINHA",
            "OVOS",
            "BIS",
        ),
        GROCERY,
    ),
    (("ROUPA", "ROUP", "CAMISETA"), GIFTS),
    (("GASOLINA", "ETANOL", "DIESEL", "COMBUSTIVEL"), FUEL),
    # "RACA" catches OCR dropping the final O of RACAO.
    (("RACAO", "RACA", "PET"), PET),
)

RuleEntry = tuple[tuple[str, ...], str]


@dataclass(frozen=True)
class ItemCategoryRules:
    """In-memory keyword -> category table, in match order."""

    rules: tuple[RuleEntry, ...]


def normalize_description(description: str) -> str:
    """Accent-fold and upper-case a description for keyword matching."""
    return fold_accents(description).upper()


def _normalize_keywords(raw: Any) -> tuple[str, ...]:
    """Normalize keywords value from TOML into a tuple of match-ready strings."""
    if isinstance(raw, str):
        raw = [raw]
    if not isinstance(raw, list):
        return tuple()
    values = [normalize_description(str(v)).strip() for v in raw]
    return tuple(v for v in values if v)


def build_item_category_rules(
    configs: Sequence[Mapping[str, Any]] | None = None,
    include_defaults: bool = True,
) -> ItemCategoryRules:
    """Build the ordered rule table from in-memory configs plus built-in defaults."""
    rules: list[RuleEntry] = []
    # Later config layers are more specific (project over vendor), so they go first.
    for config in reversed(tuple(configs or ())):
        for rule in config.get("rules", []):
            if not isinstance(rule, Mapping):
                continue
            keywords = _normalize_keywords(rule.get("keywords"))
            if not keywords:
                continue
            category = str(rule.get("category") or "").strip()
            if not category:
                continue
            rules.append((keywords, category))

    if include_defaults:
        rules.extend(DEFAULT_CATEGORY_RULES)
    return ItemCategoryRules(rules=tuple(rules))


@lru_cache(maxsize=1)
def _get_default_rules() -> ItemCategoryRules:
    """Built-in-only default rules (no file I/O, no runtime deps)."""
    return build_item_category_rules()


def suggest_category(description: str, rules: ItemCategoryRules | None = None) -> str | None:
    """
    Return a suggested spending category for an item description.

    Args:
        description: Item description from the receipt (e.g., "Feijão Carioca 1kg")
        rules: Preloaded rule table (typically from the runtime loader).
            When omitted, only the built-in table applies.

    Returns:
        Category label (e.g., "Mercado") or None if no keyword matches.
    """
    normalized = normalize_description(description)
    if not normalized.strip():
        return None
    table = rules or _get_default_rules()
    for keywords, category in table.rules:
        for keyword in keywords:
            if keyword in normalized:
                return category
    return None


def suggest_category_debug(description: str, rules: ItemCategoryRules | None = None) -> list[tuple[str, str]]:
    """Return every (category, keyword) pair that matches, in rule order.

    Useful for understanding why a particular category was chosen.
    """
    normalized = normalize_description(description)
    table = rules or _get_default_rules()
    return [(category, keyword) for keywords, category in table.rules for keyword in keywords if keyword in normalized]
