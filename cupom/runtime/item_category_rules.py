"""Runtime loader for receipt item categorization rules."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from cupom.receipt.item_categories import ItemCategoryRules, build_item_category_rules
from cupom.runtime.paths import get_paths
from cupom.runtime.toml_config import load_toml


@lru_cache(maxsize=8)
def load_item_category_rules(rule_paths: tuple[str, ...] | None = None) -> ItemCategoryRules:
    """Load item-category rules from runtime-configured files into a pure in-memory table.

    Files are layered in order; the last file is the most specific and is
    searched first. Built-in defaults always come last.
    """
    if rule_paths is None:
        files = [get_paths().item_categories]
    else:
        files = [Path(path) for path in rule_paths]

    configs = tuple(load_toml(path) for path in files)
    return build_item_category_rules(configs)
