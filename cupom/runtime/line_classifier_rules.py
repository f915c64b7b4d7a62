"""Runtime loader for receipt line classifier keyword tables."""

from __future__ import annotations

from functools import lru_cache
from pathlib import Path

from cupom.receipt.line_classifier import LineClassifierRules, build_line_classifier_rules
from cupom.runtime.paths import get_paths
from cupom.runtime.toml_config import load_toml


@lru_cache(maxsize=8)
def load_line_classifier_rules(rule_paths: tuple[str, ...] | None = None) -> LineClassifierRules:
    """Load line classifier keywords from runtime-configured files on top of the defaults."""
    if rule_paths is None:
        files = [get_paths().line_classifier]
    else:
        files = [Path(path) for path in rule_paths]

    configs = tuple(load_toml(path) for path in files)
    return build_line_classifier_rules(configs)
