"""Shared pytest fixtures for cupom tests."""

from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path

import pytest

from cupom.runtime import load_item_category_rules, load_line_classifier_rules, reset_paths


@pytest.fixture(autouse=True)
def isolated_config_dir(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the config dir at an empty temp dir so user rule files never leak into tests."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("CUPOM_CONFIG_DIR", str(config_dir))
    reset_paths()
    load_item_category_rules.cache_clear()
    load_line_classifier_rules.cache_clear()
    yield config_dir
    reset_paths()
    load_item_category_rules.cache_clear()
    load_line_classifier_rules.cache_clear()
