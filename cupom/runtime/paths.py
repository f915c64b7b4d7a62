"""Centralized path management for cupom.

Single source of truth for the config directory and the TOML rule files
that layer on top of the built-in keyword tables.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

CONFIG_DIR_ENV = "CUPOM_CONFIG_DIR"


def _get_config_dir() -> Path:
    """Resolve the config directory from CUPOM_CONFIG_DIR or ~/.config/cupom."""
    configured = os.environ.get(CONFIG_DIR_ENV, "").strip()
    if configured:
        return Path(configured).expanduser()
    return Path("~/.config/cupom").expanduser()


@dataclass
class ProjectPaths:
    """Container for all configuration paths."""

    config_dir: Path = field(default_factory=_get_config_dir)

    def __post_init__(self) -> None:
        self.config_dir = Path(self.config_dir).expanduser().resolve()

    @property
    def item_categories(self) -> Path:
        """Project-level item keyword -> category rules TOML file."""
        return self.config_dir / "item_categories.toml"

    @property
    def line_classifier(self) -> Path:
        """Project-level line classifier keyword TOML file."""
        return self.config_dir / "line_classifier.toml"


_paths: ProjectPaths | None = None


def get_paths() -> ProjectPaths:
    """Get the singleton ProjectPaths instance.

    Returns:
        The global ProjectPaths instance.
    """
    global _paths
    if _paths is None:
        _paths = ProjectPaths()
    return _paths


def reset_paths() -> None:
    """Forget the cached ProjectPaths so the environment is read again."""
    global _paths
    _paths = None
