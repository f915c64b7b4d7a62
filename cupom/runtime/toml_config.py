"""Shared TOML file loading for runtime rule loaders."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from cupom.runtime.logging import get_logger

logger = get_logger(__name__)


def load_toml(path: Path) -> dict[str, Any]:
    """Load TOML file and return parsed dict; missing files map to empty dict."""
    try:
        import tomllib
    except ImportError:
        import tomli as tomllib  # type: ignore[no-redef]

    if not path.exists():
        logger.debug("No rule file at %s", path)
        return {}

    with open(path, "rb") as f:
        data = tomllib.load(f)
    logger.debug("Loaded rule file %s", path)
    return data if isinstance(data, dict) else {}
