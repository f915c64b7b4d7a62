"""Runtime infrastructure for cupom.

This package provides process/runtime services including:
- Logging setup via get_logger(), set_log_level()
- Config path resolution via get_paths(), ProjectPaths
- TOML rule loading via load_item_category_rules(), load_line_classifier_rules()

Usage:
    from cupom.runtime import get_logger, get_paths

    logger = get_logger(__name__)
    paths = get_paths()
    print(paths.config_dir, paths.item_categories)
"""

from cupom.runtime.item_category_rules import load_item_category_rules
from cupom.runtime.line_classifier_rules import load_line_classifier_rules
from cupom.runtime.logging import (
    DEFAULT_LOG_LEVEL,
    LOG_FORMAT,
    LOG_FORMAT_DEBUG,
    configure_logging,
    get_logger,
    parse_log_level,
    set_log_level,
)
from cupom.runtime.paths import ProjectPaths, get_paths, reset_paths

__all__ = [
    # Logging
    "get_logger",
    "configure_logging",
    "set_log_level",
    "parse_log_level",
    "DEFAULT_LOG_LEVEL",
    "LOG_FORMAT",
    "LOG_FORMAT_DEBUG",
    # Rules
    "load_item_category_rules",
    "load_line_classifier_rules",
    # Paths
    "get_paths",
    "reset_paths",
    "ProjectPaths",
]
