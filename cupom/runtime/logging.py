"""Logging for the cupom runtime shell.

Only runtime/, application/ and cli/ log; the parsing core stays silent and
reports problems through ParsedReceipt.warnings instead.

Modules call ``get_logger(__name__)``; everything lands under the "cupom"
logger, which writes to stderr so ``cupom parse --json`` keeps stdout clean.
The level comes from ``CUPOM_LOG_LEVEL`` (a name such as DEBUG or a number)
unless the CLI passes ``--log-level``.
"""

import logging
import os
import sys
from typing import TextIO

LOGGER_NAMESPACE = "cupom"
LOG_LEVEL_ENV = "CUPOM_LOG_LEVEL"
DEFAULT_LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(levelname)s [%(name)s] %(message)s"
# Line numbers only help when chasing a misparsed receipt at DEBUG.
LOG_FORMAT_DEBUG = "%(levelname)s [%(name)s:%(lineno)d] %(message)s"

_logging_configured = False


def parse_log_level(value: int | str | None, default: int = DEFAULT_LOG_LEVEL) -> int:
    """Turn "debug", "WARN", "10" or logging.DEBUG into a level number.

    Unknown names fall back to ``default``.
    """
    if isinstance(value, int):
        return value
    text = (value or "").strip().upper()
    if not text:
        return default
    if text.isdigit():
        return int(text)
    if text == "WARN":
        text = "WARNING"
    level = logging.getLevelName(text)
    return level if isinstance(level, int) else default


def _formatter(level: int) -> logging.Formatter:
    return logging.Formatter(LOG_FORMAT_DEBUG if level <= logging.DEBUG else LOG_FORMAT)


def configure_logging(level: int | str | None = None, stream: TextIO | None = None) -> None:
    """Attach a single handler to the cupom namespace (once per process).

    Args:
        level: Level name or number; None reads CUPOM_LOG_LEVEL.
        stream: Handler output, stderr by default.
    """
    global _logging_configured

    if _logging_configured:
        return

    resolved = parse_log_level(level if level is not None else os.environ.get(LOG_LEVEL_ENV))
    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(_formatter(resolved))

    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(resolved)
    namespace_logger.addHandler(handler)
    namespace_logger.propagate = False

    _logging_configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the cupom namespace for a module name."""
    configure_logging()

    # __name__ inside the package already starts with "cupom."
    if name == LOGGER_NAMESPACE or name.startswith(f"{LOGGER_NAMESPACE}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


def set_log_level(level: int | str) -> int:
    """Change the cupom log level at runtime and return the level applied."""
    resolved = parse_log_level(level)
    namespace_logger = logging.getLogger(LOGGER_NAMESPACE)
    namespace_logger.setLevel(resolved)
    for handler in namespace_logger.handlers:
        handler.setFormatter(_formatter(resolved))
    return resolved
