from __future__ import annotations

import logging
import os

_DEFAULT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
_DEFAULT_DATEFMT = "%H:%M:%S"


def _coerce_level(value: str | None, fallback: int) -> int:
    if not value:
        return fallback
    text = value.strip()
    if text.isdigit():
        return int(text)
    candidate = getattr(logging, text.upper(), None)
    if isinstance(candidate, int):
        return candidate
    return fallback


def configure_logging(default_level: int = logging.INFO) -> int:
    """
    Configure the root logger with a compact format.

    Environment overrides:
      - DAL_LOG_LEVEL: explicit log level name or number
      - DAL_DEBUG: truthy -> DEBUG
    """
    level = _coerce_level(os.getenv("DAL_LOG_LEVEL"), default_level)
    if os.getenv("DAL_DEBUG", "").strip().lower() in {"1", "true", "yes", "on"}:
        level = logging.DEBUG

    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level, format=_DEFAULT_FORMAT, datefmt=_DEFAULT_DATEFMT)
    root.setLevel(level)
    # urllib3 logs every connection at DEBUG
    logging.getLogger("urllib3").setLevel(max(level, logging.INFO))
    return level
