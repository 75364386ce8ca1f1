from __future__ import annotations

import logging
import os
from typing import Optional


_LOGGER: Optional[logging.Logger] = None


def _resolve_level(value: str | None) -> int:
    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the shared ``facecam`` logger, or a child of it when ``name`` is given."""
    global _LOGGER
    if _LOGGER is None:
        logger = logging.getLogger("facecam")
        if not logger.handlers:
            handler = logging.StreamHandler()
            handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
            logger.addHandler(handler)
        logger.setLevel(_resolve_level(os.getenv("FACECAM_LOG_LEVEL")))
        _LOGGER = logger
    if name:
        return _LOGGER.getChild(name)
    return _LOGGER
