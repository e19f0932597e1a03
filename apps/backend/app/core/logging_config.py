from __future__ import annotations

import logging

from .config import LOG_LEVELS, settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Install the root handler once; later calls only adjust the level."""
    resolved = (level or settings.LOG_LEVEL or "INFO").upper()
    if resolved not in LOG_LEVELS:
        raise ValueError(f"unknown log level {resolved!r}, expected one of {', '.join(LOG_LEVELS)}")
    logging.basicConfig(level=resolved, format=LOG_FORMAT)
    logging.getLogger().setLevel(resolved)
