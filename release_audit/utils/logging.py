from __future__ import annotations

import logging
import os
import sys

_LEVELS = {
    "CRITICAL": logging.CRITICAL,
    "ERROR": logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO": logging.INFO,
    "DEBUG": logging.DEBUG,
}

_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"


def setup_logging(level: str | int | None = None) -> None:
    """
    Log to stderr so stdout carries only the report.
    Level comes from the argument, then AUDIT_LOG_LEVEL, then WARNING.
    """
    if level is None:
        level = os.getenv("AUDIT_LOG_LEVEL", "WARNING")

    if isinstance(level, str):
        level = _LEVELS.get(level.upper(), logging.WARNING)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(_FORMAT))
    logging.basicConfig(level=level, handlers=[handler])
    # aiohttp's per-connection chatter is only useful when debugging the fetcher itself
    logging.getLogger("aiohttp").setLevel(max(level, logging.WARNING))
