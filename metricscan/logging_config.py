"""Process-wide logging setup for the CLI, API and MCP entry points."""

from __future__ import annotations

import logging


LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] - %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

_SUPPRESSED_LOGGERS = ("httpx", "httpcore")

_configured = False


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once; later calls only adjust the level."""
    global _configured
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    if _configured:
        logging.getLogger().setLevel(numeric_level)
        return
    _configured = True

    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, datefmt=LOG_DATEFMT)
    for name in _SUPPRESSED_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
