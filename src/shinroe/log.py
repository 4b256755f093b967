"""shinroe.log — Structured JSON logging for the ``shinroe`` logger tree."""

import logging

from pythonjsonlogger.json import JsonFormatter


def setup_structured_logging(level: str = "INFO") -> logging.Logger:
    """Configure JSON structured logging on the ``shinroe`` logger."""
    logger = logging.getLogger("shinroe")
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not logger.handlers:
        handler = logging.StreamHandler()
        formatter = JsonFormatter(
            fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"asctime": "timestamp", "levelname": "level"},
        )
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    return logger
