"""
Logging

All module loggers hang off the ``celeb_lookalike`` logger. Console output
uses short status prefixes; ``LOG_FILE`` adds a timestamped file log.

Usage:
    from celeb_lookalike.core.logger import get_logger
    logger = get_logger(__name__)

    logger.info("Gallery ready: 9/10 references")   # [OK] Gallery ready: 9/10 references
    logger.warning("Failed ref: Zendaya")            # [WARNING] Failed ref: Zendaya
"""

import sys
import logging
from pathlib import Path
from typing import Optional

from .config import settings

ROOT_LOGGER_NAME = "celeb_lookalike"

FILE_FORMAT = "[%(levelname)s] %(asctime)s - %(name)s - %(message)s"
FILE_DATEFMT = "%Y-%m-%d %H:%M:%S"


class StatusFormatter(logging.Formatter):
    """Console formatter: ``[OK] message`` for INFO, ``[LEVEL] message`` otherwise."""

    PREFIXES = {
        logging.INFO: "[OK]",
    }

    def format(self, record: logging.LogRecord) -> str:
        prefix = self.PREFIXES.get(record.levelno, f"[{record.levelname}]")
        text = f"{prefix} {record.getMessage()}"
        if record.exc_info:
            record.exc_text = record.exc_text or self.formatException(record.exc_info)
        if record.exc_text:
            text = f"{text}\n{record.exc_text}"
        return text


def _parse_level(level: Optional[str]) -> int:
    value = logging.getLevelName(str(level or "INFO").upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(level: Optional[str] = None, log_file: Optional[str] = None) -> logging.Logger:
    """
    (Re)configure the package logger.

    Replaces any handlers installed by a previous call, so the CLI can apply
    ``--log-level`` after import-time setup.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    numeric_level = _parse_level(level or settings.logging.log_level)
    root.setLevel(numeric_level)

    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(StatusFormatter())
    root.addHandler(console)

    log_file = log_file or settings.logging.log_file
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT, FILE_DATEFMT))
        root.addHandler(file_handler)

    return root


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Logger for a module.

    ``get_logger(__name__)`` and ``get_logger("gallery")`` both end up under
    ``celeb_lookalike``.
    """
    if not name or name == ROOT_LOGGER_NAME:
        return logger
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


logger = configure_logging()


__all__ = [
    "logger",
    "get_logger",
    "configure_logging",
    "StatusFormatter",
]
