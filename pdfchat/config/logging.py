"""Logging setup for pdfchat.

Everything logs under the ``pdfchat`` logger. The default output is one
human-readable line per record. With ``json_format`` each record becomes a
JSON object, and a ``PDFChatError`` attached to the record is embedded with
its full ``to_dict()`` payload (code, location, cause, context).
"""

import json
import logging
import sys
from typing import Any

from ..core.domain.exceptions import PDFChatError

ROOT_LOGGER_NAME = "pdfchat"
TEXT_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s:%(funcName)s | %(message)s"


class JSONExceptionFormatter(logging.Formatter):
    """One JSON object per record, with structured exception details."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": record.filename,
                "function": record.funcName,
                "line": record.lineno,
            },
        }

        context = getattr(record, "context", None)
        if context:
            entry["context"] = context

        exc = record.exc_info[1] if record.exc_info else None
        if isinstance(exc, PDFChatError):
            entry["exception"] = exc.to_dict(include_trace=True)
        elif exc is not None:
            entry["exception"] = {
                "type": type(exc).__name__,
                "message": str(exc),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(entry, default=str)


def setup_logging(level: str = "INFO", json_format: bool = False) -> logging.Logger:
    """Configure the ``pdfchat`` logger.

    Safe to call repeatedly: existing handlers are replaced, so the API module
    and the CLI callback can both call it.
    """
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    if json_format:
        handler.setFormatter(JSONExceptionFormatter())
    else:
        handler.setFormatter(logging.Formatter(TEXT_FORMAT, datefmt="%Y-%m-%d %H:%M:%S"))
    logger.addHandler(handler)

    return logger
