"""JSONL logging for the fibcalc command line."""

import json
import logging
import sys
from logging import Formatter, StreamHandler
from typing import Optional, TextIO

__all__ = ["JsonFormatter", "setup_logging"]


class JsonFormatter(Formatter):
    """
    One JSON object per line.

    fibcalc logs dicts keyed by ``"event"``; those are merged into the
    record.  Plain string messages get ``"event": "message"`` so every line
    can be filtered on the same key.
    """
    def format(self, record):
        log_record = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "name": record.name,
        }
        if isinstance(record.msg, dict):
            log_record.update(record.msg)
            log_record.setdefault("event", record.funcName)
        else:
            log_record["event"] = "message"
            log_record["message"] = record.getMessage()

        if record.exc_info:
            log_record["error_type"] = record.exc_info[0].__name__
            log_record["exception"] = self.formatException(record.exc_info).replace("\n", "\\n")

        return json.dumps(log_record, default=str)


def setup_logging(debug: bool = False, level: Optional[str] = None, stream: Optional[TextIO] = None) -> None:
    """Configure the root logger to write JSONL to stderr.

    ``debug`` wins over ``level``; ``level`` is a name such as ``"INFO"``.
    """
    if debug:
        log_level = logging.DEBUG
    else:
        log_level = getattr(logging, str(level or 'WARNING').upper(), logging.WARNING)

    logger = logging.getLogger()
    logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates if run multiple times
    if logger.hasHandlers():
        logger.handlers.clear()

    handler = StreamHandler(stream or sys.stderr)
    handler.setFormatter(JsonFormatter(datefmt='%Y-%m-%dT%H:%M:%S%z'))
    logger.addHandler(handler)

    logging.getLogger("fibcalc").setLevel(log_level)
