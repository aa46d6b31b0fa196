"""Structured JSON logging for the API process."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

from pythonjsonlogger import jsonlogger


class QuoteJsonFormatter(jsonlogger.JsonFormatter):
    """Adds timestamp, level and service name to every record."""

    def __init__(self, *args: Any, service: str = "novated-lease-quote", **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.service = service

    def add_fields(self, log_record: dict[str, Any], record: logging.LogRecord, message_dict: dict[str, Any]) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record["timestamp"] = datetime.now(timezone.utc).isoformat()
        log_record["level"] = record.levelname
        log_record["service"] = self.service


def setup_logging(level: str = "INFO", service: str = "novated-lease-quote") -> None:
    """Send every logger's output to stdout as one JSON object per line."""
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(QuoteJsonFormatter("%(timestamp)s %(level)s %(name)s %(message)s", service=service))
    root.addHandler(handler)
