"""Logging setup for Note Assistant.

Records are written to stdout, as JSON by default. ``NASST_LOG_LEVEL`` and
``NASST_LOG_FORMAT`` (``json`` or ``text``) override the defaults. Any
``extra={"ctx_...": ...}`` field is copied into the JSON payload.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import orjson

TEXT_FORMAT = "%(asctime)s %(levelname)s %(threadName)s %(name)s: %(message)s"


class JsonFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": self.formatTime(record, "%Y-%m-%dT%H:%M:%S"),
            "level": record.levelname,
            "logger": record.name,
            "thread": record.threadName,
            "msg": record.getMessage(),
        }
        payload.update((key, value) for key, value in vars(record).items() if key.startswith("ctx_"))
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return orjson.dumps(payload, default=str).decode("utf-8")


def configure_logging(level: str | int | None = None, use_json: bool | None = None) -> None:
    """Install a single stdout handler on the root logger."""
    if level is None:
        level = os.environ.get("NASST_LOG_LEVEL", "INFO").upper()
    if use_json is None:
        use_json = os.environ.get("NASST_LOG_FORMAT", "json").lower() != "text"
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(JsonFormatter() if use_json else logging.Formatter(TEXT_FORMAT))
    root = logging.getLogger()
    root.setLevel(level)
    root.handlers = [handler]
    logging.captureWarnings(True)


def get_logger(name: str = "note_assistant") -> logging.Logger:
    if not logging.getLogger().handlers:
        configure_logging()
    return logging.getLogger(name)


__all__ = ["JsonFormatter", "configure_logging", "get_logger"]
