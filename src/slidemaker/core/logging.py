# src/slidemaker/core/logging.py
from __future__ import annotations

import datetime as dt
import logging
import os
import sys
from typing import Optional, Tuple

from slidemaker.core.ctx import get_ctx

CTX_FIELDS: Tuple[str, ...] = ("request_id", "deck_id", "file_name")

DEFAULT_FORMAT = (
    "%(asctime)s %(levelname)s %(name)s "
    "req=%(request_id)s deck=%(deck_id)s file=%(file_name)s "
    "msg=%(message)s"
)

# libraries that log per page / per request at INFO
QUIET_LOGGERS = ("pdfminer", "httpx", "openai", "multipart")

_base_factory = logging.getLogRecordFactory()


def _record_factory(*args, **kwargs) -> logging.LogRecord:
    """Stamp the current request/deck/file onto every record, library records included."""
    rec = _base_factory(*args, **kwargs)
    ctx = get_ctx()
    for f in CTX_FIELDS:
        rec.__dict__.setdefault(f, ctx.get(f))
    return rec


class UTCFormatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt=None) -> str:
        ts = dt.datetime.fromtimestamp(record.created, tz=dt.timezone.utc)
        return ts.isoformat(timespec="seconds").replace("+00:00", "Z")

    def format(self, record: logging.LogRecord) -> str:
        # records built before the factory was installed
        for f in CTX_FIELDS:
            record.__dict__.setdefault(f, None)
        return super().format(record)


def configure_logging(level: Optional[str] = None) -> None:
    logging.setLogRecordFactory(_record_factory)
    root = logging.getLogger()
    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(UTCFormatter(os.getenv("LOG_FORMAT", DEFAULT_FORMAT)))
        root.addHandler(handler)
    root.setLevel(level or os.getenv("LOG_LEVEL", "INFO"))
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


configure_logging()


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
