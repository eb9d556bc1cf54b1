"""Logging setup.

All loggers live under the `mkt_clis` namespace and write single-line JSON
to stderr, so even debug output keeps stderr machine-readable. The default
level (WARNING) keeps stderr reserved for the fatal error object.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

ROOT_LOGGER = "mkt_clis"

_RESERVED = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None)).keys()) | {"message", "asctime"}


class JsonFormatter(logging.Formatter):
    """Timestamp, level, logger, message and any `extra=` fields as JSON."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, object] = {
            "ts": datetime.now(timezone.utc).isoformat(timespec="milliseconds"),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        for key, value in record.__dict__.items():
            if key.startswith("_") or key in _RESERVED or key in payload:
                continue
            payload[key] = value
        if record.exc_info:
            payload["exc"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


def _parse_level(value: str | int | None, default: int = logging.WARNING) -> int:
    if isinstance(value, int):
        return value
    if not value:
        return default
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else default


def configure_logging(level: str | int | None = None, *, json_mode: bool = True) -> logging.Logger:
    """(Re)configure the shared logger. Safe to call more than once."""

    logger = logging.getLogger(ROOT_LOGGER)
    resolved = _parse_level(level)
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    if json_mode:
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s %(message)s"))
    for old in list(logger.handlers):
        logger.removeHandler(old)
    logger.addHandler(handler)
    logger.setLevel(resolved)
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
