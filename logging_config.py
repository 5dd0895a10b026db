from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Iterable, Sequence

from settings import get_settings

LOG_FORMAT = "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%dT%H:%M:%S"

_CONTEXT_KEYS = (
    "endpoint",
    "station_id",
    "state",
    "status_line",
    "marker",
    "record_index",
    "record_count",
    "error_kind",
    "reason",
    "fetch_ms",
)

# Request URLs carry the API key as a query parameter; keep the HTTP stack
# below INFO so it never logs them.
QUIET_LOGGERS = ("httpx", "httpcore")

_configured = False


class ContextualFormatter(logging.Formatter):
    """Appends ``key=value`` pairs for the fetch context attached via ``extra``."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._context_keys: Sequence[str] = tuple(extra_keys or _CONTEXT_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        pairs = [
            f"{key}={_render(value)}"
            for key in self._context_keys
            if (value := getattr(record, key, None)) is not None
        ]
        if not pairs:
            return message
        return f"{message} | {' '.join(pairs)}"


def _render(value: Any) -> str:
    text = str(value)
    # Status lines and failure reasons contain spaces.
    if not text or any(char.isspace() for char in text):
        return repr(text)
    return text


def build_logging_config(level: str | int) -> dict[str, Any]:
    """Return the ``dictConfig`` mapping for the CLI's stderr logging."""
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "contextual": {
                "()": "logging_config.ContextualFormatter",
                "fmt": LOG_FORMAT,
                "datefmt": LOG_DATEFMT,
                "style": "%",
                "extra_keys": list(_CONTEXT_KEYS),
            }
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "level": level,
                "formatter": "contextual",
            }
        },
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(level: str | int | None = None) -> None:
    """Install the contextual stderr handler once per process."""
    global _configured
    if _configured:
        return

    dictConfig(build_logging_config(level if level is not None else get_settings().log_level))
    _configured = True
