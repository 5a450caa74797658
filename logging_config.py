from __future__ import annotations

import logging
import time
from logging.config import dictConfig
from typing import Iterable, Sequence

from settings import get_settings

_CONTEXT_KEYS = (
    "mode",
    "sheet",
    "param",
    "outcome",
    "record_count",
    "unsupported_count",
)

_configured = False


class ContextualFormatter(logging.Formatter):
    """Formatter that appends whitelisted ``extra`` attributes as ``key=value`` pairs."""

    converter = time.gmtime

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        context_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self._context_keys: Sequence[str] = tuple(context_keys or _CONTEXT_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = [
            f"{key}={getattr(record, key)}"
            for key in self._context_keys
            if getattr(record, key, None) is not None
        ]
        if not context:
            return message
        return f"{message} | {' '.join(context)}"


def configure_logging(level: str | int | None = None, force: bool = False) -> None:
    """Install the contextual stream handler on the root logger once per process."""
    global _configured
    if _configured and not force:
        return

    log_level = level if level is not None else get_settings().log_level

    dictConfig(
        {
            "version": 1,
            "disable_existing_loggers": False,
            "formatters": {
                "contextual": {
                    "()": "logging_config.ContextualFormatter",
                    "fmt": "%(asctime)sZ | %(levelname)s | %(name)s | %(message)s",
                    "datefmt": "%Y-%m-%dT%H:%M:%S",
                    "context_keys": list(_CONTEXT_KEYS),
                }
            },
            "handlers": {
                "default": {
                    "class": "logging.StreamHandler",
                    "level": log_level,
                    "formatter": "contextual",
                }
            },
            "loggers": {
                # device polling makes access logs noisy
                "uvicorn.access": {"level": "WARNING"},
            },
            "root": {"handlers": ["default"], "level": log_level},
        }
    )

    _configured = True
