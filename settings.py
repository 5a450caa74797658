from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_SPREADSHEET_NAME_ENV = "EVENT_LOGGER_SPREADSHEET_NAME"
_SHEET_NAME_ENV = "EVENT_LOGGER_SHEET_NAME"
_PERSISTENCE_PATH_ENV = "EVENT_LOGGER_PERSISTENCE_PATH"
_AUTO_CREATE_ENV = "EVENT_LOGGER_SHEET_AUTO_CREATE"
_UTC_OFFSET_ENV = "EVENT_LOGGER_UTC_OFFSET_HOURS"
_LOG_LEVEL_ENV = "LOG_LEVEL"

_TRUTHY = {"1", "true", "yes", "on"}
_FALSY = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class Settings:
    spreadsheet_name: str
    sheet_name: str
    persistence_path: Optional[str]
    sheet_auto_create: bool
    utc_offset_hours: int
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_bool_env(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip().lower()
    if candidate in _TRUTHY:
        return True
    if candidate in _FALSY:
        return False
    return default


def _read_utc_offset(default: int) -> int:
    value = os.getenv(_UTC_OFFSET_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if -12 <= parsed <= 14 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        spreadsheet_name=_read_str_env(_SPREADSHEET_NAME_ENV, "ESP32_Google_Spreadsheet"),
        sheet_name=_read_str_env(_SHEET_NAME_ENV, "ESP32_Google_Sheets_Sheet"),
        persistence_path=_read_optional_env(_PERSISTENCE_PATH_ENV, "./tmp/event_log.json"),
        sheet_auto_create=_read_bool_env(_AUTO_CREATE_ENV, True),
        utc_offset_hours=_read_utc_offset(-8),
        log_level=_read_log_level("INFO"),
    )
