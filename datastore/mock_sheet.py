from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from functools import lru_cache
from pathlib import Path
from threading import RLock
from typing import Dict, Iterator, List, Optional

from models.records import Reading
from settings import get_settings

logger = logging.getLogger(__name__)


class SheetNotFoundError(KeyError):
    """Raised when the configured sheet does not exist in the spreadsheet."""


class MockSheet:
    """An append-only reading log plus a single overwritable "latest" slot."""

    def __init__(self, name: str, spreadsheet: "MockSpreadsheet") -> None:
        self.name = name
        self._spreadsheet = spreadsheet
        self._log: List[Reading] = []
        self._latest = Reading()

    def append_record(self, reading: Reading) -> None:
        with self.batch():
            self._log.append(reading)

    def overwrite_latest(self, reading: Reading) -> None:
        with self.batch():
            self._latest = reading

    def read_latest(self) -> Reading:
        with self._spreadsheet._lock:
            return self._latest

    def records(self) -> list[Reading]:
        """Return the log in insertion order."""

        with self._spreadsheet._lock:
            return list(self._log)

    def __len__(self) -> int:
        with self._spreadsheet._lock:
            return len(self._log)

    @contextmanager
    def batch(self) -> Iterator["MockSheet"]:
        """Group mutations so they are applied, and persisted, all together or not at all.

        A failed save rolls the sheet back too.
        """

        with self._spreadsheet._lock:
            log_length = len(self._log)
            latest = self._latest
            try:
                self._spreadsheet._deferred += 1
                try:
                    yield self
                finally:
                    self._spreadsheet._deferred -= 1
                self._spreadsheet._persist()
            except BaseException:
                del self._log[log_length:]
                self._latest = latest
                raise

    def _dump(self) -> dict:
        return {
            "log": [reading.to_dict() for reading in self._log],
            "latest": self._latest.to_dict(),
        }

    def _load(self, payload: dict) -> None:
        self._log = [Reading.from_dict(item) for item in payload.get("log") or []]
        self._latest = Reading.from_dict(payload.get("latest") or {})


class MockSpreadsheet:

    def __init__(self, name: str, persistence_path: Optional[Path] = None) -> None:
        self.name = name
        self._sheets: Dict[str, MockSheet] = {}
        self.persistence_path = persistence_path
        self._lock = RLock()
        self._deferred = 0
        if persistence_path:
            persistence_path.parent.mkdir(parents=True, exist_ok=True)
            self._load_from_disk()

    def get_sheet(self, name: str) -> Optional[MockSheet]:
        with self._lock:
            return self._sheets.get(name)

    def require_sheet(self, name: str) -> MockSheet:
        sheet = self.get_sheet(name)
        if sheet is None:
            raise SheetNotFoundError(
                f"Sheet {name!r} not found in spreadsheet {self.name!r}."
            )
        return sheet

    def add_sheet(self, name: str) -> MockSheet:
        with self._lock:
            sheet = self._sheets.get(name)
            if sheet is None:
                sheet = MockSheet(name, self)
                self._sheets[name] = sheet
                self._persist()
            return sheet

    def sheet_names(self) -> list[str]:
        with self._lock:
            return sorted(self._sheets)

    def _persist(self) -> None:
        if not self.persistence_path or self._deferred:
            return
        payload = {name: sheet._dump() for name, sheet in self._sheets.items()}
        self.persistence_path.write_text(json.dumps(payload, indent=2, sort_keys=True))

    def _load_from_disk(self) -> None:
        if not self.persistence_path or not self.persistence_path.exists():
            return

        try:
            raw = self.persistence_path.read_text() or "{}"
            data = json.loads(raw)
        except (OSError, json.JSONDecodeError):
            logger.warning("Discarding unreadable spreadsheet file %s", self.persistence_path)
            data = {}

        for name, payload in data.items():
            sheet = MockSheet(name, self)
            sheet._load(payload)
            self._sheets[name] = sheet


@lru_cache
def build_default_spreadsheet(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> MockSpreadsheet:
    settings = get_settings()
    spreadsheet_name = settings.spreadsheet_name if name is None else name
    spreadsheet_path = settings.persistence_path if path is None else path
    persistence = Path(spreadsheet_path) if spreadsheet_path else None
    spreadsheet = MockSpreadsheet(name=spreadsheet_name, persistence_path=persistence)
    if settings.sheet_auto_create:
        spreadsheet.add_sheet(settings.sheet_name)
    return spreadsheet
