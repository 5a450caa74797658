"""Request handling for scanner readings: parameter extraction, mode dispatch, replies."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from functools import lru_cache
from typing import Callable, Dict, Mapping, Optional

from datastore.mock_sheet import MockSheet, MockSpreadsheet, SheetNotFoundError, build_default_spreadsheet
from models.records import Reading, ReadingField, fixed_offset, strip_quotes
from settings import get_settings

logger = logging.getLogger(__name__)

MODE_PARAM = "sts"
WRITE_MODE = "write"
READ_MODE = "read"

NO_PARAMETERS = "No Parameters"
SHEET_NOT_FOUND = "Error: Sheet not found"
WRITE_FAILED = "Error: Write failed"
WRITE_OK = "Ok"
UNSUPPORTED_PARAMETER = ", unsupported parameter"
NO_OPERATION = "No valid operation specified (write or read)."

Clock = Callable[[], datetime]


class Outcome(str, Enum):
    """How a request was resolved; every outcome is still answered with HTTP 200."""

    written = "written"
    read = "read"
    no_parameters = "no_parameters"
    sheet_not_found = "sheet_not_found"
    write_failed = "write_failed"
    no_operation = "no_operation"


@dataclass(frozen=True)
class HandleResult:
    outcome: Outcome
    body: str


@dataclass
class ParsedRequest:
    """Parameters sorted into the mode, known payload fields and unknown keys."""

    mode: str = ""
    values: Dict[ReadingField, str] = field(default_factory=dict)
    unsupported_count: int = 0

    @classmethod
    def from_parameters(cls, parameters: Mapping[str, str]) -> "ParsedRequest":
        parsed = cls()
        for key, raw in parameters.items():
            value = strip_quotes(raw)
            if key == MODE_PARAM:
                parsed.mode = value
                continue
            try:
                reading_field = ReadingField(key)
            except ValueError:
                logger.debug("Ignoring unsupported parameter", extra={"param": key})
                parsed.unsupported_count += 1
                continue
            parsed.values[reading_field] = value
        return parsed

    def write_message(self) -> str:
        parts = [WRITE_OK]
        for reading_field in ReadingField:
            if reading_field in self.values:
                parts.append(f", {reading_field.label} Written on column {reading_field.column}")
        parts.extend([UNSUPPORTED_PARAMETER] * self.unsupported_count)
        return "".join(parts)


class EventLoggerService:
    """Appends scanner readings to a sheet and answers read-backs of the latest one."""

    def __init__(
        self,
        spreadsheet: MockSpreadsheet,
        sheet_name: str,
        clock: Optional[Clock] = None,
        utc_offset_hours: int = -8,
    ) -> None:
        self.spreadsheet = spreadsheet
        self.sheet_name = sheet_name
        self.tz = fixed_offset(utc_offset_hours)
        self._clock = clock or (lambda: datetime.now(self.tz))

    def handle(self, parameters: Mapping[str, str]) -> HandleResult:
        logger.debug("Received parameters", extra={"param": ",".join(parameters) or None})
        if not parameters:
            logger.info("Request carried no parameters", extra={"outcome": Outcome.no_parameters.value})
            return HandleResult(Outcome.no_parameters, NO_PARAMETERS)

        try:
            sheet = self.spreadsheet.require_sheet(self.sheet_name)
        except SheetNotFoundError:
            logger.error(
                "Target sheet is missing",
                extra={"sheet": self.sheet_name, "outcome": Outcome.sheet_not_found.value},
            )
            return HandleResult(Outcome.sheet_not_found, SHEET_NOT_FOUND)

        request = ParsedRequest.from_parameters(parameters)

        if request.mode == WRITE_MODE:
            return self._write(sheet, request)
        if request.mode == READ_MODE:
            return self._read(sheet)

        logger.info(
            "No valid operation specified",
            extra={"mode": request.mode or None, "outcome": Outcome.no_operation.value},
        )
        return HandleResult(Outcome.no_operation, NO_OPERATION)

    def _write(self, sheet: MockSheet, request: ParsedRequest) -> HandleResult:
        moment = self._clock().astimezone(self.tz)
        reading = Reading.stamped(moment, request.values)

        try:
            with sheet.batch():
                sheet.append_record(reading)
                sheet.overwrite_latest(reading)
                record_count = len(sheet)
        except OSError:
            logger.exception(
                "Saving the reading failed",
                extra={"mode": WRITE_MODE, "sheet": sheet.name, "outcome": Outcome.write_failed.value},
            )
            return HandleResult(Outcome.write_failed, WRITE_FAILED)

        logger.info(
            "Reading written",
            extra={
                "mode": WRITE_MODE,
                "sheet": sheet.name,
                "outcome": Outcome.written.value,
                "record_count": record_count,
                "unsupported_count": request.unsupported_count or None,
            },
        )
        return HandleResult(Outcome.written, request.write_message())

    def _read(self, sheet: MockSheet) -> HandleResult:
        payload = sheet.read_latest().payload()
        logger.info(
            "Latest reading served",
            extra={"mode": READ_MODE, "sheet": sheet.name, "outcome": Outcome.read.value},
        )
        return HandleResult(Outcome.read, json.dumps(payload, separators=(",", ":"), ensure_ascii=False))


@lru_cache
def build_default_service() -> EventLoggerService:
    """Factory that wires the service to the default spreadsheet."""
    settings = get_settings()
    return EventLoggerService(
        spreadsheet=build_default_spreadsheet(),
        sheet_name=settings.sheet_name,
        utc_offset_hours=settings.utc_offset_hours,
    )
