"""Unit tests for the mock spreadsheet datastore implementation."""

from __future__ import annotations

import json
import threading

import pytest

from datastore.mock_sheet import MockSpreadsheet, SheetNotFoundError
from models.records import Reading


def _reading(reading_id: str, person: str = "Bob") -> Reading:
    return Reading(date="06/11/2024", time="3:07PM", id=reading_id, person=person)


def test_new_sheet_has_blank_latest_and_empty_log() -> None:
    sheet = MockSpreadsheet(name="book").add_sheet("readings")

    assert sheet.read_latest().payload() == ["", "", "", ""]
    assert sheet.records() == []
    assert len(sheet) == 0


def test_add_sheet_is_idempotent() -> None:
    spreadsheet = MockSpreadsheet(name="book")

    first = spreadsheet.add_sheet("readings")
    second = spreadsheet.add_sheet("readings")

    assert first is second
    assert spreadsheet.sheet_names() == ["readings"]


def test_require_sheet_raises_for_unknown_name() -> None:
    spreadsheet = MockSpreadsheet(name="book")

    assert spreadsheet.get_sheet("missing") is None
    with pytest.raises(SheetNotFoundError) as excinfo:
        spreadsheet.require_sheet("missing")
    assert "missing" in str(excinfo.value)


def test_append_keeps_call_order_and_latest_is_replaced() -> None:
    sheet = MockSpreadsheet(name="book").add_sheet("readings")

    sheet.append_record(_reading("1"))
    sheet.overwrite_latest(_reading("1"))
    sheet.append_record(_reading("2", person=""))
    sheet.overwrite_latest(_reading("2", person=""))

    assert [r.id for r in sheet.records()] == ["1", "2"]
    assert sheet.read_latest() == _reading("2", person="")


def test_records_returns_a_copy() -> None:
    sheet = MockSpreadsheet(name="book").add_sheet("readings")
    sheet.append_record(_reading("1"))

    snapshot = sheet.records()
    snapshot.clear()

    assert len(sheet) == 1


def test_batch_rolls_back_when_block_fails(tmp_path) -> None:
    path = tmp_path / "sheet.json"
    spreadsheet = MockSpreadsheet(name="book", persistence_path=path)
    sheet = spreadsheet.add_sheet("readings")
    sheet.append_record(_reading("1"))
    sheet.overwrite_latest(_reading("1"))
    on_disk = path.read_text()

    with pytest.raises(RuntimeError):
        with sheet.batch():
            sheet.append_record(_reading("2"))
            sheet.overwrite_latest(_reading("2"))
            raise RuntimeError("boom")

    assert [r.id for r in sheet.records()] == ["1"]
    assert sheet.read_latest().id == "1"
    assert path.read_text() == on_disk


def test_batch_persists_once_on_success(tmp_path) -> None:
    path = tmp_path / "sheet.json"
    sheet = MockSpreadsheet(name="book", persistence_path=path).add_sheet("readings")

    with sheet.batch():
        sheet.append_record(_reading("1"))
        assert json.loads(path.read_text())["readings"]["log"] == []
        sheet.overwrite_latest(_reading("1"))

    payload = json.loads(path.read_text())
    assert [row["id"] for row in payload["readings"]["log"]] == ["1"]
    assert payload["readings"]["latest"]["id"] == "1"


def test_persists_to_disk_and_reloads(tmp_path) -> None:
    path = tmp_path / "nested" / "sheet.json"
    sheet = MockSpreadsheet(name="book", persistence_path=path).add_sheet("readings")
    sheet.append_record(_reading("1"))
    sheet.append_record(_reading("2"))
    sheet.overwrite_latest(_reading("2"))

    reloaded = MockSpreadsheet(name="book", persistence_path=path).require_sheet("readings")

    assert reloaded.records() == [_reading("1"), _reading("2")]
    assert reloaded.read_latest() == _reading("2")


def test_corrupt_file_loads_as_empty(tmp_path) -> None:
    path = tmp_path / "sheet.json"
    path.write_text("{not json")

    spreadsheet = MockSpreadsheet(name="book", persistence_path=path)

    assert spreadsheet.sheet_names() == []


def test_concurrent_batches_keep_latest_paired_with_last_log_entry() -> None:
    sheet = MockSpreadsheet(name="book").add_sheet("readings")

    def writer(start: int) -> None:
        for offset in range(50):
            reading = _reading(str(start + offset))
            with sheet.batch():
                sheet.append_record(reading)
                sheet.overwrite_latest(reading)

    threads = [threading.Thread(target=writer, args=(n * 1000,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    records = sheet.records()
    assert len(records) == 200
    assert len({r.id for r in records}) == 200
    assert sheet.read_latest() == records[-1]


def test_failed_save_rolls_back_batch(tmp_path) -> None:
    spreadsheet = MockSpreadsheet(name="book")
    sheet = spreadsheet.add_sheet("readings")
    sheet.append_record(_reading("1"))
    sheet.overwrite_latest(_reading("1"))
    spreadsheet.persistence_path = tmp_path  # a directory, so write_text raises

    with pytest.raises(OSError):
        with sheet.batch():
            sheet.append_record(_reading("2"))
            sheet.overwrite_latest(_reading("2"))

    assert [r.id for r in sheet.records()] == ["1"]
    assert sheet.read_latest().id == "1"


def test_failed_save_rolls_back_single_append(tmp_path) -> None:
    spreadsheet = MockSpreadsheet(name="book")
    sheet = spreadsheet.add_sheet("readings")
    spreadsheet.persistence_path = tmp_path

    with pytest.raises(OSError):
        sheet.append_record(_reading("1"))

    assert sheet.records() == []
