import logging

from logging_config import ContextualFormatter


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("svc", logging.INFO, __file__, 1, "Reading written", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_formatter_appends_known_context_in_fixed_order() -> None:
    formatter = ContextualFormatter(fmt="%(message)s")

    line = formatter.format(_record(record_count=3, mode="write", unrelated="x"))

    assert line == "Reading written | mode=write record_count=3"


def test_formatter_skips_none_values() -> None:
    formatter = ContextualFormatter(fmt="%(message)s", context_keys=["sheet"])

    assert formatter.format(_record(sheet=None, mode="write")) == "Reading written"
