"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields as dataclass_fields
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Dict, Mapping

DATE_FORMAT = "%d/%m/%Y"
_QUOTES = "\"'"


class ReadingField(str, Enum):
    """Payload fields accepted from the device, in response-message order."""

    id = "id"
    image = "image"
    person = "person"
    authorization = "authorization"

    @property
    def column(self) -> str:
        return _COLUMNS[self]

    @property
    def label(self) -> str:
        return _LABELS[self]


_COLUMNS = {
    ReadingField.id: "C",
    ReadingField.image: "D",
    ReadingField.person: "E",
    ReadingField.authorization: "F",
}

_LABELS = {
    ReadingField.id: "ID",
    ReadingField.image: "Image",
    ReadingField.person: "Person",
    ReadingField.authorization: "Authorization",
}


@dataclass(frozen=True, slots=True)
class Reading:
    """One scanner event: a local timestamp plus the four payload fields."""

    date: str = ""
    time: str = ""
    id: str = ""
    image: str = ""
    person: str = ""
    authorization: str = ""

    @classmethod
    def stamped(cls, moment: datetime, values: Mapping[ReadingField, str]) -> "Reading":
        """Build a reading for ``moment``; fields missing from ``values`` stay blank."""
        return cls(
            date=format_date(moment),
            time=format_time(moment),
            **{field.value: value for field, value in values.items()},
        )

    def payload(self) -> list[str]:
        return [getattr(self, field.value) for field in ReadingField]

    def to_dict(self) -> Dict[str, str]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> "Reading":
        return cls(**{f.name: str(data.get(f.name) or "") for f in dataclass_fields(cls)})


def fixed_offset(hours: int) -> timezone:
    return timezone(timedelta(hours=hours))


def format_date(moment: datetime) -> str:
    return moment.strftime(DATE_FORMAT)


def format_time(moment: datetime) -> str:
    """Render ``h:mma``: unpadded 12-hour clock with an uppercase marker, e.g. ``3:07PM``."""
    hour = moment.hour % 12 or 12
    marker = "AM" if moment.hour < 12 else "PM"
    return f"{hour}:{moment.minute:02d}{marker}"


def strip_quotes(value: str) -> str:
    """Drop one leading and one trailing quote character, each independently."""
    if value and value[0] in _QUOTES:
        value = value[1:]
    if value and value[-1] in _QUOTES:
        value = value[:-1]
    return value
