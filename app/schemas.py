"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field

from models.records import Reading


class ReadingSchema(BaseModel):
    """One row of the reading log as exposed over HTTP."""

    date: str = Field("", description="Local date of the write, dd/MM/yyyy.")
    time: str = Field("", description="Local time of the write, h:mma.")
    id: str = ""
    image: str = ""
    person: str = ""
    authorization: str = ""

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingSchema":
        return cls.model_validate(reading.to_dict())


class LogListing(BaseModel):
    """Full contents of a sheet: the latest slot and every logged reading."""

    sheet: str
    count: int = Field(..., ge=0)
    latest: ReadingSchema
    records: List[ReadingSchema] = Field(default_factory=list)
