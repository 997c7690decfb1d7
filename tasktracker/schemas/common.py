"""Shared schema building blocks"""
from datetime import datetime
from typing import Annotated, Generic, Optional, TypeVar

from pydantic import BaseModel, Field, PlainSerializer, StringConstraints
from pydantic.alias_generators import to_camel

from tasktracker.utils.timestamps import as_utc

T = TypeVar("T")

# Trimmed before the length check, so whitespace-only input is rejected.
NonEmptyStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]
TrimmedStr = Annotated[str, StringConstraints(strip_whitespace=True)]
NameStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]

# Row ids must fit a signed 64-bit integer column.
MAX_ID = 2**63 - 1
RecordId = Annotated[int, Field(ge=1, le=MAX_ID)]


def _isoformat_utc(value: datetime) -> str:
    return as_utc(value).isoformat().replace("+00:00", "Z")


# Stored naive in UTC; the wire form always carries the zone.
UtcDateTime = Annotated[datetime, PlainSerializer(_isoformat_utc, return_type=str, when_used="json")]


class ApiModel(BaseModel):
    """Base for every wire schema: camelCase on the wire, snake_case in Python."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class Envelope(BaseModel, Generic[T]):
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


def envelope(data=None, message: Optional[str] = None) -> Envelope:
    return Envelope(success=True, data=data, message=message)
