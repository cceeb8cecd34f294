from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_core import PydanticCustomError


class School(str, Enum):
    DORNSIFE = "dornsife"
    VITERBI = "viterbi"
    ANNENBERG = "annenberg"
    MARSHALL = "marshall"


class EventLocation(BaseModel):
    room: str | None = None
    address: str | None = None
    latitude: float | None = None
    longitude: float | None = None


def _parse_iso8601(value: Any, label: str) -> datetime:
    message = f"Invalid '{label}' date format"
    if not isinstance(value, str) or not value.strip():
        raise PydanticCustomError("date_format", message)
    try:
        parsed = datetime.fromisoformat(value.strip())
    except ValueError:
        raise PydanticCustomError("date_format", message) from None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    # pymongo hands datetimes back naive in UTC; store them the same way.
    return parsed.astimezone(timezone.utc).replace(tzinfo=None)


class EventDateInput(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: datetime | None = Field(default=None, alias="from", validate_default=True)
    to: datetime | None = Field(default=None, validate_default=True)
    multiDay: bool = False

    @field_validator("from_", mode="before")
    @classmethod
    def _parse_from(cls, value: Any) -> datetime:
        return _parse_iso8601(value, "from")

    @field_validator("to", mode="before")
    @classmethod
    def _parse_to(cls, value: Any) -> datetime:
        return _parse_iso8601(value, "to")


class EventCreate(BaseModel):
    """Admin-submitted event. Only these fields are ever persisted."""

    title: str = Field(default="", validate_default=True)
    description: str = Field(default="", validate_default=True)
    location: EventLocation | None = None
    date: EventDateInput = Field(default_factory=dict, validate_default=True)
    thumbnailUrl: str | None = None
    school: School | None = None
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    rsvpLink: str | None = None

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("required", "Title is required")
        return value

    @field_validator("description")
    @classmethod
    def _description_required(cls, value: str) -> str:
        if not value.strip():
            raise PydanticCustomError("required", "Description is required")
        return value

    @field_validator("tags")
    @classmethod
    def _unique_tags(cls, value: list[str]) -> list[str]:
        return list(dict.fromkeys(value))

    def to_document(self, now: datetime) -> dict[str, Any]:
        doc = self.model_dump(mode="python", by_alias=True, exclude={"school"})
        doc["school"] = self.school.value if self.school else None
        doc["createdAt"] = now
        return doc


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class EventDateOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_: datetime = Field(alias="from")
    to: datetime
    multiDay: bool = False

    @field_validator("from_", "to")
    @classmethod
    def _utc(cls, value: datetime) -> datetime:
        return _as_utc(value)


class EventOut(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    description: str
    location: EventLocation | None = None
    date: EventDateOut
    thumbnailUrl: str | None = None
    school: str | None = None
    tags: list[str] = Field(default_factory=list)
    featured: bool = False
    rsvpLink: str | None = None
    createdAt: datetime | None = None

    @field_validator("createdAt")
    @classmethod
    def _utc(cls, value: datetime | None) -> datetime | None:
        return _as_utc(value) if value else value

    @classmethod
    def from_document(cls, doc: dict[str, Any]) -> "EventOut":
        data = {key: value for key, value in doc.items() if key != "_id"}
        return cls.model_validate({**data, "id": str(doc["_id"])})
