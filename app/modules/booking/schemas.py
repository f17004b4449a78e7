"""Booking schemas."""

from __future__ import annotations

import re
from datetime import date as calendar_date, datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.core.enums import BookingStatusEnum, DayMarkerEnum

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
REQUIRED_REQUEST_FIELDS = (
    "team_leader_name",
    "team_leader_id",
    "email",
    "phone",
    "studio",
    "session",
    "date",
)


def validate_email_shape(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please enter a valid email address")
    return value


class BookingCreate(BaseModel):
    """Public booking request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    team_leader_name: str = Field(min_length=1, max_length=255)
    team_leader_id: str = Field(min_length=1, max_length=64)
    email: str = Field(min_length=1, max_length=255)
    phone: str = Field(min_length=1, max_length=64)
    studio: str = Field(min_length=1, max_length=64)
    session: str = Field(min_length=1, max_length=128)
    date: calendar_date
    notes: str | None = Field(default=None, max_length=2000)

    @model_validator(mode="before")
    @classmethod
    def check_required_fields(cls, data: object) -> object:
        """Report every blank required field before looking at formats."""
        if not isinstance(data, dict):
            return data
        missing = [
            name
            for name in REQUIRED_REQUEST_FIELDS
            if data.get(name) is None or (isinstance(data.get(name), str) and not data[name].strip())
        ]
        if missing:
            raise ValueError(f"Please fill in all required fields: {', '.join(missing)}")
        return data

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str) -> str:
        return validate_email_shape(value)


class ManualBookingCreate(BaseModel):
    """Admin manual entry; contact fields fall back to admin defaults."""

    model_config = ConfigDict(str_strip_whitespace=True)

    team_leader_name: str = Field(min_length=1, max_length=255)
    studio: str = Field(min_length=1, max_length=64)
    session: str = Field(min_length=1, max_length=128)
    date: calendar_date
    status: BookingStatusEnum = BookingStatusEnum.APPROVED
    team_leader_id: str | None = Field(default=None, max_length=64)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=64)
    notes: str | None = Field(default=None, max_length=2000)

    @field_validator("email")
    @classmethod
    def check_email(cls, value: str | None) -> str | None:
        if value is None:
            return None
        return validate_email_shape(value)


class BookingStatusUpdate(BaseModel):
    """Admin status transition request."""

    status: BookingStatusEnum


class BookingRead(BaseModel):
    """Booking response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    team_leader_name: str
    team_leader_id: str
    email: str
    phone: str
    studio: str
    session: str
    date: calendar_date
    notes: str | None
    status: BookingStatusEnum
    created_at: datetime


class PublicBookingRead(BaseModel):
    """Approved booking for the public calendar: who booked which slot, nothing else."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    team_leader_name: str
    studio: str
    session: str
    date: calendar_date


class BookingSubmissionRead(BaseModel):
    """Created booking with the outcome of the follow-up email."""

    booking: BookingRead
    notification_sent: bool
    warning: str | None = None


class BookingStatusChangeRead(BaseModel):
    """Updated booking with the outcome of the requester email."""

    booking: BookingRead
    notification_sent: bool
    warning: str | None = None


class ConflictCheckRead(BaseModel):
    """Conflict check response."""

    model_config = ConfigDict(from_attributes=True)

    has_conflict: bool
    message: str | None = None


class StudioAvailabilityRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    studio_id: str
    studio_name: str
    available: list[str]
    booked: list[str]


class DayAvailabilityRead(BaseModel):
    """Per-studio availability and slot counts for one date."""

    model_config = ConfigDict(from_attributes=True)

    date: calendar_date | None
    studios: list[StudioAvailabilityRead]
    capacity: int
    occupied_count: int
    remaining_slots: int


class DayMarkerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    date: calendar_date
    occupied_count: int
    marker: DayMarkerEnum


class MonthCalendarRead(BaseModel):
    """Highlighted days of a month."""

    year: int
    month: int
    capacity: int
    days: list[DayMarkerRead]
