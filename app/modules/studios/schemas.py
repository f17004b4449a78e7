"""Studio catalog schemas."""

from __future__ import annotations

import re
from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator

_FULL_DAY_PATTERN = re.compile(r"full[\s-]?day", re.IGNORECASE)


class SessionDefinition(BaseModel):
    """One bookable session window of a studio."""

    model_config = ConfigDict(frozen=True)

    label: str = Field(min_length=1, max_length=128)
    exclusive_full_day: bool = False


class StudioDefinition(BaseModel):
    """Static studio entry with ordered session definitions."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1, max_length=255)
    sessions: tuple[SessionDefinition, ...] = Field(min_length=1)
    capacity: int | None = Field(default=None, ge=1)
    features: tuple[str, ...] = ()

    @field_validator("sessions", mode="before")
    @classmethod
    def parse_sessions(cls, value: object) -> object:
        """Accept plain labels; infer the full-day flag from their text once."""
        if not isinstance(value, list | tuple):
            return value

        parsed: list[object] = []
        for item in value:
            if isinstance(item, str):
                parsed.append(
                    {
                        "label": item,
                        "exclusive_full_day": bool(_FULL_DAY_PATTERN.search(item)),
                    },
                )
            else:
                parsed.append(item)
        return parsed

    @field_validator("sessions")
    @classmethod
    def validate_unique_labels(
        cls,
        value: tuple[SessionDefinition, ...],
    ) -> tuple[SessionDefinition, ...]:
        labels = [session.label for session in value]
        if len(labels) != len(set(labels)):
            raise ValueError("Session labels must be unique within a studio")
        return value

    @property
    def session_labels(self) -> list[str]:
        return [session.label for session in self.sessions]

    @property
    def daily_slots(self) -> int:
        return len(self.sessions)

    def has_session(self, label: str) -> bool:
        return any(session.label == label for session in self.sessions)

    def is_exclusive_full_day(self, label: str) -> bool:
        """Labels unknown to the studio are never exclusive."""
        for session in self.sessions:
            if session.label == label:
                return session.exclusive_full_day
        return False


class SessionRead(BaseModel):
    """Session response schema."""

    model_config = ConfigDict(from_attributes=True)

    label: str
    exclusive_full_day: bool


class StudioRead(BaseModel):
    """Studio response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    sessions: list[SessionRead]
    capacity: int | None
    features: list[str]


class StudioCatalogRead(BaseModel):
    """Whole catalog with booking window hints."""

    studios: list[StudioRead]
    total_daily_capacity: int
    min_advance_days: int
    earliest_bookable_date: date
