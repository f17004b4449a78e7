"""Pure availability aggregation over a set of bookings."""

from __future__ import annotations

from collections import Counter
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Protocol

from app.core.enums import BookingStatusEnum, DayMarkerEnum
from app.modules.studios.schemas import StudioDefinition


class BookingLike(Protocol):
    studio: str
    session: str
    date: date
    status: BookingStatusEnum


@dataclass(slots=True)
class StudioAvailability:
    studio_id: str
    studio_name: str
    available: list[str] = field(default_factory=list)
    booked: list[str] = field(default_factory=list)


@dataclass(slots=True)
class DayAvailability:
    date: date | None
    studios: list[StudioAvailability]
    capacity: int
    occupied_count: int
    remaining_slots: int


@dataclass(slots=True)
class DayMarker:
    date: date
    occupied_count: int
    marker: DayMarkerEnum


def is_occupying(booking: BookingLike) -> bool:
    """Pending and approved bookings hold their slot."""
    return booking.status != BookingStatusEnum.REJECTED


def total_capacity(studios: Iterable[StudioDefinition]) -> int:
    return sum(studio.daily_slots for studio in studios)


def _booked_labels(studio: StudioDefinition, labels: Sequence[str]) -> list[str]:
    distinct = set(labels)
    ordered = [label for label in studio.session_labels if label in distinct]
    for label in labels:
        if label not in ordered:
            ordered.append(label)
    return ordered


def availability_for_day(
    studios: Sequence[StudioDefinition],
    day_bookings: Iterable[BookingLike],
    day: date | None = None,
) -> DayAvailability:
    """Free and taken labels per studio for bookings already filtered to one date.

    ``occupied_count`` counts bookings rather than distinct labels, so
    ``remaining_slots`` is an approximation clamped at zero.
    """
    occupying = [booking for booking in day_bookings if is_occupying(booking)]

    labels_by_studio: dict[str, list[str]] = {}
    for booking in occupying:
        labels_by_studio.setdefault(booking.studio, []).append(booking.session)

    per_studio: list[StudioAvailability] = []
    for studio in studios:
        booked = _booked_labels(studio, labels_by_studio.get(studio.id, []))
        available = [label for label in studio.session_labels if label not in booked]
        per_studio.append(
            StudioAvailability(
                studio_id=studio.id,
                studio_name=studio.name,
                available=available,
                booked=booked,
            ),
        )

    capacity = total_capacity(studios)
    occupied_count = len(occupying)
    return DayAvailability(
        date=day,
        studios=per_studio,
        capacity=capacity,
        occupied_count=occupied_count,
        remaining_slots=max(0, capacity - occupied_count),
    )


def month_markers(
    studios: Sequence[StudioDefinition],
    bookings: Iterable[BookingLike],
    year: int,
    month: int,
) -> list[DayMarker]:
    """Classify each day of the month that has occupied slots."""
    capacity = total_capacity(studios)
    occupied_per_day: Counter[date] = Counter(
        booking.date
        for booking in bookings
        if is_occupying(booking) and booking.date.year == year and booking.date.month == month
    )

    markers: list[DayMarker] = []
    for day in sorted(occupied_per_day):
        occupied = occupied_per_day[day]
        marker = DayMarkerEnum.FULL if occupied >= capacity else DayMarkerEnum.HAS_AVAILABILITY
        markers.append(DayMarker(date=day, occupied_count=occupied, marker=marker))
    return markers
