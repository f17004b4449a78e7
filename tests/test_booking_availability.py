from __future__ import annotations

from datetime import date
from types import SimpleNamespace

from app.core.config import DEFAULT_STUDIOS
from app.core.enums import BookingStatusEnum, DayMarkerEnum
from app.modules.booking.availability import availability_for_day, month_markers, total_capacity
from app.modules.studios.schemas import StudioDefinition

DAY = date(2025, 3, 1)
MORNING = "10:00 AM - 1:00 PM"
AFTERNOON = "2:00 PM - 5:00 PM"


def default_studios() -> list[StudioDefinition]:
    return [StudioDefinition.model_validate(item) for item in DEFAULT_STUDIOS]


def make_booking(
    studio: str,
    session: str,
    status: BookingStatusEnum = BookingStatusEnum.PENDING,
    day: date = DAY,
) -> SimpleNamespace:
    return SimpleNamespace(studio=studio, session=session, date=day, status=status)


def test_default_catalog_has_seven_daily_slots() -> None:
    assert total_capacity(default_studios()) == 7


def test_empty_day_is_fully_available() -> None:
    result = availability_for_day(default_studios(), [], DAY)

    assert result.remaining_slots == 7
    assert result.occupied_count == 0
    assert all(item.booked == [] for item in result.studios)
    assert result.studios[1].available == [MORNING, AFTERNOON]


def test_pending_and_approved_occupy_but_rejected_does_not() -> None:
    bookings = [
        make_booking("studio-1", MORNING, BookingStatusEnum.APPROVED),
        make_booking("studio-2", AFTERNOON, BookingStatusEnum.PENDING),
        make_booking("studio-3", MORNING, BookingStatusEnum.REJECTED),
    ]

    result = availability_for_day(default_studios(), bookings, DAY)
    by_id = {item.studio_id: item for item in result.studios}

    assert result.occupied_count == 2
    assert result.remaining_slots == 5
    assert by_id["studio-1"].booked == [MORNING]
    assert by_id["studio-1"].available == [AFTERNOON]
    assert by_id["studio-3"].booked == []
    assert by_id["studio-3"].available == [MORNING, AFTERNOON]


def test_booked_labels_follow_catalog_order_then_unknown_labels() -> None:
    bookings = [
        make_booking("studio-1", "Retired slot"),
        make_booking("studio-1", AFTERNOON),
        make_booking("studio-1", MORNING),
    ]

    result = availability_for_day(default_studios(), bookings, DAY)
    studio_1 = next(item for item in result.studios if item.studio_id == "studio-1")

    assert studio_1.booked == [MORNING, AFTERNOON, "Retired slot"]
    assert studio_1.available == []


def test_remaining_slots_never_negative() -> None:
    bookings = [make_booking("studio-1", MORNING) for _ in range(9)]

    result = availability_for_day(default_studios(), bookings, DAY)

    assert result.occupied_count == 9
    assert result.remaining_slots == 0


def test_month_markers_classify_full_and_partial_days() -> None:
    studios = default_studios()
    full_day_bookings = [
        make_booking(studio.id, label, day=date(2025, 3, 10))
        for studio in studios
        for label in studio.session_labels
    ]
    bookings = [
        *full_day_bookings,
        make_booking("studio-1", MORNING, day=date(2025, 3, 3)),
        make_booking("studio-2", MORNING, BookingStatusEnum.REJECTED, day=date(2025, 3, 4)),
        make_booking("studio-2", MORNING, day=date(2025, 4, 1)),
    ]

    markers = month_markers(studios, bookings, 2025, 3)

    assert [(marker.date, marker.marker) for marker in markers] == [
        (date(2025, 3, 3), DayMarkerEnum.HAS_AVAILABILITY),
        (date(2025, 3, 10), DayMarkerEnum.FULL),
    ]
    assert markers[1].occupied_count == 7
