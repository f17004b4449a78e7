"""Booking API router."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import APIRouter, Depends, Query, Response, status

from app.core.enums import BookingStatusEnum
from app.modules.booking.schemas import (
    BookingCreate,
    BookingRead,
    BookingStatusChangeRead,
    BookingStatusUpdate,
    BookingSubmissionRead,
    ConflictCheckRead,
    DayAvailabilityRead,
    DayMarkerRead,
    ManualBookingCreate,
    MonthCalendarRead,
    PublicBookingRead,
)
from app.modules.booking.service import BookingService, get_booking_service
from app.modules.identity.service import get_current_admin
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/booking", tags=["booking"])


@router.post("/requests", response_model=BookingSubmissionRead, status_code=status.HTTP_201_CREATED)
async def submit_booking(
    payload: BookingCreate,
    service: BookingService = Depends(get_booking_service),
) -> BookingSubmissionRead:
    """Submit a public booking request; it starts as pending."""
    result = await service.submit_booking(payload)
    return BookingSubmissionRead(
        booking=BookingRead.model_validate(result.booking),
        notification_sent=result.notification.sent,
        warning=result.notification.warning,
    )


@router.get("/conflicts", response_model=ConflictCheckRead)
async def check_conflict(
    studio: str = Query(min_length=1),
    session: str = Query(min_length=1),
    day: date = Query(alias="date"),
    service: BookingService = Depends(get_booking_service),
) -> ConflictCheckRead:
    """Check whether a slot can still be requested."""
    result = await service.check_conflict(studio, session, day)
    return ConflictCheckRead.model_validate(result)


@router.get("/availability", response_model=DayAvailabilityRead)
async def get_day_availability(
    day: date = Query(alias="date"),
    service: BookingService = Depends(get_booking_service),
) -> DayAvailabilityRead:
    """Free and booked sessions per studio for one date."""
    availability = await service.day_availability(day)
    return DayAvailabilityRead.model_validate(availability)


@router.get("/calendar", response_model=MonthCalendarRead)
async def get_month_calendar(
    year: int = Query(ge=2000, le=2100),
    month: int = Query(ge=1, le=12),
    service: BookingService = Depends(get_booking_service),
) -> MonthCalendarRead:
    """Days of a month that are fully booked or partially booked."""
    markers = await service.month_calendar(year, month)
    return MonthCalendarRead(
        year=year,
        month=month,
        capacity=service.catalog.total_daily_capacity,
        days=[DayMarkerRead.model_validate(marker) for marker in markers],
    )


@router.get("/approved", response_model=list[PublicBookingRead])
async def list_approved_bookings(
    day: date | None = Query(default=None, alias="date"),
    service: BookingService = Depends(get_booking_service),
) -> list[PublicBookingRead]:
    """Approved bookings without requester contact details."""
    bookings = await service.list_approved(day)
    return [PublicBookingRead.model_validate(item) for item in bookings]


@router.post("/manual", response_model=BookingRead, status_code=status.HTTP_201_CREATED)
async def create_manual_booking(
    payload: ManualBookingCreate,
    service: BookingService = Depends(get_booking_service),
    current_admin=Depends(get_current_admin),
) -> BookingRead:
    """Enter a booking on behalf of a requester."""
    booking = await service.create_manual_booking(payload, current_admin)
    return BookingRead.model_validate(booking)


@router.get("", response_model=Page[BookingRead])
async def list_bookings(
    day: date | None = Query(default=None, alias="date"),
    status_filter: BookingStatusEnum | None = Query(default=None, alias="status"),
    pagination=Depends(get_pagination_params),
    service: BookingService = Depends(get_booking_service),
    current_admin=Depends(get_current_admin),
) -> Page[BookingRead]:
    """List bookings, optionally for one date or status."""
    items, total = await service.list_bookings(
        pagination.limit,
        pagination.offset,
        day=day,
        status=status_filter,
    )
    serialized = [BookingRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.get("/{booking_id}", response_model=BookingRead)
async def get_booking(
    booking_id: UUID,
    service: BookingService = Depends(get_booking_service),
    current_admin=Depends(get_current_admin),
) -> BookingRead:
    """Get one booking with contact details."""
    booking = await service.get_booking(booking_id)
    return BookingRead.model_validate(booking)


@router.patch("/{booking_id}/status", response_model=BookingStatusChangeRead)
async def update_booking_status(
    booking_id: UUID,
    payload: BookingStatusUpdate,
    service: BookingService = Depends(get_booking_service),
    current_admin=Depends(get_current_admin),
) -> BookingStatusChangeRead:
    """Approve, reject or reset a booking."""
    result = await service.set_status(booking_id, payload.status, current_admin)
    return BookingStatusChangeRead(
        booking=BookingRead.model_validate(result.booking),
        notification_sent=result.notification.sent,
        warning=result.notification.warning,
    )


@router.delete("/{booking_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_booking(
    booking_id: UUID,
    confirm: bool = Query(default=False),
    service: BookingService = Depends(get_booking_service),
    current_admin=Depends(get_current_admin),
) -> Response:
    """Delete a booking for good; requires confirm=true."""
    await service.delete_booking(booking_id, confirm, current_admin)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
