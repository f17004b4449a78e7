"""Admin schemas."""

from __future__ import annotations

from datetime import date as calendar_date, datetime

from pydantic import BaseModel

from app.modules.booking.schemas import BookingRead, DayAvailabilityRead, DayMarkerRead


class AdminDashboardRead(BaseModel):
    """Everything the admin calendar view needs for one date."""

    generated_at: datetime
    date: calendar_date
    bookings: list[BookingRead]
    pending_count: int
    availability: DayAvailabilityRead
    month_days: list[DayMarkerRead]


class StudioCountRead(BaseModel):
    studio_id: str
    studio_name: str
    bookings: int


class AdminReportSummaryRead(BaseModel):
    """Filtered booking report."""

    generated_at: datetime
    bookings_total: int
    bookings_pending: int
    bookings_approved: int
    bookings_rejected: int
    per_studio: list[StudioCountRead]
    items: list[BookingRead]
    limit: int
    offset: int
    has_more: bool
