"""Admin reporting business logic layer."""

from __future__ import annotations

from datetime import date

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.enums import BookingStatusEnum
from app.modules.admin.repository import AdminRepository, ReportFilters
from app.modules.admin.schemas import AdminDashboardRead, AdminReportSummaryRead, StudioCountRead
from app.modules.booking.availability import availability_for_day, month_markers
from app.modules.booking.repository import BookingRepository
from app.modules.booking.schemas import BookingRead, DayAvailabilityRead, DayMarkerRead
from app.modules.studios.catalog import StudioCatalog, get_studio_catalog
from app.shared.exceptions import BusinessRuleException
from app.shared.utils import month_bounds, utc_now


class AdminService:
    """Admin dashboard and report service."""

    def __init__(
        self,
        repository: AdminRepository,
        booking_repository: BookingRepository,
        catalog: StudioCatalog,
    ) -> None:
        self.repository = repository
        self.booking_repository = booking_repository
        self.catalog = catalog

    async def get_dashboard(self, day: date) -> AdminDashboardRead:
        """Bookings, availability and month markers around one date."""
        day_bookings = await self.booking_repository.list_bookings_for_date(day)
        start, end = month_bounds(day.year, day.month)
        month_bookings = await self.booking_repository.list_bookings_between(start, end)

        availability = availability_for_day(self.catalog.studios, day_bookings, day)
        markers = month_markers(self.catalog.studios, month_bookings, day.year, day.month)
        return AdminDashboardRead(
            generated_at=utc_now(),
            date=day,
            bookings=[BookingRead.model_validate(item) for item in day_bookings],
            pending_count=sum(1 for item in day_bookings if item.status == BookingStatusEnum.PENDING),
            availability=DayAvailabilityRead.model_validate(availability),
            month_days=[DayMarkerRead.model_validate(marker) for marker in markers],
        )

    async def get_report_summary(
        self,
        filters: ReportFilters,
        limit: int,
        offset: int,
    ) -> AdminReportSummaryRead:
        """Status totals, per-studio counts and the matching bookings."""
        if filters.start_date and filters.end_date and filters.start_date > filters.end_date:
            raise BusinessRuleException("start_date must not be after end_date")

        status_counts = await self.repository.count_bookings_by_status(filters)
        studio_counts = await self.repository.count_bookings_by_studio(filters)
        items, total = await self.repository.list_bookings(filters, limit, offset)

        per_studio = [
            StudioCountRead(
                studio_id=studio.id,
                studio_name=studio.name,
                bookings=studio_counts.get(studio.id, 0),
            )
            for studio in self.catalog.studios
        ]
        return AdminReportSummaryRead(
            generated_at=utc_now(),
            bookings_total=sum(status_counts.values()),
            bookings_pending=status_counts.get(BookingStatusEnum.PENDING, 0),
            bookings_approved=status_counts.get(BookingStatusEnum.APPROVED, 0),
            bookings_rejected=status_counts.get(BookingStatusEnum.REJECTED, 0),
            per_studio=per_studio,
            items=[BookingRead.model_validate(item) for item in items],
            limit=limit,
            offset=offset,
            has_more=offset + len(items) < total,
        )


async def get_admin_service(
    session: AsyncSession = Depends(get_db_session),
    catalog: StudioCatalog = Depends(get_studio_catalog),
) -> AdminService:
    """Dependency provider for admin service."""
    return AdminService(AdminRepository(session), BookingRepository(session), catalog)
