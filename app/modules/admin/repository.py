"""Admin reporting repository layer."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import BookingStatusEnum
from app.modules.booking.models import Booking


@dataclass(frozen=True, slots=True)
class ReportFilters:
    start_date: date | None = None
    end_date: date | None = None
    studio: str | None = None
    status: BookingStatusEnum | None = None
    team_leader_name: str | None = None


class AdminRepository:
    """Aggregate queries over bookings for admin reports."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    @staticmethod
    def _apply_filters(stmt: Select, filters: ReportFilters) -> Select:
        if filters.start_date is not None:
            stmt = stmt.where(Booking.date >= filters.start_date)
        if filters.end_date is not None:
            stmt = stmt.where(Booking.date <= filters.end_date)
        if filters.studio:
            stmt = stmt.where(Booking.studio == filters.studio)
        if filters.status is not None:
            stmt = stmt.where(Booking.status == filters.status)
        if filters.team_leader_name:
            stmt = stmt.where(Booking.team_leader_name.ilike(f"%{filters.team_leader_name}%"))
        return stmt

    async def count_bookings_by_status(self, filters: ReportFilters) -> dict[BookingStatusEnum, int]:
        stmt = self._apply_filters(select(Booking.status, func.count(Booking.id)), filters)
        rows = (await self.session.execute(stmt.group_by(Booking.status))).all()
        return {status: int(count) for status, count in rows}

    async def count_bookings_by_studio(self, filters: ReportFilters) -> dict[str, int]:
        stmt = self._apply_filters(select(Booking.studio, func.count(Booking.id)), filters)
        rows = (await self.session.execute(stmt.group_by(Booking.studio))).all()
        return {studio: int(count) for studio, count in rows}

    async def list_bookings(
        self,
        filters: ReportFilters,
        limit: int,
        offset: int,
    ) -> tuple[list[Booking], int]:
        base_stmt: Select[tuple[Booking]] = self._apply_filters(select(Booking), filters)
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = (
            base_stmt.order_by(Booking.date.desc(), Booking.session.asc(), Booking.created_at.asc())
            .limit(limit)
            .offset(offset)
        )
        items = list((await self.session.scalars(stmt)).all())
        return items, total
