"""Booking repository layer."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from sqlalchemy import Select, func, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import BookingStatusEnum
from app.modules.booking.models import Booking


class BookingRepository:
    """DB operations for booking domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def lock_studio_day(self, studio: str, day: date) -> None:
        """Serialize check-and-insert for one studio/date until the transaction ends."""
        await self.session.execute(
            text("SELECT pg_advisory_xact_lock(hashtext(:lock_key))"),
            {"lock_key": f"booking:{studio}:{day.isoformat()}"},
        )

    async def create_booking(
        self,
        *,
        team_leader_name: str,
        team_leader_id: str,
        email: str,
        phone: str,
        studio: str,
        session: str,
        day: date,
        notes: str | None,
        status: BookingStatusEnum,
    ) -> Booking:
        booking = Booking(
            team_leader_name=team_leader_name,
            team_leader_id=team_leader_id,
            email=email,
            phone=phone,
            studio=studio,
            session=session,
            date=day,
            notes=notes,
            status=status,
        )
        self.session.add(booking)
        await self.session.flush()
        return booking

    async def get_booking_by_id(self, booking_id: UUID) -> Booking | None:
        stmt = select(Booking).where(Booking.id == booking_id)
        return await self.session.scalar(stmt)

    async def list_active_sessions(self, studio: str, day: date) -> list[str]:
        stmt = select(Booking.session).where(
            Booking.studio == studio,
            Booking.date == day,
            Booking.status != BookingStatusEnum.REJECTED,
        )
        return list((await self.session.scalars(stmt)).all())

    async def list_bookings_for_date(self, day: date) -> list[Booking]:
        stmt = (
            select(Booking)
            .where(Booking.date == day)
            .order_by(Booking.session.asc(), Booking.created_at.asc())
        )
        return list((await self.session.scalars(stmt)).all())

    async def list_bookings_between(
        self,
        start: date,
        end: date,
        status: BookingStatusEnum | None = None,
    ) -> list[Booking]:
        stmt = select(Booking).where(Booking.date >= start, Booking.date <= end)
        if status is not None:
            stmt = stmt.where(Booking.status == status)
        stmt = stmt.order_by(Booking.date.asc(), Booking.session.asc())
        return list((await self.session.scalars(stmt)).all())

    async def list_bookings(
        self,
        limit: int,
        offset: int,
        *,
        day: date | None = None,
        status: BookingStatusEnum | None = None,
    ) -> tuple[list[Booking], int]:
        base_stmt: Select[tuple[Booking]] = select(Booking)
        if day is not None:
            base_stmt = base_stmt.where(Booking.date == day)
        if status is not None:
            base_stmt = base_stmt.where(Booking.status == status)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = (
            base_stmt.order_by(Booking.date.asc(), Booking.session.asc(), Booking.created_at.asc())
            .limit(limit)
            .offset(offset)
        )
        items = list((await self.session.scalars(stmt)).all())
        return items, total

    async def set_status(self, booking: Booking, status: BookingStatusEnum) -> Booking:
        booking.status = status
        await self.session.flush()
        return booking

    async def delete_booking(self, booking: Booking) -> None:
        await self.session.delete(booking)
        await self.session.flush()

    async def commit(self) -> None:
        """Persist the booking and release the studio/day lock before outbound calls."""
        await self.session.commit()
