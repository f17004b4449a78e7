"""Booking business logic layer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date
from uuid import UUID

from fastapi import Depends
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import Settings, get_settings
from app.core.database import get_db_session
from app.core.enums import BookingSourceEnum, BookingStatusEnum
from app.core.metrics import record_booking_attempt
from app.modules.booking.availability import DayAvailability, DayMarker, availability_for_day, month_markers
from app.modules.booking.conflicts import SESSION_TAKEN_MESSAGE, ConflictChecker, ConflictCheckResult
from app.modules.booking.models import Booking
from app.modules.booking.repository import BookingRepository
from app.modules.booking.schemas import BookingCreate, ManualBookingCreate
from app.modules.notifications.service import NotificationOutcome, NotificationsService, get_notifications_service
from app.modules.studios.catalog import StudioCatalog, get_studio_catalog
from app.shared.exceptions import BusinessRuleException, ConflictException, NotFoundException
from app.shared.utils import earliest_bookable_date, month_bounds, utc_today

logger = logging.getLogger(__name__)

NOTIFIED_STATUSES = frozenset({BookingStatusEnum.APPROVED, BookingStatusEnum.REJECTED})


@dataclass(frozen=True, slots=True)
class BookingPolicy:
    """Request window and defaults applied to manual admin entries."""

    min_advance_days: int = 7
    enforce_min_advance: bool = False
    admin_email: str = "admin@studiobooking.app"
    manual_requester_id: str = "ADMIN-BOOKING"
    manual_phone: str = "N/A"
    manual_notes: str = "Admin manual booking"

    @classmethod
    def from_settings(cls, settings: Settings) -> "BookingPolicy":
        return cls(
            min_advance_days=settings.booking_min_advance_days,
            enforce_min_advance=settings.booking_enforce_min_advance,
            admin_email=settings.admin_email,
            manual_requester_id=settings.manual_booking_requester_id,
            manual_phone=settings.manual_booking_phone,
            manual_notes=settings.manual_booking_notes,
        )


@dataclass(slots=True)
class BookingWithNotification:
    booking: Booking
    notification: NotificationOutcome


class BookingService:
    """Booking domain service: requests, admin review and availability."""

    def __init__(
        self,
        booking_repository: BookingRepository,
        catalog: StudioCatalog,
        notifications_service: NotificationsService,
        policy: BookingPolicy | None = None,
        today_provider: Callable[[], date] = utc_today,
    ) -> None:
        self.booking_repository = booking_repository
        self.catalog = catalog
        self.notifications_service = notifications_service
        self.policy = policy or BookingPolicy()
        self.today_provider = today_provider
        self.conflict_checker = ConflictChecker(booking_repository, catalog)

    def earliest_bookable_date(self) -> date:
        return earliest_bookable_date(self.policy.min_advance_days, self.today_provider())

    async def check_conflict(self, studio: str, session: str, day: date) -> ConflictCheckResult:
        """Read-only slot check used by the request form."""
        return await self.conflict_checker.check_conflict(studio, session, day)

    async def _create_booking(
        self,
        *,
        source: BookingSourceEnum,
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
        """Shared check-and-insert for public requests and manual entries."""
        try:
            self.catalog.require_session(studio, session)
            if (
                source == BookingSourceEnum.PUBLIC
                and self.policy.enforce_min_advance
                and day < self.earliest_bookable_date()
            ):
                raise BusinessRuleException(
                    f"Bookings must be made at least {self.policy.min_advance_days} days in advance",
                )
        except BusinessRuleException:
            record_booking_attempt(source, "rejected_input")
            raise

        await self.booking_repository.lock_studio_day(studio, day)
        result = await self.conflict_checker.check_conflict(studio, session, day)
        if result.has_conflict:
            record_booking_attempt(source, "conflict")
            raise ConflictException(result.message or SESSION_TAKEN_MESSAGE)

        try:
            booking = await self.booking_repository.create_booking(
                team_leader_name=team_leader_name,
                team_leader_id=team_leader_id,
                email=email,
                phone=phone,
                studio=studio,
                session=session,
                day=day,
                notes=notes,
                status=status,
            )
        except IntegrityError as exc:
            record_booking_attempt(source, "conflict")
            raise ConflictException(SESSION_TAKEN_MESSAGE) from exc

        record_booking_attempt(source, "created")
        logger.info(
            "Created %s booking %s for studio=%s session=%s date=%s status=%s",
            source,
            booking.id,
            studio,
            session,
            day.isoformat(),
            status,
        )
        return booking

    async def submit_booking(self, payload: BookingCreate) -> BookingWithNotification:
        """Store a public request as pending and notify the admin."""
        booking = await self._create_booking(
            source=BookingSourceEnum.PUBLIC,
            team_leader_name=payload.team_leader_name,
            team_leader_id=payload.team_leader_id,
            email=payload.email,
            phone=payload.phone,
            studio=payload.studio,
            session=payload.session,
            day=payload.date,
            notes=payload.notes or None,
            status=BookingStatusEnum.PENDING,
        )
        await self.booking_repository.commit()
        outcome = await self.notifications_service.notify_new_booking(booking)
        return BookingWithNotification(booking=booking, notification=outcome)

    async def create_manual_booking(self, payload: ManualBookingCreate, actor) -> Booking:
        """Admin entry; skips the advance window and sends no email."""
        booking = await self._create_booking(
            source=BookingSourceEnum.ADMIN,
            team_leader_name=payload.team_leader_name,
            team_leader_id=payload.team_leader_id or self.policy.manual_requester_id,
            email=payload.email or self.policy.admin_email,
            phone=payload.phone or self.policy.manual_phone,
            studio=payload.studio,
            session=payload.session,
            day=payload.date,
            notes=payload.notes or self.policy.manual_notes,
            status=payload.status,
        )
        logger.info("Manual booking %s entered by %s", booking.id, getattr(actor, "email", actor))
        return booking

    async def get_booking(self, booking_id: UUID) -> Booking:
        booking = await self.booking_repository.get_booking_by_id(booking_id)
        if booking is None:
            raise NotFoundException("Booking not found")
        return booking

    async def set_status(
        self,
        booking_id: UUID,
        status: BookingStatusEnum,
        actor,
    ) -> BookingWithNotification:
        """Update status, then best-effort email the requester.

        Re-opening a rejected booking puts it back on its slot, so the slot
        is checked again under the studio/day lock first.
        """
        booking = await self.get_booking(booking_id)
        previous = booking.status
        reopening = previous == BookingStatusEnum.REJECTED and status != BookingStatusEnum.REJECTED
        if reopening:
            await self.booking_repository.lock_studio_day(booking.studio, booking.date)
            result = await self.conflict_checker.check_conflict(
                booking.studio,
                booking.session,
                booking.date,
            )
            if result.has_conflict:
                raise ConflictException(result.message or SESSION_TAKEN_MESSAGE)

        try:
            booking = await self.booking_repository.set_status(booking, status)
        except IntegrityError as exc:
            raise ConflictException(SESSION_TAKEN_MESSAGE) from exc
        await self.booking_repository.commit()
        logger.info(
            "Booking %s status %s -> %s by %s",
            booking.id,
            previous,
            status,
            getattr(actor, "email", actor),
        )

        if status not in NOTIFIED_STATUSES:
            return BookingWithNotification(booking=booking, notification=NotificationOutcome(sent=False))

        outcome = await self.notifications_service.notify_status_change(booking, status)
        return BookingWithNotification(booking=booking, notification=outcome)

    async def delete_booking(self, booking_id: UUID, confirm: bool, actor) -> None:
        """Hard delete after explicit confirmation."""
        if not confirm:
            raise BusinessRuleException("Deletion must be confirmed")

        booking = await self.get_booking(booking_id)
        await self.booking_repository.delete_booking(booking)
        logger.info(
            "Deleted booking %s (studio=%s session=%s date=%s) by %s",
            booking_id,
            booking.studio,
            booking.session,
            booking.date.isoformat(),
            getattr(actor, "email", actor),
        )

    async def list_bookings(
        self,
        limit: int,
        offset: int,
        *,
        day: date | None = None,
        status: BookingStatusEnum | None = None,
    ) -> tuple[list[Booking], int]:
        return await self.booking_repository.list_bookings(limit, offset, day=day, status=status)

    async def list_approved(self, day: date | None = None) -> list[Booking]:
        """Approved bookings for the public calendar."""
        if day is not None:
            bookings = await self.booking_repository.list_bookings_for_date(day)
            return [booking for booking in bookings if booking.status == BookingStatusEnum.APPROVED]
        items, _ = await self.booking_repository.list_bookings(
            limit=500,
            offset=0,
            status=BookingStatusEnum.APPROVED,
        )
        return items

    async def day_availability(self, day: date) -> DayAvailability:
        bookings = await self.booking_repository.list_bookings_for_date(day)
        return availability_for_day(self.catalog.studios, bookings, day)

    async def month_calendar(self, year: int, month: int) -> list[DayMarker]:
        try:
            start, end = month_bounds(year, month)
        except ValueError as exc:
            raise BusinessRuleException("Invalid year or month") from exc
        bookings = await self.booking_repository.list_bookings_between(start, end)
        return month_markers(self.catalog.studios, bookings, year, month)


async def get_booking_service(
    session: AsyncSession = Depends(get_db_session),
    catalog: StudioCatalog = Depends(get_studio_catalog),
    notifications_service: NotificationsService = Depends(get_notifications_service),
) -> BookingService:
    """Dependency provider for booking service."""
    return BookingService(
        booking_repository=BookingRepository(session),
        catalog=catalog,
        notifications_service=notifications_service,
        policy=BookingPolicy.from_settings(get_settings()),
    )
