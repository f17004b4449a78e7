from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, date, datetime
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.enums import BookingStatusEnum
from app.modules.booking.conflicts import (
    FULL_DAY_BLOCKED_MESSAGE,
    FULL_DAY_TAKEN_MESSAGE,
    SESSION_TAKEN_MESSAGE,
)
from app.modules.booking.schemas import BookingCreate, ManualBookingCreate
from app.modules.booking.service import BookingPolicy, BookingService
from app.modules.notifications.service import NotificationOutcome
from app.modules.studios.catalog import StudioCatalog
from app.modules.studios.schemas import StudioDefinition
from app.shared.exceptions import BusinessRuleException, ConflictException, NotFoundException

BOOKING_DAY = date(2025, 3, 1)
MORNING = "10:00 AM - 1:00 PM"
AFTERNOON = "2:00 PM - 5:00 PM"
FULL_DAY = "Full Day (10:00 AM - 5:00 PM)"


@dataclass
class FakeBooking:
    id: UUID
    team_leader_name: str
    team_leader_id: str
    email: str
    phone: str
    studio: str
    session: str
    date: date
    notes: str | None
    status: BookingStatusEnum
    created_at: datetime = field(default_factory=lambda: datetime(2025, 2, 1, 9, 0, tzinfo=UTC))


class FakeBookingRepository:
    def __init__(
        self,
        *,
        fail_insert_with_integrity_error: bool = False,
        fail_status_update_with_integrity_error: bool = False,
    ) -> None:
        self.bookings: dict[UUID, FakeBooking] = {}
        self.locks: list[tuple[str, date]] = []
        self.commits = 0
        self.fail_insert_with_integrity_error = fail_insert_with_integrity_error
        self.fail_status_update_with_integrity_error = fail_status_update_with_integrity_error

    async def lock_studio_day(self, studio: str, day: date) -> None:
        self.locks.append((studio, day))

    async def create_booking(self, *, day: date, **fields) -> FakeBooking:
        if self.fail_insert_with_integrity_error:
            raise IntegrityError("INSERT INTO bookings", {}, Exception("uq_bookings_active_slot"))
        booking = FakeBooking(id=uuid4(), date=day, **fields)
        self.bookings[booking.id] = booking
        return booking

    async def get_booking_by_id(self, booking_id: UUID) -> FakeBooking | None:
        return self.bookings.get(booking_id)

    async def list_active_sessions(self, studio: str, day: date) -> list[str]:
        return [
            booking.session
            for booking in self.bookings.values()
            if booking.studio == studio
            and booking.date == day
            and booking.status != BookingStatusEnum.REJECTED
        ]

    async def list_bookings_for_date(self, day: date) -> list[FakeBooking]:
        return sorted(
            (booking for booking in self.bookings.values() if booking.date == day),
            key=lambda booking: booking.session,
        )

    async def list_bookings_between(self, start: date, end: date, status=None) -> list[FakeBooking]:
        return [
            booking
            for booking in self.bookings.values()
            if start <= booking.date <= end and (status is None or booking.status == status)
        ]

    async def list_bookings(self, limit: int, offset: int, *, day=None, status=None):
        items = [
            booking
            for booking in self.bookings.values()
            if (day is None or booking.date == day) and (status is None or booking.status == status)
        ]
        return items[offset : offset + limit], len(items)

    async def set_status(self, booking: FakeBooking, status: BookingStatusEnum) -> FakeBooking:
        if self.fail_status_update_with_integrity_error:
            raise IntegrityError("UPDATE bookings", {}, Exception("uq_bookings_active_slot"))
        booking.status = status
        return booking

    async def delete_booking(self, booking: FakeBooking) -> None:
        del self.bookings[booking.id]

    async def commit(self) -> None:
        self.commits += 1


class FakeNotificationsService:
    def __init__(self, outcome: NotificationOutcome | None = None) -> None:
        self.outcome = outcome or NotificationOutcome(sent=True)
        self.new_booking_calls: list[FakeBooking] = []
        self.status_calls: list[tuple[FakeBooking, BookingStatusEnum]] = []

    async def notify_new_booking(self, booking: FakeBooking) -> NotificationOutcome:
        self.new_booking_calls.append(booking)
        return self.outcome

    async def notify_status_change(
        self,
        booking: FakeBooking,
        status: BookingStatusEnum,
    ) -> NotificationOutcome:
        self.status_calls.append((booking, status))
        return self.outcome


def make_catalog() -> StudioCatalog:
    return StudioCatalog(
        [
            StudioDefinition.model_validate(
                {"id": "studio-1", "name": "Studio 1 - Level 1", "sessions": [MORNING, AFTERNOON]},
            ),
            StudioDefinition.model_validate(
                {
                    "id": "studio-2",
                    "name": "Studio 2 - Level 1",
                    "sessions": [MORNING, AFTERNOON, FULL_DAY],
                },
            ),
        ],
    )


def make_service(
    *,
    repository: FakeBookingRepository | None = None,
    notifications: FakeNotificationsService | None = None,
    policy: BookingPolicy | None = None,
    today: date = date(2025, 2, 1),
) -> tuple[BookingService, FakeBookingRepository, FakeNotificationsService]:
    booking_repo = repository or FakeBookingRepository()
    notifications_service = notifications or FakeNotificationsService()
    service = BookingService(
        booking_repository=booking_repo,
        catalog=make_catalog(),
        notifications_service=notifications_service,
        policy=policy or BookingPolicy(),
        today_provider=lambda: today,
    )
    return service, booking_repo, notifications_service


def make_request(studio: str = "studio-1", session: str = MORNING, **overrides) -> BookingCreate:
    payload = {
        "team_leader_name": "Alice Tan",
        "team_leader_id": "TL-001",
        "email": "alice@example.com",
        "phone": "+60 12 345 6789",
        "studio": studio,
        "session": session,
        "date": BOOKING_DAY,
        "notes": "",
    }
    payload.update(overrides)
    return BookingCreate.model_validate(payload)


def make_admin() -> SimpleNamespace:
    return SimpleNamespace(id=uuid4(), email="admin@studiobooking.app")


@pytest.mark.asyncio
async def test_submit_booking_creates_pending_booking_and_notifies_admin() -> None:
    service, booking_repo, notifications = make_service()

    result = await service.submit_booking(make_request())

    assert result.booking.status == BookingStatusEnum.PENDING
    assert result.booking.notes is None
    assert result.notification.sent is True
    assert notifications.new_booking_calls == [result.booking]
    assert booking_repo.locks == [("studio-1", BOOKING_DAY)]


@pytest.mark.asyncio
async def test_submit_booking_rejects_duplicate_session() -> None:
    service, booking_repo, _ = make_service()
    await service.submit_booking(make_request())

    with pytest.raises(ConflictException) as exc:
        await service.submit_booking(make_request(team_leader_name="Bob"))

    assert exc.value.message == SESSION_TAKEN_MESSAGE
    assert len(booking_repo.bookings) == 1


@pytest.mark.asyncio
async def test_other_session_of_same_studio_remains_bookable() -> None:
    service, booking_repo, _ = make_service()
    await service.submit_booking(make_request())

    await service.submit_booking(make_request(session=AFTERNOON))

    assert len(booking_repo.bookings) == 2


@pytest.mark.asyncio
async def test_full_day_blocked_then_free_after_rejection() -> None:
    service, _, _ = make_service()
    first = await service.submit_booking(make_request(studio="studio-2"))

    with pytest.raises(ConflictException) as exc:
        await service.submit_booking(make_request(studio="studio-2", session=FULL_DAY))
    assert exc.value.message == FULL_DAY_BLOCKED_MESSAGE

    await service.set_status(first.booking.id, BookingStatusEnum.REJECTED, make_admin())

    full_day = await service.submit_booking(make_request(studio="studio-2", session=FULL_DAY))
    assert full_day.booking.session == FULL_DAY


@pytest.mark.asyncio
async def test_existing_full_day_blocks_every_session() -> None:
    service, _, _ = make_service()
    await service.submit_booking(make_request(studio="studio-2", session=FULL_DAY))

    with pytest.raises(ConflictException) as exc:
        await service.submit_booking(make_request(studio="studio-2", session=AFTERNOON))

    assert exc.value.message == FULL_DAY_TAKEN_MESSAGE


@pytest.mark.asyncio
async def test_delete_frees_slot_immediately() -> None:
    service, booking_repo, _ = make_service()
    created = await service.submit_booking(make_request())

    await service.delete_booking(created.booking.id, True, make_admin())
    assert booking_repo.bookings == {}

    again = await service.submit_booking(make_request())
    assert again.booking.status == BookingStatusEnum.PENDING


@pytest.mark.asyncio
async def test_delete_requires_confirmation() -> None:
    service, booking_repo, _ = make_service()
    created = await service.submit_booking(make_request())

    with pytest.raises(BusinessRuleException):
        await service.delete_booking(created.booking.id, False, make_admin())

    assert created.booking.id in booking_repo.bookings


@pytest.mark.asyncio
async def test_email_failure_keeps_booking_and_reports_warning() -> None:
    notifications = FakeNotificationsService(
        NotificationOutcome(sent=False, warning="Email notification could not be sent"),
    )
    service, booking_repo, _ = make_service(notifications=notifications)

    result = await service.submit_booking(make_request())

    assert result.booking.id in booking_repo.bookings
    assert result.notification.sent is False
    assert result.notification.warning == "Email notification could not be sent"


@pytest.mark.asyncio
async def test_unknown_studio_or_session_is_rejected_before_storage() -> None:
    service, booking_repo, _ = make_service()

    with pytest.raises(BusinessRuleException):
        await service.submit_booking(make_request(studio="studio-9"))
    with pytest.raises(BusinessRuleException):
        await service.submit_booking(make_request(session="8:00 PM - 11:00 PM"))

    assert booking_repo.bookings == {}
    assert booking_repo.locks == []


@pytest.mark.asyncio
async def test_unique_index_violation_is_reported_as_session_conflict() -> None:
    service, _, notifications = make_service(
        repository=FakeBookingRepository(fail_insert_with_integrity_error=True),
    )

    with pytest.raises(ConflictException) as exc:
        await service.submit_booking(make_request())

    assert exc.value.message == SESSION_TAKEN_MESSAGE
    assert notifications.new_booking_calls == []


@pytest.mark.asyncio
async def test_advance_window_enforced_only_for_public_requests() -> None:
    policy = BookingPolicy(min_advance_days=7, enforce_min_advance=True)
    service, booking_repo, _ = make_service(policy=policy, today=date(2025, 2, 25))

    with pytest.raises(BusinessRuleException):
        await service.submit_booking(make_request())

    manual = await service.create_manual_booking(
        ManualBookingCreate(
            team_leader_name="Walk-in team",
            studio="studio-1",
            session=MORNING,
            date=BOOKING_DAY,
        ),
        make_admin(),
    )
    assert list(booking_repo.bookings) == [manual.id]


@pytest.mark.asyncio
async def test_advance_window_not_enforced_by_default() -> None:
    service, _, _ = make_service(today=date(2025, 2, 28))

    result = await service.submit_booking(make_request())

    assert result.booking.date == BOOKING_DAY


@pytest.mark.asyncio
async def test_manual_booking_applies_defaults_and_sends_no_email() -> None:
    service, _, notifications = make_service()

    booking = await service.create_manual_booking(
        ManualBookingCreate(
            team_leader_name="Walk-in team",
            studio="studio-1",
            session=AFTERNOON,
            date=BOOKING_DAY,
        ),
        make_admin(),
    )

    assert booking.status == BookingStatusEnum.APPROVED
    assert booking.team_leader_id == "ADMIN-BOOKING"
    assert booking.email == "admin@studiobooking.app"
    assert booking.phone == "N/A"
    assert booking.notes == "Admin manual booking"
    assert notifications.new_booking_calls == []


@pytest.mark.asyncio
async def test_manual_booking_runs_conflict_check() -> None:
    service, _, _ = make_service()
    await service.submit_booking(make_request())

    with pytest.raises(ConflictException):
        await service.create_manual_booking(
            ManualBookingCreate(
                team_leader_name="Walk-in team",
                studio="studio-1",
                session=MORNING,
                date=BOOKING_DAY,
                status=BookingStatusEnum.PENDING,
            ),
            make_admin(),
        )


@pytest.mark.asyncio
async def test_set_status_emails_requester_only_for_final_decisions() -> None:
    service, _, notifications = make_service()
    created = await service.submit_booking(make_request())

    approved = await service.set_status(created.booking.id, BookingStatusEnum.APPROVED, make_admin())
    assert approved.booking.status == BookingStatusEnum.APPROVED
    assert approved.notification.sent is True

    reset = await service.set_status(created.booking.id, BookingStatusEnum.PENDING, make_admin())
    assert reset.notification.sent is False
    assert [status for _, status in notifications.status_calls] == [BookingStatusEnum.APPROVED]


@pytest.mark.asyncio
async def test_set_status_unknown_booking_raises_not_found() -> None:
    service, _, _ = make_service()

    with pytest.raises(NotFoundException):
        await service.set_status(uuid4(), BookingStatusEnum.APPROVED, make_admin())


@pytest.mark.asyncio
async def test_day_availability_and_month_calendar_use_catalog_capacity() -> None:
    service, _, _ = make_service()
    await service.submit_booking(make_request())
    await service.submit_booking(make_request(studio="studio-2", session=AFTERNOON))

    availability = await service.day_availability(BOOKING_DAY)
    assert availability.capacity == 5
    assert availability.occupied_count == 2
    assert availability.remaining_slots == 3

    markers = await service.month_calendar(2025, 3)
    assert [(marker.date, marker.occupied_count) for marker in markers] == [(BOOKING_DAY, 2)]


@pytest.mark.asyncio
async def test_list_approved_filters_by_status() -> None:
    service, _, _ = make_service()
    pending = await service.submit_booking(make_request())
    approved = await service.submit_booking(make_request(session=AFTERNOON))
    await service.set_status(approved.booking.id, BookingStatusEnum.APPROVED, make_admin())

    items = await service.list_approved(BOOKING_DAY)

    assert [item.id for item in items] == [approved.booking.id]
    assert pending.booking.id not in {item.id for item in items}


@pytest.mark.asyncio
async def test_reopening_rejected_booking_over_rebooked_slot_is_conflict() -> None:
    service, booking_repo, _ = make_service()
    first = await service.submit_booking(make_request())
    await service.set_status(first.booking.id, BookingStatusEnum.REJECTED, make_admin())
    await service.submit_booking(make_request(team_leader_name="Bob"))

    with pytest.raises(ConflictException) as exc:
        await service.set_status(first.booking.id, BookingStatusEnum.APPROVED, make_admin())

    assert exc.value.message == SESSION_TAKEN_MESSAGE
    assert booking_repo.bookings[first.booking.id].status == BookingStatusEnum.REJECTED
    assert booking_repo.locks[-1] == ("studio-1", BOOKING_DAY)


@pytest.mark.asyncio
async def test_reopening_rejected_full_day_keeps_day_exclusive() -> None:
    service, booking_repo, _ = make_service()
    full_day = await service.submit_booking(make_request(studio="studio-2", session=FULL_DAY))
    await service.set_status(full_day.booking.id, BookingStatusEnum.REJECTED, make_admin())
    morning = await service.submit_booking(make_request(studio="studio-2"))

    with pytest.raises(ConflictException) as exc:
        await service.set_status(full_day.booking.id, BookingStatusEnum.PENDING, make_admin())
    assert exc.value.message == FULL_DAY_BLOCKED_MESSAGE

    await service.set_status(morning.booking.id, BookingStatusEnum.REJECTED, make_admin())
    reopened = await service.set_status(full_day.booking.id, BookingStatusEnum.APPROVED, make_admin())
    assert reopened.booking.status == BookingStatusEnum.APPROVED

    with pytest.raises(ConflictException) as exc:
        await service.set_status(morning.booking.id, BookingStatusEnum.PENDING, make_admin())
    assert exc.value.message == FULL_DAY_TAKEN_MESSAGE
    assert booking_repo.bookings[morning.booking.id].status == BookingStatusEnum.REJECTED


@pytest.mark.asyncio
async def test_status_update_unique_violation_is_reported_as_session_conflict() -> None:
    repository = FakeBookingRepository(fail_status_update_with_integrity_error=True)
    service, _, notifications = make_service(repository=repository)
    created = await service.submit_booking(make_request())

    with pytest.raises(ConflictException) as exc:
        await service.set_status(created.booking.id, BookingStatusEnum.APPROVED, make_admin())

    assert exc.value.message == SESSION_TAKEN_MESSAGE
    assert notifications.status_calls == []


class CommitTrackingNotifications(FakeNotificationsService):
    def __init__(self, repository: FakeBookingRepository) -> None:
        super().__init__()
        self.repository = repository
        self.commits_at_send: list[int] = []

    async def notify_new_booking(self, booking: FakeBooking) -> NotificationOutcome:
        self.commits_at_send.append(self.repository.commits)
        return await super().notify_new_booking(booking)

    async def notify_status_change(
        self,
        booking: FakeBooking,
        status: BookingStatusEnum,
    ) -> NotificationOutcome:
        self.commits_at_send.append(self.repository.commits)
        return await super().notify_status_change(booking, status)


@pytest.mark.asyncio
async def test_emails_are_sent_only_after_booking_is_committed() -> None:
    repository = FakeBookingRepository()
    notifications = CommitTrackingNotifications(repository)
    service, _, _ = make_service(repository=repository, notifications=notifications)

    created = await service.submit_booking(make_request())
    await service.set_status(created.booking.id, BookingStatusEnum.APPROVED, make_admin())

    assert notifications.commits_at_send == [1, 2]
