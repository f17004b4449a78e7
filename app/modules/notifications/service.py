"""Notifications business logic layer."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Protocol
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db_session
from app.core.enums import BookingStatusEnum, NotificationStatusEnum, NotificationTemplateEnum
from app.core.metrics import record_email_attempt
from app.modules.notifications.email_client import EmailClient, EmailDeliveryError, get_email_client
from app.modules.notifications.models import EmailNotification
from app.modules.notifications.repository import NotificationsRepository
from app.modules.studios.catalog import StudioCatalog, get_studio_catalog
from app.shared.utils import format_long_date, utc_now

logger = logging.getLogger(__name__)

NOT_CONFIGURED_WARNING = "Email notifications are not configured"
DELIVERY_FAILED_WARNING = "Email notification could not be sent"

APPROVED_MESSAGE = (
    "Your studio booking has been approved! Please arrive 10 minutes before your session time."
)
REJECTED_MESSAGE = (
    "Unfortunately, your studio booking has been rejected. Please contact admin for more "
    "information or try booking a different time slot."
)


class NotifiableBooking(Protocol):
    id: UUID
    team_leader_name: str
    team_leader_id: str
    email: str
    phone: str
    studio: str
    session: str
    date: date
    notes: str | None


@dataclass(frozen=True, slots=True)
class NotificationOutcome:
    sent: bool
    warning: str | None = None


class NotificationsService:
    """Build and deliver booking emails, recording every attempt."""

    def __init__(
        self,
        repository: NotificationsRepository,
        email_client: EmailClient,
        catalog: StudioCatalog,
        *,
        admin_email: str,
        from_name: str,
        now_provider: Callable[[], datetime] = utc_now,
    ) -> None:
        self.repository = repository
        self.email_client = email_client
        self.catalog = catalog
        self.admin_email = admin_email
        self.from_name = from_name
        self.now_provider = now_provider

    def build_new_booking_params(self, booking: NotifiableBooking) -> dict[str, str]:
        studio_name = self.catalog.studio_name(booking.studio)
        booking_date = format_long_date(booking.date)
        return {
            "to_email": self.admin_email,
            "to_name": "Admin",
            "from_name": self.from_name,
            "team_leader_name": booking.team_leader_name,
            "team_leader_id": booking.team_leader_id,
            "user_email": booking.email,
            "phone": booking.phone,
            "studio": studio_name,
            "session": booking.session,
            "booking_date": booking_date,
            "notes": booking.notes or "No additional notes",
            "subject": f"New Studio Booking Request - {booking.team_leader_name}",
            "message": (
                f"A new studio booking request has been submitted by {booking.team_leader_name} "
                f"({booking.team_leader_id}) for {studio_name} on {booking_date}."
            ),
        }

    def build_status_params(
        self,
        booking: NotifiableBooking,
        status: BookingStatusEnum,
    ) -> dict[str, str]:
        is_approved = status == BookingStatusEnum.APPROVED
        status_text = "Approved" if is_approved else "Rejected"
        status_message = APPROVED_MESSAGE if is_approved else REJECTED_MESSAGE
        studio_name = self.catalog.studio_name(booking.studio)
        return {
            "to_email": booking.email,
            "to_name": booking.team_leader_name,
            "from_name": self.from_name,
            "team_leader_name": booking.team_leader_name,
            "team_leader_id": booking.team_leader_id,
            "studio": studio_name,
            "session": booking.session,
            "booking_date": format_long_date(booking.date),
            "status": status_text,
            "status_message": status_message,
            "subject": f"Booking {status_text} - {studio_name}",
            "message": status_message,
            "status_color": "#22c55e" if is_approved else "#ef4444",
        }

    async def notify_new_booking(self, booking: NotifiableBooking) -> NotificationOutcome:
        """Tell the admin about a new request."""
        params = self.build_new_booking_params(booking)
        return await self._deliver(
            NotificationTemplateEnum.NEW_BOOKING,
            booking_id=booking.id,
            recipient=self.admin_email,
            params=params,
        )

    async def notify_status_change(
        self,
        booking: NotifiableBooking,
        status: BookingStatusEnum,
    ) -> NotificationOutcome:
        """Tell the requester their booking was approved or rejected."""
        params = self.build_status_params(booking, status)
        return await self._deliver(
            NotificationTemplateEnum.BOOKING_STATUS,
            booking_id=booking.id,
            recipient=booking.email,
            params=params,
        )

    async def _deliver(
        self,
        template: NotificationTemplateEnum,
        *,
        booking_id: UUID | None,
        recipient: str,
        params: dict[str, Any],
    ) -> NotificationOutcome:
        if not self.email_client.is_configured:
            logger.warning("Email configuration not set up. Skipping %s notification.", template)
            record_email_attempt(template, "skipped")
            return NotificationOutcome(sent=False, warning=NOT_CONFIGURED_WARNING)

        notification = await self.repository.create_notification(
            booking_id=booking_id,
            template=template,
            recipient_email=recipient,
            subject=params["subject"],
        )
        try:
            await self.email_client.send(template, params)
        except EmailDeliveryError as exc:
            logger.warning("Failed to send %s email to %s: %s", template, recipient, exc)
            await self.repository.set_status(
                notification,
                NotificationStatusEnum.FAILED,
                None,
                error_message=str(exc),
            )
            record_email_attempt(template, "failed")
            return NotificationOutcome(sent=False, warning=DELIVERY_FAILED_WARNING)

        await self.repository.set_status(
            notification,
            NotificationStatusEnum.SENT,
            self.now_provider(),
        )
        record_email_attempt(template, "sent")
        logger.info("Sent %s email to %s", template, recipient)
        return NotificationOutcome(sent=True)

    async def list_notifications(
        self,
        limit: int,
        offset: int,
        *,
        status: NotificationStatusEnum | None = None,
        booking_id: UUID | None = None,
    ) -> tuple[list[EmailNotification], int]:
        """List delivery log entries, newest first."""
        return await self.repository.list_notifications(
            limit,
            offset,
            status=status,
            booking_id=booking_id,
        )


async def get_notifications_service(
    session: AsyncSession = Depends(get_db_session),
    email_client: EmailClient = Depends(get_email_client),
    catalog: StudioCatalog = Depends(get_studio_catalog),
) -> NotificationsService:
    """Dependency provider for notifications service."""
    settings = get_settings()
    return NotificationsService(
        repository=NotificationsRepository(session),
        email_client=email_client,
        catalog=catalog,
        admin_email=settings.admin_email,
        from_name=settings.email_from_name,
    )
