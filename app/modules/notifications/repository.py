"""Notifications repository layer."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import NotificationStatusEnum, NotificationTemplateEnum
from app.modules.notifications.models import EmailNotification


class NotificationsRepository:
    """DB operations for the email delivery log."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_notification(
        self,
        booking_id: UUID | None,
        template: NotificationTemplateEnum,
        recipient_email: str,
        subject: str,
    ) -> EmailNotification:
        notification = EmailNotification(
            booking_id=booking_id,
            template=template,
            recipient_email=recipient_email,
            subject=subject,
            status=NotificationStatusEnum.PENDING,
        )
        self.session.add(notification)
        await self.session.flush()
        return notification

    async def set_status(
        self,
        notification: EmailNotification,
        status: NotificationStatusEnum,
        sent_at: datetime | None,
        error_message: str | None = None,
    ) -> EmailNotification:
        notification.status = status
        notification.sent_at = sent_at
        notification.error_message = error_message
        await self.session.flush()
        return notification

    async def list_notifications(
        self,
        limit: int,
        offset: int,
        *,
        status: NotificationStatusEnum | None = None,
        booking_id: UUID | None = None,
    ) -> tuple[list[EmailNotification], int]:
        base_stmt: Select[tuple[EmailNotification]] = select(EmailNotification)
        if status is not None:
            base_stmt = base_stmt.where(EmailNotification.status == status)
        if booking_id is not None:
            base_stmt = base_stmt.where(EmailNotification.booking_id == booking_id)

        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(EmailNotification.created_at.desc()).limit(limit).offset(offset)
        items = list((await self.session.scalars(stmt)).all())
        return items, total
