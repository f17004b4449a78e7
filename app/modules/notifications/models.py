"""Notifications ORM models."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import DateTime, Enum as SAEnum, ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, BaseModelMixin, enum_values
from app.core.enums import NotificationStatusEnum, NotificationTemplateEnum


class EmailNotification(BaseModelMixin, Base):
    """Delivery log entry for one transactional email."""

    __tablename__ = "email_notifications"

    booking_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("bookings.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    template: Mapped[NotificationTemplateEnum] = mapped_column(
        SAEnum(
            NotificationTemplateEnum,
            name="notification_template_enum",
            native_enum=False,
            values_callable=enum_values,
        ),
        nullable=False,
    )
    recipient_email: Mapped[str] = mapped_column(String(255), nullable=False)
    subject: Mapped[str] = mapped_column(String(255), nullable=False)
    status: Mapped[NotificationStatusEnum] = mapped_column(
        SAEnum(
            NotificationStatusEnum,
            name="notification_status_enum",
            native_enum=False,
            values_callable=enum_values,
        ),
        default=NotificationStatusEnum.PENDING,
        nullable=False,
        index=True,
    )
    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)
    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
