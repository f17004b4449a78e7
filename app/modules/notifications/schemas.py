"""Notifications schemas."""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from app.core.enums import NotificationStatusEnum, NotificationTemplateEnum


class EmailNotificationRead(BaseModel):
    """Email delivery log entry."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    booking_id: UUID | None
    template: NotificationTemplateEnum
    recipient_email: str
    subject: str
    status: NotificationStatusEnum
    error_message: str | None
    sent_at: datetime | None
    created_at: datetime
