"""Notifications API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query

from app.core.enums import NotificationStatusEnum
from app.modules.identity.service import get_current_admin
from app.modules.notifications.schemas import EmailNotificationRead
from app.modules.notifications.service import NotificationsService, get_notifications_service
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=Page[EmailNotificationRead])
async def list_notifications(
    status: NotificationStatusEnum | None = Query(default=None),
    booking_id: UUID | None = Query(default=None),
    pagination=Depends(get_pagination_params),
    service: NotificationsService = Depends(get_notifications_service),
    current_admin=Depends(get_current_admin),
) -> Page[EmailNotificationRead]:
    """List email delivery log entries."""
    items, total = await service.list_notifications(
        pagination.limit,
        pagination.offset,
        status=status,
        booking_id=booking_id,
    )
    serialized = [EmailNotificationRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
