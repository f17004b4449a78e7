"""Admin API router."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query

from app.core.enums import BookingStatusEnum
from app.modules.admin.repository import ReportFilters
from app.modules.admin.schemas import AdminDashboardRead, AdminReportSummaryRead
from app.modules.admin.service import AdminService, get_admin_service
from app.modules.identity.service import get_current_admin
from app.shared.pagination import get_pagination_params
from app.shared.utils import utc_today

router = APIRouter(prefix="/admin", tags=["admin"])


@router.get("/dashboard", response_model=AdminDashboardRead)
async def get_dashboard(
    day: date | None = Query(default=None, alias="date"),
    service: AdminService = Depends(get_admin_service),
    current_admin=Depends(get_current_admin),
) -> AdminDashboardRead:
    """Admin calendar view for one date (today by default)."""
    return await service.get_dashboard(day or utc_today())


@router.get("/reports/summary", response_model=AdminReportSummaryRead)
async def get_report_summary(
    start_date: date | None = Query(default=None),
    end_date: date | None = Query(default=None),
    studio: str | None = Query(default=None),
    status_filter: BookingStatusEnum | None = Query(default=None, alias="status"),
    team_leader_name: str | None = Query(default=None),
    pagination=Depends(get_pagination_params),
    service: AdminService = Depends(get_admin_service),
    current_admin=Depends(get_current_admin),
) -> AdminReportSummaryRead:
    """Booking report with optional date, studio, status and name filters."""
    filters = ReportFilters(
        start_date=start_date,
        end_date=end_date,
        studio=studio,
        status=status_filter,
        team_leader_name=team_leader_name.strip() if team_leader_name else None,
    )
    return await service.get_report_summary(filters, pagination.limit, pagination.offset)
