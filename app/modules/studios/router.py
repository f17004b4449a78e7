"""Studio catalog API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from app.core.config import get_settings
from app.modules.studios.catalog import StudioCatalog, get_studio_catalog
from app.modules.studios.schemas import StudioCatalogRead, StudioRead
from app.shared.utils import earliest_bookable_date

router = APIRouter(prefix="/studios", tags=["studios"])


@router.get("", response_model=StudioCatalogRead)
async def list_studios(catalog: StudioCatalog = Depends(get_studio_catalog)) -> StudioCatalogRead:
    """Return studio catalog with booking window hints."""
    settings = get_settings()
    return StudioCatalogRead(
        studios=[StudioRead.model_validate(studio) for studio in catalog.studios],
        total_daily_capacity=catalog.total_daily_capacity,
        min_advance_days=settings.booking_min_advance_days,
        earliest_bookable_date=earliest_bookable_date(settings.booking_min_advance_days),
    )


@router.get("/{studio_id}", response_model=StudioRead)
async def get_studio(
    studio_id: str,
    catalog: StudioCatalog = Depends(get_studio_catalog),
) -> StudioRead:
    """Return single studio definition."""
    return StudioRead.model_validate(catalog.get_or_404(studio_id))
