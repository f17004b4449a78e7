"""Studio catalog built from settings."""

from __future__ import annotations

from collections.abc import Iterable

from app.core.config import get_settings
from app.modules.studios.schemas import StudioDefinition
from app.shared.exceptions import BusinessRuleException, NotFoundException


class StudioCatalog:
    """Ordered, read-only lookup over configured studios."""

    def __init__(self, studios: Iterable[StudioDefinition]) -> None:
        self._studios = tuple(studios)
        self._by_id = {studio.id: studio for studio in self._studios}

    @property
    def studios(self) -> tuple[StudioDefinition, ...]:
        return self._studios

    @property
    def total_daily_capacity(self) -> int:
        """Sum of every studio's session count."""
        return sum(studio.daily_slots for studio in self._studios)

    def get(self, studio_id: str) -> StudioDefinition | None:
        return self._by_id.get(studio_id)

    def get_or_404(self, studio_id: str) -> StudioDefinition:
        studio = self.get(studio_id)
        if studio is None:
            raise NotFoundException("Studio not found")
        return studio

    def require(self, studio_id: str) -> StudioDefinition:
        studio = self.get(studio_id)
        if studio is None:
            raise BusinessRuleException(f"Unknown studio: {studio_id}")
        return studio

    def require_session(self, studio_id: str, session_label: str) -> StudioDefinition:
        """Validate a (studio, session) pair for a new booking."""
        studio = self.require(studio_id)
        if not studio.has_session(session_label):
            raise BusinessRuleException(
                f"Session '{session_label}' is not offered by {studio.name}",
            )
        return studio

    def studio_name(self, studio_id: str) -> str:
        studio = self.get(studio_id)
        return studio.name if studio is not None else studio_id


def get_studio_catalog() -> StudioCatalog:
    """Dependency provider for the configured catalog."""
    return StudioCatalog(get_settings().studios)
