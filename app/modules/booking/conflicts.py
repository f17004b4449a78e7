"""Slot conflict rules for new bookings."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date
from typing import Protocol

from app.modules.studios.catalog import StudioCatalog
from app.modules.studios.schemas import StudioDefinition

logger = logging.getLogger(__name__)

FULL_DAY_BLOCKED_MESSAGE = "cannot book full day — existing bookings present"
FULL_DAY_TAKEN_MESSAGE = "full day already booked"
SESSION_TAKEN_MESSAGE = "session already booked"


@dataclass(frozen=True, slots=True)
class ConflictCheckResult:
    has_conflict: bool
    message: str | None = None


NO_CONFLICT = ConflictCheckResult(has_conflict=False)


class ActiveSessionsSource(Protocol):
    async def list_active_sessions(self, studio: str, day: date) -> Sequence[str]:
        """Session labels of non-rejected bookings for the studio and day."""


def detect_conflict(
    studio: StudioDefinition,
    candidate_session: str,
    active_sessions: Sequence[str],
) -> ConflictCheckResult:
    """Apply full-day exclusivity and exact-session rules.

    Rules are evaluated in order: a full-day candidate needs an empty day,
    an existing full-day booking blocks everything, and otherwise only an
    identical label collides.
    """
    if studio.is_exclusive_full_day(candidate_session) and active_sessions:
        return ConflictCheckResult(has_conflict=True, message=FULL_DAY_BLOCKED_MESSAGE)

    if any(studio.is_exclusive_full_day(label) for label in active_sessions):
        return ConflictCheckResult(has_conflict=True, message=FULL_DAY_TAKEN_MESSAGE)

    if candidate_session in active_sessions:
        return ConflictCheckResult(has_conflict=True, message=SESSION_TAKEN_MESSAGE)

    return NO_CONFLICT


class ConflictChecker:
    """Decide whether a (studio, session, date) slot may be booked."""

    def __init__(self, source: ActiveSessionsSource, catalog: StudioCatalog) -> None:
        self.source = source
        self.catalog = catalog

    async def check_conflict(self, studio_id: str, session: str, day: date) -> ConflictCheckResult:
        """Read-only check; storage errors propagate to the caller."""
        studio = self.catalog.require_session(studio_id, session)
        active_sessions = list(await self.source.list_active_sessions(studio_id, day))
        result = detect_conflict(studio, session, active_sessions)
        if result.has_conflict:
            logger.info(
                "Slot conflict for studio=%s session=%s date=%s: %s",
                studio_id,
                session,
                day.isoformat(),
                result.message,
            )
        return result
