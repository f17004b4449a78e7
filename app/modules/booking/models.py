"""Booking ORM models."""

from __future__ import annotations

from datetime import date as calendar_date

from sqlalchemy import Date, Enum as SAEnum, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, BaseModelMixin, enum_values
from app.core.enums import BookingStatusEnum


class Booking(BaseModelMixin, Base):
    """Studio booking request or reservation."""

    __tablename__ = "bookings"
    __table_args__ = (
        Index(
            "uq_bookings_active_slot",
            "studio",
            "session",
            "date",
            unique=True,
            postgresql_where=text("status <> 'rejected'"),
        ),
    )

    team_leader_name: Mapped[str] = mapped_column(String(255), nullable=False)
    team_leader_id: Mapped[str] = mapped_column(String(64), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    phone: Mapped[str] = mapped_column(String(64), nullable=False)

    studio: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    session: Mapped[str] = mapped_column(String(128), nullable=False)
    date: Mapped[calendar_date] = mapped_column(Date, nullable=False, index=True)

    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[BookingStatusEnum] = mapped_column(
        SAEnum(
            BookingStatusEnum,
            name="booking_status_enum",
            native_enum=False,
            values_callable=enum_values,
        ),
        default=BookingStatusEnum.PENDING,
        nullable=False,
        index=True,
    )
