"""Core enums used across modules."""

from enum import StrEnum


class BookingStatusEnum(StrEnum):
    """Booking review status."""

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class BookingSourceEnum(StrEnum):
    """Flow a booking request came from."""

    PUBLIC = "public"
    ADMIN = "admin"


class DayMarkerEnum(StrEnum):
    """Calendar highlight for a day with occupied slots."""

    FULL = "full"
    HAS_AVAILABILITY = "has_availability"


class NotificationTemplateEnum(StrEnum):
    """Transactional email templates."""

    NEW_BOOKING = "new_booking"
    BOOKING_STATUS = "booking_status"


class NotificationStatusEnum(StrEnum):
    """Notification delivery status."""

    PENDING = "pending"
    SENT = "sent"
    FAILED = "failed"
