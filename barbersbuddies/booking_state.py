"""
Booking status lifecycle.

A booking moves pending -> confirmed -> completed. Open bookings can be
rescheduled or cancelled; completed and cancelled bookings are final.
"""

from enum import Enum

from .errors import InvalidTransitionError, ValidationError


class BookingStatus(str, Enum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"


TRANSITIONS = {
    BookingStatus.PENDING: {
        BookingStatus.CONFIRMED,
        BookingStatus.CANCELLED,
        BookingStatus.RESCHEDULED,
    },
    BookingStatus.CONFIRMED: {
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
        BookingStatus.RESCHEDULED,
    },
    BookingStatus.RESCHEDULED: {
        BookingStatus.CONFIRMED,
        BookingStatus.COMPLETED,
        BookingStatus.CANCELLED,
        BookingStatus.RESCHEDULED,
    },
    BookingStatus.COMPLETED: set(),
    BookingStatus.CANCELLED: set(),
}

# Statuses that hold a shop's time slot
ACTIVE_SLOT_STATUSES = (BookingStatus.CONFIRMED.value, BookingStatus.PENDING.value)


def parse_status(value):
    """Turn a stored or submitted status string into a BookingStatus."""
    if value is None or value == "":
        return BookingStatus.PENDING
    if isinstance(value, BookingStatus):
        return value
    try:
        return BookingStatus(str(value).strip().lower())
    except ValueError:
        raise ValidationError(f"Unknown booking status: {value}")


def is_terminal(status):
    return not TRANSITIONS[parse_status(status)]


def can_transition(current, target):
    return parse_status(target) in TRANSITIONS[parse_status(current)]


def ensure_transition(current, target):
    """Return the target status, or raise if the move is not allowed."""
    current_status = parse_status(current)
    target_status = parse_status(target)
    if target_status not in TRANSITIONS[current_status]:
        raise InvalidTransitionError(current_status.value, target_status.value)
    return target_status
