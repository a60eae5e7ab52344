import pytest

from barbersbuddies.booking_state import (
    BookingStatus,
    can_transition,
    ensure_transition,
    is_terminal,
    parse_status,
)
from barbersbuddies.errors import InvalidTransitionError, ValidationError


@pytest.mark.unit
class TestBookingState:
    def test_parse_status(self):
        assert parse_status("Confirmed ") == BookingStatus.CONFIRMED
        assert parse_status(None) == BookingStatus.PENDING

    def test_parse_unknown_status(self):
        with pytest.raises(ValidationError):
            parse_status("teleported")

    @pytest.mark.parametrize(
        "current,target",
        [
            ("pending", "confirmed"),
            ("confirmed", "completed"),
            ("confirmed", "rescheduled"),
            ("rescheduled", "rescheduled"),
            ("rescheduled", "cancelled"),
        ],
    )
    def test_allowed_transitions(self, current, target):
        assert can_transition(current, target)
        assert ensure_transition(current, target).value == target

    @pytest.mark.parametrize(
        "current,target",
        [
            ("completed", "cancelled"),
            ("cancelled", "confirmed"),
            ("confirmed", "pending"),
            ("completed", "rescheduled"),
        ],
    )
    def test_rejected_transitions(self, current, target):
        assert not can_transition(current, target)
        with pytest.raises(InvalidTransitionError) as excinfo:
            ensure_transition(current, target)
        assert excinfo.value.status_code == 409

    def test_terminal_statuses(self):
        assert is_terminal("completed")
        assert is_terminal("cancelled")
        assert not is_terminal("confirmed")
