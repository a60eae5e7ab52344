import json
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from barbersbuddies.models import NotificationLog, NotificationPreference
from barbersbuddies.services.reminders import hours_until, matching_windows, send_appointment_reminders

# sample_booking is on 2026-01-10 at 10:00
APPOINTMENT = datetime(2026, 1, 10, 10, 0)


@pytest.fixture
def preference(db_session):
    pref = NotificationPreference(user_email="jo@example.com")
    db_session.add(pref)
    db_session.commit()
    return pref


@pytest.mark.reminders
class TestAppointmentReminders:
    def test_one_day_reminder(self, db_session, sample_booking, preference, sent_emails):
        sent = send_appointment_reminders(now=APPOINTMENT - timedelta(hours=24))

        assert sent == 1
        assert len(sent_emails) == 1
        assert sent_emails[0]["subject"] == "Upcoming Appointment Reminder - Test Shop"
        assert sent_emails[0]["from"] == "BarbersBuddies <reminders@barbersbuddies.com>"

        log = db_session.scalars(select(NotificationLog)).one()
        assert log.appointment_id == "booking-1"
        assert log.reminder_window == "one_day"
        assert log.time_until_appointment == 24.0

    def test_reminder_sent_once_per_window(self, db_session, sample_booking, preference, sent_emails):
        send_appointment_reminders(now=APPOINTMENT - timedelta(hours=24))
        sent = send_appointment_reminders(now=APPOINTMENT - timedelta(hours=23, minutes=30))

        assert sent == 0
        assert len(sent_emails) == 1

    def test_window_lower_bound_is_exclusive(self, db_session, sample_booking, preference, sent_emails):
        sent = send_appointment_reminders(now=APPOINTMENT - timedelta(hours=23))

        assert sent == 0
        assert sent_emails == []

    def test_one_hour_reminder(self, db_session, sample_booking, preference, sent_emails):
        assert send_appointment_reminders(now=APPOINTMENT - timedelta(minutes=30)) == 1

        log = db_session.scalars(select(NotificationLog)).one()
        assert log.reminder_window == "one_hour"

    def test_disabled_window_is_skipped(self, db_session, sample_booking, preference, sent_emails):
        sent = send_appointment_reminders(now=APPOINTMENT - timedelta(hours=72))

        assert sent == 0

    def test_enabled_week_window(self, db_session, sample_booking, preference, sent_emails):
        preference.one_week_before = True
        db_session.commit()

        assert send_appointment_reminders(now=APPOINTMENT - timedelta(hours=168)) == 1

    def test_preferences_disabled(self, db_session, sample_booking, preference, sent_emails):
        preference.enabled = False
        db_session.commit()

        assert send_appointment_reminders(now=APPOINTMENT - timedelta(hours=24)) == 0

    def test_no_preferences_no_reminder(self, db_session, sample_booking, sent_emails):
        assert send_appointment_reminders(now=APPOINTMENT - timedelta(hours=24)) == 0

    def test_only_confirmed_bookings(self, db_session, sample_shop, make_booking, preference, sent_emails):
        make_booking(status="pending")

        assert send_appointment_reminders(now=APPOINTMENT - timedelta(hours=24)) == 0

    def test_unparseable_date_is_skipped(self, db_session, sample_shop, make_booking, preference, sent_emails):
        make_booking(selected_date="next tuesday")
        make_booking(id="booking-2")

        sent = send_appointment_reminders(now=APPOINTMENT - timedelta(hours=24))

        assert sent == 1
        assert sent_emails[0]["to"] == ["jo@example.com"]


@pytest.mark.unit
class TestReminderWindows:
    def test_matching_windows(self):
        pref = NotificationPreference(
            enabled=True,
            one_hour_before=True,
            one_day_before=True,
            three_days_before=True,
            one_week_before=True,
        )

        assert matching_windows(0.5, pref) == ["one_hour"]
        assert matching_windows(24.0, pref) == ["one_day"]
        assert matching_windows(71.5, pref) == ["three_days"]
        assert matching_windows(167.01, pref) == ["one_week"]
        assert matching_windows(0, pref) == []
        assert matching_windows(-2, pref) == []
        assert matching_windows(None, pref) == []

    def test_hours_until(self, make_booking, sample_shop):
        booking = make_booking()

        assert hours_until(booking, APPOINTMENT - timedelta(hours=3)) == 3.0


@pytest.mark.reminders
class TestRemindersAfterSlotChange:
    """A booking moved to a new slot is reminded again for that slot."""

    def post(self, client, path, payload):
        return client.post(f"/api/{path}", data=json.dumps(payload), content_type="application/json")

    def test_updated_booking_gets_new_reminder(
        self, client, db_session, sample_booking, preference, sent_emails
    ):
        assert send_appointment_reminders(now=APPOINTMENT - timedelta(hours=24)) == 1

        response = self.post(
            client,
            "updateBooking",
            {
                "bookingId": "booking-1",
                "date": "2026-01-20",
                "time": "10:00",
                "services": [{"name": "Cut", "price": 25}],
            },
        )
        assert response.status_code == 200
        sent_emails.clear()

        sent = send_appointment_reminders(now=datetime(2026, 1, 19, 10, 0))

        assert sent == 1
        assert len(sent_emails) == 1
        slots = sorted(db_session.scalars(select(NotificationLog.appointment_at)))
        assert slots == ["2026-01-10 10:00", "2026-01-20 10:00"]

    def test_rescheduled_then_confirmed_gets_new_reminder(
        self, client, db_session, sample_booking, preference, sent_emails
    ):
        send_appointment_reminders(now=APPOINTMENT - timedelta(hours=24))
        self.post(
            client,
            "rescheduleAppointment",
            {"bookingId": "booking-1", "newDate": "2026-01-15", "newTime": "09:30"},
        )
        self.post(client, "updateBookingStatus", {"bookingId": "booking-1", "status": "confirmed"})

        assert send_appointment_reminders(now=datetime(2026, 1, 14, 9, 30)) == 1

    def test_same_slot_still_deduplicated(self, client, db_session, sample_booking, preference, sent_emails):
        send_appointment_reminders(now=APPOINTMENT - timedelta(hours=24))
        self.post(
            client,
            "updateBooking",
            {
                "bookingId": "booking-1",
                "date": "2026-01-10",
                "time": "10:00",
                "services": [{"name": "Fade", "price": 30}],
            },
        )

        assert send_appointment_reminders(now=APPOINTMENT - timedelta(hours=23, minutes=30)) == 0
