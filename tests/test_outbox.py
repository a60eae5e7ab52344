import warnings
from datetime import datetime, timedelta

import pytest
from sqlalchemy import select

from barbersbuddies.models import DeletedAccount, OutboxEvent
from barbersbuddies.services import outbox


def queue_email(session, **kwargs):
    event = outbox.enqueue_email(
        session,
        "booking_created_customer",
        "booking-1",
        "jo@example.com",
        "Booking Confirmation",
        "<p>Thanks</p>",
        **kwargs,
    )
    session.commit()
    return event.id


@pytest.mark.outbox
class TestOutboxDispatch:
    def test_pending_email_is_sent(self, db_session, sent_emails):
        event_id = queue_email(db_session)

        summary = outbox.dispatch_pending()

        assert summary == {"sent": 1, "retrying": 0, "failed": 0}
        event = db_session.get(OutboxEvent, event_id)
        assert event.status == "sent"
        assert event.attempt_count == 1
        assert sent_emails[0]["to"] == ["jo@example.com"]
        assert sent_emails[0]["from"] == "BarbersBuddies <bookings@barbersbuddies.com>"

    def test_sent_events_are_not_resent(self, db_session, sent_emails):
        queue_email(db_session)
        outbox.dispatch_pending()

        summary = outbox.dispatch_pending()

        assert summary == {"sent": 0, "retrying": 0, "failed": 0}
        assert len(sent_emails) == 1

    def test_failure_backs_off(self, db_session, failing_email):
        event_id = queue_email(db_session)
        before = datetime.now()

        summary = outbox.dispatch_pending()

        assert summary == {"sent": 0, "retrying": 1, "failed": 0}
        event = db_session.get(OutboxEvent, event_id)
        assert event.status == "pending"
        assert event.attempt_count == 1
        assert event.last_error == "Resend is unavailable"
        assert event.next_attempt_at >= before + timedelta(seconds=10)

        # Not due yet
        assert outbox.dispatch_pending() == {"sent": 0, "retrying": 0, "failed": 0}

    def test_fails_after_max_attempts(self, db_session, failing_email):
        event_id = queue_email(db_session)
        later = datetime.now() + timedelta(days=1)

        outbox.dispatch_pending()
        outbox.dispatch_pending(now=later)
        summary = outbox.dispatch_pending(now=later)

        assert summary == {"sent": 0, "retrying": 0, "failed": 1}
        event = db_session.get(OutboxEvent, event_id)
        assert event.status == "failed"
        assert event.attempt_count == 3
        assert len(failing_email) == 3

        assert outbox.dispatch_pending(now=later) == {"sent": 0, "retrying": 0, "failed": 0}

    def test_push_delivery(self, db_session, sent_pushes):
        outbox.enqueue_push(
            db_session,
            "message_push",
            "message-1",
            "device-token",
            "New message from Jo",
            "Running late",
            {"type": "message", "bookingId": "booking-1", "messageId": "message-1", "extra": None},
        )
        db_session.commit()

        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            assert outbox.dispatch_pending()["sent"] == 1

        assert not [w for w in caught if issubclass(w.category, DeprecationWarning) and "Message" in str(w.message)]
        assert sent_pushes == [
            {
                "token": "device-token",
                "title": "New message from Jo",
                "body": "Running late",
                "data": {"type": "message", "bookingId": "booking-1", "messageId": "message-1"},
            }
        ]

    def test_on_sent_cleanup(self, db_session, sent_emails):
        with_record = DeletedAccount(id="customer-1", email="jo@example.com", language="en")
        db_session.add(with_record)
        db_session.commit()
        # The trigger queued the confirmation email
        assert outbox.dispatch_pending()["sent"] == 1

        assert db_session.get(DeletedAccount, "customer-1") is None

    def test_dispatch_only_selected_events(self, db_session, sent_emails):
        first = queue_email(db_session)
        queue_email(db_session)

        summary = outbox.dispatch_pending(event_ids=[first])

        assert summary["sent"] == 1
        statuses = sorted(db_session.scalars(select(OutboxEvent.status)))
        assert statuses == ["pending", "sent"]

    def test_dispatch_after_commit_uses_session_queue(self, db_session, sent_emails):
        queue_email(db_session)

        outbox.dispatch_after_commit()

        assert len(sent_emails) == 1
        assert outbox.pop_enqueued_ids() == []


@pytest.mark.unit
class TestBackoff:
    def test_delay_doubles(self):
        assert outbox.backoff_delay(1, 10) == timedelta(seconds=10)
        assert outbox.backoff_delay(2, 10) == timedelta(seconds=20)
        assert outbox.backoff_delay(4, 10) == timedelta(seconds=80)
