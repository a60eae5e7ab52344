import json

import pytest
from sqlalchemy import select

from barbersbuddies.models import DeletedAccount, NotificationPreference, OutboxEvent, User


def post(client, path, payload):
    return client.post(
        f"/api/{path}",
        data=json.dumps(payload),
        content_type="application/json",
    )


@pytest.mark.users
class TestUpdateFCMToken:
    """Test suite for POST /api/updateFCMToken."""

    def test_update_token(self, client, db_session, make_user):
        make_user()

        response = post(client, "updateFCMToken", {"userId": "customer-1", "token": "device-abc"})

        assert response.status_code == 200
        assert json.loads(response.data)["message"] == "Token updated successfully"
        db_session.expire_all()
        user = db_session.get(User, "customer-1")
        assert user.fcm_token == "device-abc"
        assert user.token_updated_at is not None

    def test_update_token_missing_token(self, client, db_session, make_user):
        make_user()

        response = post(client, "updateFCMToken", {"userId": "customer-1"})

        assert response.status_code == 400

    def test_update_token_unknown_user(self, client, db_session):
        response = post(client, "updateFCMToken", {"userId": "ghost", "token": "device-abc"})

        assert response.status_code == 404
        assert json.loads(response.data)["error"] == "User not found"


@pytest.mark.users
class TestNotificationPreferences:
    """Test suite for POST /api/updateNotificationPreferences."""

    def test_creates_preferences_with_defaults(self, client, db_session):
        response = post(
            client,
            "updateNotificationPreferences",
            {"userEmail": "jo@example.com", "oneWeekBefore": True},
        )

        assert response.status_code == 200
        preferences = json.loads(response.data)["preferences"]
        assert preferences == {
            "enabled": True,
            "oneHourBefore": True,
            "oneDayBefore": True,
            "threeDaysBefore": False,
            "oneWeekBefore": True,
            "onBooking": True,
        }

    def test_updates_existing_preferences(self, client, db_session):
        post(client, "updateNotificationPreferences", {"userEmail": "jo@example.com"})
        post(
            client,
            "updateNotificationPreferences",
            {"userEmail": "jo@example.com", "enabled": False},
        )

        db_session.expire_all()
        rows = db_session.scalars(select(NotificationPreference)).all()
        assert len(rows) == 1
        assert rows[0].enabled is False

    def test_rejects_non_boolean_flag(self, client, db_session):
        response = post(
            client,
            "updateNotificationPreferences",
            {"userEmail": "jo@example.com", "oneDayBefore": "yes"},
        )

        assert response.status_code == 400
        assert db_session.scalars(select(NotificationPreference)).all() == []

    def test_rejects_invalid_email(self, client, db_session):
        response = post(client, "updateNotificationPreferences", {"userEmail": "jo"})

        assert response.status_code == 400


@pytest.mark.users
class TestDeleteAccount:
    """Test suite for POST /api/deleteAccount."""

    def test_delete_account_sends_confirmation(self, client, db_session, make_user, sent_emails):
        make_user(display_name="Jo")
        db_session.add(NotificationPreference(user_email="jo@example.com"))
        db_session.commit()

        response = post(client, "deleteAccount", {"userId": "customer-1"})

        assert response.status_code == 200
        assert json.loads(response.data)["message"] == "Account deleted successfully"

        db_session.expire_all()
        assert db_session.get(User, "customer-1") is None
        assert db_session.get(NotificationPreference, "jo@example.com") is None
        # The deletion record is removed once the confirmation has gone out
        assert db_session.get(DeletedAccount, "customer-1") is None

        assert len(sent_emails) == 1
        assert sent_emails[0]["to"] == ["jo@example.com"]
        assert sent_emails[0]["subject"] == "Account Deletion Confirmation - BarbersBuddies"
        assert sent_emails[0]["from"] == "BarbersBuddies <bookings@barbersbuddies.com>"

    def test_delete_account_turkish(self, client, db_session, make_user, sent_emails):
        make_user(language="tr")

        post(client, "deleteAccount", {"userId": "customer-1"})

        assert sent_emails[0]["subject"] == "Hesap Silme Onayı - BarbersBuddies"

    def test_deletion_record_kept_until_email_delivered(
        self, client, db_session, make_user, failing_email
    ):
        make_user()

        response = post(client, "deleteAccount", {"userId": "customer-1"})

        assert response.status_code == 200
        db_session.expire_all()
        assert db_session.get(DeletedAccount, "customer-1") is not None
        event = db_session.scalars(select(OutboxEvent)).one()
        assert event.status == "pending"

    def test_delete_unknown_account(self, client, db_session, sent_emails):
        response = post(client, "deleteAccount", {"userId": "ghost"})

        assert response.status_code == 404
        assert sent_emails == []
