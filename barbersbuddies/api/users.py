# Device tokens, reminder preferences and account deletion
from datetime import datetime

from flask import Blueprint, jsonify
from sqlalchemy import delete

from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import DeletedAccount, NotificationPreference, User
from ..utils.validators import is_valid_email
from .common import commit_and_dispatch, get_payload, register_error_handlers, require_fields

users_bp = Blueprint("users", __name__, url_prefix="/api")
register_error_handlers(users_bp, "updating account")

# request key -> NotificationPreference column
PREFERENCE_FLAGS = {
    "enabled": "enabled",
    "oneHourBefore": "one_hour_before",
    "oneDayBefore": "one_day_before",
    "threeDaysBefore": "three_days_before",
    "oneWeekBefore": "one_week_before",
    "onBooking": "on_booking",
}


@users_bp.route("/updateFCMToken", methods=["POST"])
def update_fcm_token():
    """
    POST /api/updateFCMToken
    Purpose: Register the push token of a user's device.
    """
    data = get_payload()
    require_fields(data, ("userId", "token"))

    user = db.session.get(User, data["userId"])
    if user is None:
        raise NotFoundError("User not found")

    user.fcm_token = data["token"]
    user.token_updated_at = datetime.now()
    db.session.commit()

    return jsonify({"message": "Token updated successfully"}), 200


@users_bp.route("/updateNotificationPreferences", methods=["POST"])
def update_notification_preferences():
    data = get_payload()
    require_fields(data, ("userEmail",))
    if not is_valid_email(data["userEmail"]):
        raise ValidationError("Invalid email address")

    preference = db.session.get(NotificationPreference, data["userEmail"])
    if preference is None:
        preference = NotificationPreference(user_email=data["userEmail"])
        db.session.add(preference)

    for key, column in PREFERENCE_FLAGS.items():
        if key not in data:
            continue
        if not isinstance(data[key], bool):
            raise ValidationError(f"{key} must be true or false")
        setattr(preference, column, data[key])
    preference.updated_at = datetime.now()
    db.session.commit()

    return jsonify(
        {
            "message": "Notification preferences updated successfully",
            "preferences": {
                key: getattr(preference, column) for key, column in PREFERENCE_FLAGS.items()
            },
        }
    ), 200


@users_bp.route("/deleteAccount", methods=["POST"])
def delete_account():
    """
    POST /api/deleteAccount
    Purpose: Remove a user and send the deletion confirmation.

    The DeletedAccount record is what triggers the confirmation email; it is
    cleaned up once the email has been delivered.
    """
    data = get_payload()
    require_fields(data, ("userId",))

    user = db.session.get(User, data["userId"])
    if user is None:
        raise NotFoundError("User not found")

    db.session.add(
        DeletedAccount(
            id=user.id,
            email=user.email,
            display_name=user.display_name,
            language=data.get("language") or user.language or "en",
            deleted_at=datetime.now(),
        )
    )
    db.session.execute(
        delete(NotificationPreference).where(NotificationPreference.user_email == user.email)
    )
    db.session.delete(user)

    commit_and_dispatch()
    return jsonify({"message": "Account deleted successfully"}), 200
