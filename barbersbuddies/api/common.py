# Request plumbing shared by the /api blueprints
from flask import current_app, jsonify, request
from sqlalchemy.orm.exc import StaleDataError
from werkzeug.exceptions import HTTPException

from ..errors import BookingError, ConcurrentUpdateError, ValidationError
from ..extensions import db
from ..services.outbox import dispatch_after_commit
from ..utils.validators import missing_fields


def answer_preflight():
    """CORS preflight: flask-cors adds the headers, the body stays empty."""
    if request.method == "OPTIONS":
        return "", 204
    return None


def get_payload():
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        return {}
    return data


def require_fields(data, names):
    if missing_fields(data, names):
        raise ValidationError("Missing required fields")


def commit_and_dispatch():
    """Commit the request's writes, then try to deliver what they queued."""
    db.session.commit()
    dispatch_after_commit()


def register_error_handlers(bp, action):
    """
    Map errors raised inside ``bp`` to JSON responses.

    ``action`` names the operation in the generic 500 message, e.g.
    "creating booking" -> {"error": "Error creating booking"}.
    """

    @bp.errorhandler(BookingError)
    def handle_booking_error(error):
        db.session.rollback()
        return jsonify(error.to_dict()), error.status_code

    @bp.errorhandler(StaleDataError)
    def handle_stale_data(error):
        db.session.rollback()
        current_app.logger.warning("Concurrent update rejected: %s", error)
        conflict = ConcurrentUpdateError()
        return jsonify(conflict.to_dict()), conflict.status_code

    @bp.errorhandler(Exception)
    def handle_unexpected(error):
        if isinstance(error, HTTPException):
            return error
        db.session.rollback()
        current_app.logger.error("Error %s: %s", action, error, exc_info=error)
        return jsonify({"error": f"Error {action}"}), 500

    bp.before_request(answer_preflight)
    return bp
