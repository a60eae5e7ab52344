# Customer reviews and shop replies
from datetime import datetime

from flask import Blueprint, jsonify

from ..booking_state import BookingStatus, parse_status
from ..errors import BookingError, NotFoundError, ValidationError
from ..extensions import db
from ..models import Booking, Notification, Rating, generate_id
from .common import commit_and_dispatch, get_payload, register_error_handlers, require_fields

ratings_bp = Blueprint("ratings", __name__, url_prefix="/api")
register_error_handlers(ratings_bp, "processing rating")


def parse_score(value):
    if isinstance(value, bool):
        raise ValidationError("Rating must be a whole number from 1 to 5")
    try:
        score = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Rating must be a whole number from 1 to 5")
    if score != value and str(score) != str(value).strip():
        raise ValidationError("Rating must be a whole number from 1 to 5")
    if not 1 <= score <= 5:
        raise ValidationError("Rating must be a whole number from 1 to 5")
    return score


@ratings_bp.route("/respondToRating", methods=["POST"])
def respond_to_rating():
    """
    POST /api/respondToRating
    Purpose: Attach the shop's reply to a review and notify the reviewer.
    """
    data = get_payload()
    require_fields(data, ("ratingId", "shopId", "response"))
    if not isinstance(data["response"], str):
        raise ValidationError("response must be text")

    rating = db.session.get(Rating, data["ratingId"])
    if rating is None:
        raise NotFoundError("Rating not found")

    now = datetime.now()
    rating.shop_response = {"content": data["response"], "timestamp": now.isoformat()}

    db.session.add(
        Notification(
            id=generate_id(),
            user_id=rating.user_id or "",
            type="rating_response",
            title="Shop Responded to Your Review",
            message=data["response"][:100] + "...",
            rating_id=rating.id,
            shop_id=data["shopId"],
            read=False,
            created_at=now,
        )
    )

    commit_and_dispatch()
    return jsonify({"message": "Response added successfully"}), 200


@ratings_bp.route("/submitRating", methods=["POST"])
def submit_rating():
    """
    POST /api/submitRating
    Purpose: Customer review of a completed booking.

    Behavior:
    - Score outside 1..5 -> 400
    - Unknown booking -> 404
    - Booking not completed or already rated -> 409
    - Otherwise the rating is stored and linked to the booking; the rating
      trigger folds it into the shop's aggregates.
    """
    data = get_payload()
    require_fields(data, ("bookingId", "rating"))
    score = parse_score(data["rating"])

    booking = db.session.get(Booking, data["bookingId"])
    if booking is None:
        raise NotFoundError("Booking not found")
    if parse_status(booking.status) != BookingStatus.COMPLETED:
        raise BookingError("Only completed bookings can be rated", status_code=409)
    if booking.is_rated:
        raise BookingError("Booking has already been rated", status_code=409)

    now = datetime.now()
    review = data.get("review") or ""
    rating = Rating(
        id=generate_id(),
        shop_id=booking.shop_id,
        booking_id=booking.id,
        user_id=data.get("userId") or booking.user_email,
        user_name=booking.user_name,
        rating=score,
        review=review,
        created_at=now,
    )
    db.session.add(rating)

    booking.is_rated = True
    booking.rating = score
    booking.review = review
    booking.rating_id = rating.id
    booking.rating_submitted_at = now

    commit_and_dispatch()
    return jsonify({"message": "Rating submitted successfully", "ratingId": rating.id}), 200
