import json

import pytest
from sqlalchemy import select

from barbersbuddies.api.ratings import parse_score
from barbersbuddies.errors import ValidationError
from barbersbuddies.models import Booking, Notification, Rating, Shop


def post(client, path, payload):
    return client.post(
        f"/api/{path}",
        data=json.dumps(payload),
        content_type="application/json",
    )


@pytest.mark.ratings
class TestSubmitRating:
    """Test suite for POST /api/submitRating."""

    def test_submit_rating_success(self, client, db_session, sample_shop, make_booking, sent_pushes):
        make_booking(status="completed")

        response = post(
            client,
            "submitRating",
            {"bookingId": "booking-1", "rating": 4, "review": "Great fade"},
        )

        assert response.status_code == 200
        data = json.loads(response.data)
        assert data["message"] == "Rating submitted successfully"

        db_session.expire_all()
        booking = db_session.get(Booking, "booking-1")
        assert booking.is_rated is True
        assert booking.rating == 4
        assert booking.rating_id == data["ratingId"]

        rating = db_session.get(Rating, data["ratingId"])
        assert rating.user_id == "jo@example.com"
        assert rating.review == "Great fade"

        shop = db_session.get(Shop, "shop-1")
        assert shop.average_rating == 4.0
        assert shop.total_ratings == 1
        assert shop.rating_ids == [rating.id]

    def test_rating_open_booking_rejected(self, client, db_session, sample_booking):
        response = post(client, "submitRating", {"bookingId": "booking-1", "rating": 5})

        assert response.status_code == 409

    def test_rating_twice_rejected(self, client, db_session, sample_shop, make_booking):
        make_booking(status="completed")
        post(client, "submitRating", {"bookingId": "booking-1", "rating": 5})

        response = post(client, "submitRating", {"bookingId": "booking-1", "rating": 3})

        assert response.status_code == 409
        assert len(db_session.scalars(select(Rating)).all()) == 1

    def test_rating_unknown_booking(self, client, db_session):
        response = post(client, "submitRating", {"bookingId": "missing", "rating": 5})

        assert response.status_code == 404

    @pytest.mark.parametrize("score", [0, 6, "five", 4.5, True])
    def test_rating_out_of_range(self, client, db_session, sample_shop, make_booking, score):
        make_booking(status="completed")
        response = post(client, "submitRating", {"bookingId": "booking-1", "rating": score})

        assert response.status_code == 400


@pytest.mark.ratings
class TestRespondToRating:
    """Test suite for POST /api/respondToRating."""

    def test_respond_to_rating(self, client, db_session, sample_shop):
        db_session.add(
            Rating(id="rating-1", shop_id="shop-1", user_id="customer-1", rating=5, review="Nice")
        )
        db_session.commit()

        response = post(
            client,
            "respondToRating",
            {"ratingId": "rating-1", "shopId": "shop-1", "response": "Thanks for visiting!"},
        )

        assert response.status_code == 200
        assert json.loads(response.data)["message"] == "Response added successfully"

        db_session.expire_all()
        rating = db_session.get(Rating, "rating-1")
        assert rating.shop_response["content"] == "Thanks for visiting!"
        assert "timestamp" in rating.shop_response

        notification = db_session.scalars(
            select(Notification).where(Notification.type == "rating_response")
        ).one()
        assert notification.user_id == "customer-1"
        assert notification.rating_id == "rating-1"
        assert notification.message == "Thanks for visiting!..."

    def test_respond_to_unknown_rating(self, client, db_session):
        response = post(
            client,
            "respondToRating",
            {"ratingId": "missing", "shopId": "shop-1", "response": "Thanks"},
        )

        assert response.status_code == 404
        assert db_session.scalars(select(Notification)).all() == []

    @pytest.mark.parametrize("reply", [5, ["Thanks"]])
    def test_respond_with_non_text(self, client, db_session, sample_shop, reply):
        db_session.add(Rating(id="rating-1", shop_id="shop-1", user_id="customer-1", rating=5))
        db_session.commit()

        response = post(
            client,
            "respondToRating",
            {"ratingId": "rating-1", "shopId": "shop-1", "response": reply},
        )

        assert response.status_code == 400
        db_session.expire_all()
        assert db_session.get(Rating, "rating-1").shop_response is None

    def test_respond_missing_response(self, client, db_session):
        response = post(client, "respondToRating", {"ratingId": "rating-1", "shopId": "shop-1"})

        assert response.status_code == 400


@pytest.mark.unit
class TestParseScore:
    def test_accepts_numeric_strings(self):
        assert parse_score("3") == 3
        assert parse_score(5) == 5

    def test_rejects_fractions(self):
        with pytest.raises(ValidationError):
            parse_score(2.5)
