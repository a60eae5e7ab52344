"""
Pytest configuration and shared fixtures for the BarbersBuddies backend tests.
"""

from datetime import datetime
from decimal import Decimal
from itertools import count

import pytest
import resend
from firebase_admin import messaging
from flask import Flask

from main import create_app
from barbersbuddies.config import TestingConfig, is_production_database
from barbersbuddies.extensions import db as database
from barbersbuddies.models import Base, Booking, Shop, User


@pytest.fixture(scope="session")
def app():
    """Create and configure a test app instance."""
    if is_production_database(TestingConfig.SQLALCHEMY_DATABASE_URI):
        pytest.exit("DATABASE_TEST_URL appears to be a production database")

    app = create_app(TestingConfig)
    yield app


@pytest.fixture
def db_session(app: Flask):
    """Fresh tables for every test, dropped afterwards."""
    with app.app_context():
        Base.metadata.create_all(bind=database.engine)

        yield database.session

        database.session.rollback()
        database.session.remove()
        Base.metadata.drop_all(bind=database.engine)


@pytest.fixture
def client(app, db_session):
    return app.test_client()


@pytest.fixture
def runner(app, db_session):
    return app.test_cli_runner()


@pytest.fixture
def sent_emails(monkeypatch):
    """Record every email handed to Resend instead of sending it."""
    sent = []
    ids = count(1)

    def fake_send(params):
        sent.append(params)
        return {"id": f"email-{next(ids)}"}

    monkeypatch.setattr(resend.Emails, "send", fake_send)
    return sent


@pytest.fixture
def sent_pushes(monkeypatch):
    """Record every FCM message instead of sending it."""
    sent = []

    def fake_send(message, dry_run=False, app=None):
        sent.append(
            {
                "token": message.fid,
                "title": message.notification.title,
                "body": message.notification.body,
                "data": message.data,
            }
        )
        return f"projects/test/messages/{len(sent)}"

    monkeypatch.setattr(messaging, "send", fake_send)
    return sent


@pytest.fixture
def failing_email(monkeypatch):
    """Make Resend fail every call."""
    calls = []

    def fake_send(params):
        calls.append(params)
        raise RuntimeError("Resend is unavailable")

    monkeypatch.setattr(resend.Emails, "send", fake_send)
    return calls


@pytest.fixture
def make_user(db_session):
    def _make_user(**overrides):
        data = {
            "id": "customer-1",
            "email": "jo@example.com",
            "display_name": "Jo Customer",
            "user_type": "customer",
            "language": "en",
        }
        data.update(overrides)
        user = User(**data)
        db_session.add(user)
        db_session.commit()
        return user

    return _make_user


@pytest.fixture
def make_shop(db_session):
    def _make_shop(**overrides):
        data = {
            "id": "shop-1",
            "owner_id": "owner-1",
            "name": "Test Shop",
            "email": "shop@example.com",
            "address": "123 Main Street, Berlin",
            "services": [{"name": "Cut", "price": 25, "duration": 30}],
            "ratings": [],
            "rating_distribution": {},
            "rating_ids": [],
        }
        data.update(overrides)
        shop = Shop(**data)
        db_session.add(shop)
        db_session.commit()
        return shop

    return _make_shop


@pytest.fixture
def make_booking(db_session):
    def _make_booking(**overrides):
        data = {
            "id": "booking-1",
            "shop_id": "shop-1",
            "shop_email": "shop@example.com",
            "user_name": "Jo",
            "user_email": "jo@example.com",
            "selected_date": "2026-01-10",
            "selected_time": "10:00",
            "selected_services": [
                {"name": "Cut", "price": 25.0},
                {"name": "Beard", "price": 15.0},
            ],
            "total_price": Decimal("40.00"),
            "status": "confirmed",
            "created_at": datetime(2026, 1, 1, 9, 0),
        }
        data.update(overrides)
        booking = Booking(**data)
        db_session.add(booking)
        db_session.commit()
        return booking

    return _make_booking


@pytest.fixture
def sample_shop(make_shop):
    return make_shop()


@pytest.fixture
def sample_booking(sample_shop, make_booking):
    return make_booking()


@pytest.fixture
def booking_payload():
    """The createBooking request from the product walkthrough."""
    return {
        "shopId": "s1",
        "shopEmail": "a@b.com",
        "userName": "Jo",
        "userEmail": "jo@x.com",
        "selectedDate": "2026-01-10",
        "selectedServices": [
            {"name": "Cut", "price": 25},
            {"name": "Beard", "price": 15},
        ],
        "selectedTime": "10:00",
    }
