import uuid
from datetime import datetime

from sqlalchemy import (
    Boolean,
    DateTime,
    Float,
    Index,
    Integer,
    JSON,
    Numeric,
    String,
    Text,
)
from sqlalchemy.orm import declarative_base, mapped_column

Base = declarative_base()
metadata = Base.metadata


def generate_id():
    return uuid.uuid4().hex


class User(Base):
    __tablename__ = "users"
    __table_args__ = (Index("ix_users_email", "email"),)

    id = mapped_column(String(64), primary_key=True, default=generate_id)
    email = mapped_column(String(255), nullable=False)
    display_name = mapped_column(String(255))
    user_type = mapped_column(String(32), nullable=False, default="customer")
    phone_number = mapped_column(String(32))
    language = mapped_column(String(8), nullable=False, default="en")
    fcm_token = mapped_column(String(512))
    token_updated_at = mapped_column(DateTime)
    created_at = mapped_column(DateTime, nullable=False, default=datetime.now)


class Shop(Base):
    __tablename__ = "barber_shops"
    __table_args__ = (Index("ix_barber_shops_owner", "owner_id"),)

    id = mapped_column(String(64), primary_key=True, default=generate_id)
    owner_id = mapped_column(String(64))
    name = mapped_column(String(255), nullable=False, active_history=True)
    email = mapped_column(String(255))
    address = mapped_column(String(255))
    phone_number = mapped_column(String(32))
    unique_url = mapped_column(String(255))
    biography = mapped_column(Text)
    categories = mapped_column(JSON, default=list)
    services = mapped_column(JSON, default=list)
    employees = mapped_column(JSON, default=list)
    availability = mapped_column(JSON, default=dict)

    # Aggregated rating fields, maintained by the rating trigger
    ratings = mapped_column(JSON, default=list)
    average_rating = mapped_column(Float, nullable=False, default=0)
    total_ratings = mapped_column(Integer, nullable=False, default=0)
    rating_distribution = mapped_column(JSON, default=dict)
    rating_ids = mapped_column(JSON, default=list)
    last_rated_at = mapped_column(DateTime)

    created_at = mapped_column(DateTime, nullable=False, default=datetime.now)


class ShopName(Base):
    __tablename__ = "shop_names"
    __table_args__ = (Index("ix_shop_names_search", "name_search"),)

    id = mapped_column(String(64), primary_key=True)
    name = mapped_column(String(255), nullable=False)
    name_search = mapped_column(String(255), nullable=False)
    created_at = mapped_column(DateTime, nullable=False, default=datetime.now)


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        Index("ix_bookings_slot", "shop_id", "selected_date", "selected_time"),
        Index("ix_bookings_status", "status"),
    )

    id = mapped_column(String(64), primary_key=True, default=generate_id)
    shop_id = mapped_column(String(64), nullable=False)
    shop_email = mapped_column(String(255), nullable=False)

    user_name = mapped_column(String(255), nullable=False)
    user_email = mapped_column(String(255), nullable=False)
    user_phone = mapped_column(String(32))

    selected_date = mapped_column(String(10), nullable=False)
    selected_time = mapped_column(String(5), nullable=False)
    selected_services = mapped_column(JSON, nullable=False, default=list)
    custom_service = mapped_column(Text)
    total_price = mapped_column(Numeric(10, 2), nullable=False, default=0)
    notes = mapped_column(Text)

    employee_id = mapped_column(String(64))
    employee_name = mapped_column(String(255))

    status = mapped_column(
        String(16), nullable=False, default="pending", active_history=True
    )
    created_at = mapped_column(DateTime, nullable=False, default=datetime.now)
    last_modified = mapped_column(DateTime)

    cancellation_reason = mapped_column(Text)
    cancelled_by = mapped_column(String(64))
    cancelled_at = mapped_column(DateTime)

    previous_date = mapped_column(String(10))
    previous_time = mapped_column(String(5))
    rescheduled_at = mapped_column(DateTime)
    rescheduled_by = mapped_column(String(255))
    rescheduling_reason = mapped_column(Text)

    is_rated = mapped_column(Boolean, nullable=False, default=False)
    rating = mapped_column(Integer, nullable=False, default=0)
    review = mapped_column(Text)
    rating_id = mapped_column(String(64))
    rating_submitted_at = mapped_column(DateTime)

    version_id = mapped_column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version_id}


class Rating(Base):
    __tablename__ = "ratings"
    __table_args__ = (Index("ix_ratings_shop", "shop_id"),)

    id = mapped_column(String(64), primary_key=True, default=generate_id)
    shop_id = mapped_column(String(64), nullable=False)
    booking_id = mapped_column(String(64))
    user_id = mapped_column(String(255))
    user_name = mapped_column(String(255))
    rating = mapped_column(Integer, nullable=False)
    review = mapped_column(Text)
    shop_response = mapped_column(JSON)
    created_at = mapped_column(DateTime, nullable=False, default=datetime.now)


class Message(Base):
    __tablename__ = "messages"
    __table_args__ = (Index("ix_messages_booking", "booking_id"),)

    id = mapped_column(String(64), primary_key=True, default=generate_id)
    booking_id = mapped_column(String(64), nullable=False)
    shop_id = mapped_column(String(64), nullable=False)
    customer_id = mapped_column(String(255), nullable=False)
    customer_name = mapped_column(String(255))
    shop_name = mapped_column(String(255))
    content = mapped_column(Text, nullable=False)
    sender_id = mapped_column(String(255), nullable=False)
    sender_type = mapped_column(String(16), nullable=False)
    receiver_id = mapped_column(String(255))
    appointment_details = mapped_column(JSON, default=dict)
    timestamp = mapped_column(DateTime, nullable=False, default=datetime.now)
    read = mapped_column(Boolean, nullable=False, default=False)


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user", "user_id"),)

    id = mapped_column(String(64), primary_key=True, default=generate_id)
    user_id = mapped_column(String(255), nullable=False)
    type = mapped_column(String(32), nullable=False)
    title = mapped_column(String(255), nullable=False)
    message = mapped_column(Text, nullable=False)
    booking_id = mapped_column(String(64))
    rating_id = mapped_column(String(64))
    shop_id = mapped_column(String(64))
    read = mapped_column(Boolean, nullable=False, default=False)
    created_at = mapped_column(DateTime, nullable=False, default=datetime.now)


class NotificationPreference(Base):
    __tablename__ = "notification_preferences"

    user_email = mapped_column(String(255), primary_key=True)
    enabled = mapped_column(Boolean, nullable=False, default=True)
    one_hour_before = mapped_column(Boolean, nullable=False, default=True)
    one_day_before = mapped_column(Boolean, nullable=False, default=True)
    three_days_before = mapped_column(Boolean, nullable=False, default=False)
    one_week_before = mapped_column(Boolean, nullable=False, default=False)
    on_booking = mapped_column(Boolean, nullable=False, default=True)
    updated_at = mapped_column(DateTime, nullable=False, default=datetime.now)


class NotificationLog(Base):
    __tablename__ = "notification_logs"
    __table_args__ = (Index("ix_notification_logs_appointment", "appointment_id"),)

    id = mapped_column(String(64), primary_key=True, default=generate_id)
    appointment_id = mapped_column(String(64), nullable=False)
    user_id = mapped_column(String(255), nullable=False)
    type = mapped_column(String(32), nullable=False, default="reminder")
    reminder_window = mapped_column(String(32))
    # "YYYY-MM-DD HH:MM" slot the reminder was sent for
    appointment_at = mapped_column(String(16))
    status = mapped_column(String(16), nullable=False, default="sent")
    time_until_appointment = mapped_column(Float)
    sent_at = mapped_column(DateTime, nullable=False, default=datetime.now)


class DeletedAccount(Base):
    __tablename__ = "deleted_accounts"

    id = mapped_column(String(64), primary_key=True)
    email = mapped_column(String(255), nullable=False)
    display_name = mapped_column(String(255))
    language = mapped_column(String(8), nullable=False, default="en")
    deleted_at = mapped_column(DateTime, nullable=False, default=datetime.now)


class OutboxEvent(Base):
    __tablename__ = "outbox_events"
    __table_args__ = (Index("ix_outbox_events_due", "status", "next_attempt_at"),)

    id = mapped_column(String(64), primary_key=True, default=generate_id)
    channel = mapped_column(String(16), nullable=False)
    event_type = mapped_column(String(64), nullable=False)
    aggregate_id = mapped_column(String(64))
    payload = mapped_column(JSON, nullable=False, default=dict)
    status = mapped_column(String(16), nullable=False, default="pending")
    attempt_count = mapped_column(Integer, nullable=False, default=0)
    next_attempt_at = mapped_column(DateTime, nullable=False, default=datetime.now)
    last_error = mapped_column(Text)
    created_at = mapped_column(DateTime, nullable=False, default=datetime.now)
    updated_at = mapped_column(DateTime, nullable=False, default=datetime.now)
