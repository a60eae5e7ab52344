# Create, edit, cancel and reschedule bookings
from datetime import datetime

from flask import Blueprint, current_app, jsonify
from sqlalchemy import select

from ..booking_state import ACTIVE_SLOT_STATUSES, BookingStatus, ensure_transition, is_terminal
from ..errors import BookingError, NotFoundError, SlotConflictError, ValidationError
from ..extensions import db
from ..models import Booking, Notification, Shop, generate_id
from ..services import email_templates, outbox
from ..utils.validators import (
    compute_total_price,
    is_valid_email,
    is_valid_phone,
    normalize_services,
)
from .common import commit_and_dispatch, get_payload, register_error_handlers, require_fields

bookings_bp = Blueprint("bookings", __name__, url_prefix="/api")
register_error_handlers(bookings_bp, "processing booking")

CREATE_FIELDS = (
    "shopId",
    "shopEmail",
    "userName",
    "userEmail",
    "selectedDate",
    "selectedServices",
    "selectedTime",
)


def _currency():
    return current_app.config.get("CURRENCY_SYMBOL", "€")


def _get_booking(booking_id):
    booking = db.session.get(Booking, booking_id)
    if booking is None:
        raise NotFoundError("Booking not found")
    return booking


@bookings_bp.route("/createBooking", methods=["POST"])
def create_booking():
    """
    POST /api/createBooking
    Purpose: Store a new booking and notify the shop and the customer.

    Behavior:
    - Missing shop/customer/date/time/services -> 400 "Missing required fields"
    - Either email malformed -> 400 "Invalid email address"
    - Otherwise the booking is saved as confirmed with the summed total price
      and two emails are queued (shop summary, customer confirmation).
    """
    data = get_payload()
    require_fields(data, CREATE_FIELDS)

    if not is_valid_email(data["shopEmail"]) or not is_valid_email(data["userEmail"]):
        raise ValidationError("Invalid email address")

    user_phone = data.get("userPhone") or None
    if user_phone and not is_valid_phone(user_phone):
        raise ValidationError("Invalid phone number")

    services = normalize_services(data["selectedServices"])
    now = datetime.now()

    booking = Booking(
        id=generate_id(),
        shop_id=data["shopId"],
        shop_email=data["shopEmail"],
        user_name=data["userName"],
        user_email=data["userEmail"],
        user_phone=user_phone,
        selected_date=data["selectedDate"],
        selected_time=data["selectedTime"],
        selected_services=services,
        custom_service=data.get("customService") or None,
        total_price=compute_total_price(services),
        employee_id=data.get("employeeId"),
        employee_name=data.get("employeeName"),
        status=BookingStatus.CONFIRMED.value,
        created_at=now,
        last_modified=now,
    )
    db.session.add(booking)

    currency = _currency()
    subject, html = email_templates.new_booking_for_shop(booking, currency)
    outbox.enqueue_email(
        db.session, "booking_created_shop", booking.id, booking.shop_email, subject, html
    )
    subject, html = email_templates.booking_confirmation_for_customer(booking, currency)
    outbox.enqueue_email(
        db.session, "booking_created_customer", booking.id, booking.user_email, subject, html
    )

    commit_and_dispatch()
    current_app.logger.info("Booking %s created for shop %s", booking.id, booking.shop_id)
    return jsonify({"message": "Booking created successfully", "bookingId": booking.id}), 200


@bookings_bp.route("/updateBooking", methods=["POST"])
def update_booking():
    """
    POST /api/updateBooking
    Purpose: Change the date, time, services or notes of an open booking.
    """
    data = get_payload()
    require_fields(data, ("bookingId",))
    booking = _get_booking(data["bookingId"])

    if is_terminal(booking.status):
        raise BookingError(
            f"Booking is {booking.status} and can no longer be changed", status_code=409
        )

    require_fields(data, ("date", "time", "services"))
    services = normalize_services(data["services"])

    booking.selected_date = data["date"]
    booking.selected_time = data["time"]
    booking.selected_services = services
    booking.notes = data.get("notes")
    booking.total_price = compute_total_price(services)
    booking.last_modified = datetime.now()

    currency = _currency()
    subject, html = email_templates.booking_updated_for_customer(booking, currency)
    outbox.enqueue_email(
        db.session, "booking_updated_customer", booking.id, booking.user_email, subject, html
    )
    subject, html = email_templates.booking_updated_for_shop(booking, currency)
    outbox.enqueue_email(
        db.session, "booking_updated_shop", booking.id, booking.shop_email, subject, html
    )

    commit_and_dispatch()
    return jsonify({"message": "Booking updated successfully"}), 200


@bookings_bp.route("/cancelBooking", methods=["POST"])
def cancel_booking():
    """
    POST /api/cancelBooking
    Purpose: Cancel a booking with a reason.

    Unknown booking ids return 404 without writing anything.
    """
    data = get_payload()
    require_fields(data, ("bookingId",))
    booking = _get_booking(data["bookingId"])

    target = ensure_transition(booking.status, BookingStatus.CANCELLED)
    now = datetime.now()
    booking.status = target.value
    booking.cancellation_reason = data.get("reason")
    booking.cancelled_by = data.get("cancelledBy") or "customer"
    booking.cancelled_at = now
    booking.last_modified = now

    subject, html = email_templates.booking_cancelled_for_customer(booking)
    outbox.enqueue_email(
        db.session, "booking_cancelled_customer", booking.id, booking.user_email, subject, html
    )
    subject, html = email_templates.booking_cancelled_for_shop(booking)
    outbox.enqueue_email(
        db.session, "booking_cancelled_shop", booking.id, booking.shop_email, subject, html
    )

    commit_and_dispatch()
    return jsonify({"message": "Booking cancelled successfully"}), 200


def slot_taken(shop_id, date, time, exclude_id=None):
    """True when another booking holds the shop's slot at date/time."""
    stmt = select(Booking.id).where(
        Booking.shop_id == shop_id,
        Booking.selected_date == date,
        Booking.selected_time == time,
        Booking.status.in_(ACTIVE_SLOT_STATUSES),
    )
    if exclude_id is not None:
        stmt = stmt.where(Booking.id != exclude_id)
    return db.session.scalars(stmt.limit(1)).first() is not None


@bookings_bp.route("/rescheduleAppointment", methods=["POST"])
def reschedule_appointment():
    """
    POST /api/rescheduleAppointment
    Purpose: Move a booking to a new date and time.

    Behavior:
    - Unknown booking or shop -> 404
    - Another confirmed/pending booking of the shop at the new slot -> 400
    - Otherwise the previous slot is kept on the booking, the customer gets a
      notification and both parties get an email.
    """
    data = get_payload()
    require_fields(data, ("bookingId", "newDate", "newTime"))
    booking = _get_booking(data["bookingId"])

    shop = db.session.get(Shop, booking.shop_id)
    if shop is None:
        raise NotFoundError("Shop not found")

    new_date, new_time = data["newDate"], data["newTime"]
    if slot_taken(booking.shop_id, new_date, new_time, exclude_id=booking.id):
        raise SlotConflictError()

    target = ensure_transition(booking.status, BookingStatus.RESCHEDULED)
    now = datetime.now()
    booking.previous_date = booking.selected_date
    booking.previous_time = booking.selected_time
    booking.selected_date = new_date
    booking.selected_time = new_time
    booking.rescheduled_at = now
    booking.rescheduled_by = data.get("userId")
    booking.rescheduling_reason = data.get("reason")
    booking.status = target.value
    booking.last_modified = now

    db.session.add(
        Notification(
            id=generate_id(),
            user_id=booking.user_email,
            type="reschedule",
            title="Appointment Rescheduled",
            message=f"Your appointment has been rescheduled to {new_date} at {new_time}",
            booking_id=booking.id,
            shop_id=booking.shop_id,
            read=False,
            created_at=now,
        )
    )

    subject, html = email_templates.booking_rescheduled_for_customer(booking, shop.name)
    outbox.enqueue_email(
        db.session, "booking_rescheduled_customer", booking.id, booking.user_email, subject, html
    )
    subject, html = email_templates.booking_rescheduled_for_shop(booking)
    outbox.enqueue_email(
        db.session, "booking_rescheduled_shop", booking.id, booking.shop_email, subject, html
    )

    commit_and_dispatch()
    return jsonify({"message": "Appointment rescheduled successfully"}), 200


@bookings_bp.route("/updateBookingStatus", methods=["POST"])
def update_booking_status():
    """
    POST /api/updateBookingStatus
    Purpose: Shop dashboard status change (confirm, complete, ...).
    The status trigger writes the customer notification and email.
    """
    data = get_payload()
    require_fields(data, ("bookingId", "status"))
    booking = _get_booking(data["bookingId"])

    target = ensure_transition(booking.status, data["status"])
    booking.status = target.value
    booking.last_modified = datetime.now()

    commit_and_dispatch()
    return jsonify({"message": "Booking status updated successfully", "status": target.value}), 200
