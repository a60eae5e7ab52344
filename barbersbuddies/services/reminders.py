"""
Appointment reminders.

Runs hourly from the scheduler. A confirmed booking gets a reminder email
when the hours left until the appointment fall inside one of the windows
the customer enabled in their notification preferences.
"""

import logging
from datetime import datetime

from flask import current_app
from sqlalchemy import select

from ..extensions import db
from ..models import Booking, NotificationLog, NotificationPreference, Shop, generate_id
from . import email_templates, outbox
from .email_service import email_service

logger = logging.getLogger(__name__)

# name -> (preference flag, lower bound exclusive, upper bound inclusive)
WINDOWS = {
    "one_hour": ("one_hour_before", 0, 1),
    "one_day": ("one_day_before", 23, 24),
    "three_days": ("three_days_before", 71, 72),
    "one_week": ("one_week_before", 167, 168),
}


def appointment_datetime(booking):
    return datetime.strptime(
        f"{booking.selected_date} {booking.selected_time}", "%Y-%m-%d %H:%M"
    )


def hours_until(booking, now):
    """Hours from ``now`` until the appointment, or None if unparseable."""
    try:
        starts_at = appointment_datetime(booking)
    except (TypeError, ValueError):
        logger.warning(
            "Skipping booking %s with unparseable date/time %r %r",
            booking.id,
            booking.selected_date,
            booking.selected_time,
        )
        return None
    return (starts_at - now).total_seconds() / 3600


def matching_windows(hours, preference):
    if hours is None or preference is None or not preference.enabled:
        return []
    matched = []
    for name, (flag, lower, upper) in WINDOWS.items():
        if getattr(preference, flag) and lower < hours <= upper:
            matched.append(name)
    return matched


def slot_key(booking):
    return f"{booking.selected_date} {booking.selected_time}"


def _logged_windows(session, booking):
    """Windows already reminded for the booking's current slot."""
    rows = session.scalars(
        select(NotificationLog.reminder_window).where(
            NotificationLog.appointment_id == booking.id,
            NotificationLog.appointment_at == slot_key(booking),
            NotificationLog.type == "reminder",
        )
    )
    return set(rows)


def send_appointment_reminders(now=None, session=None):
    """Queue due reminders. Returns the number of reminders sent."""
    session = session or db.session
    now = now or datetime.now()
    currency = current_app.config.get("CURRENCY_SYMBOL", "€")

    bookings = session.scalars(select(Booking).where(Booking.status == "confirmed")).all()
    preferences = {
        pref.user_email: pref
        for pref in session.scalars(
            select(NotificationPreference).where(NotificationPreference.enabled.is_(True))
        )
    }

    sent = 0
    shops = {}
    for booking in bookings:
        preference = preferences.get(booking.user_email)
        if preference is None:
            continue

        hours = hours_until(booking, now)
        windows = matching_windows(hours, preference)
        if not windows:
            continue

        already_sent = _logged_windows(session, booking)
        windows = [window for window in windows if window not in already_sent]
        if not windows:
            continue

        if booking.shop_id not in shops:
            shops[booking.shop_id] = session.get(Shop, booking.shop_id)
        shop = shops[booking.shop_id]
        shop_name = shop.name if shop is not None else "your barber shop"
        shop_address = shop.address if shop is not None else None

        subject, html = email_templates.appointment_reminder(
            booking, shop_name, shop_address, currency
        )
        outbox.enqueue_email(
            session,
            "appointment_reminder",
            booking.id,
            booking.user_email,
            subject,
            html,
            sender=email_service.reminder_email,
        )
        for window in windows:
            session.add(
                NotificationLog(
                    id=generate_id(),
                    appointment_id=booking.id,
                    user_id=booking.user_email,
                    type="reminder",
                    reminder_window=window,
                    appointment_at=slot_key(booking),
                    status="sent",
                    time_until_appointment=hours,
                    sent_at=now,
                )
            )
        sent += 1

    session.commit()
    if sent:
        outbox.dispatch_after_commit()
    return sent
