"""
Database triggers.

A single ``before_flush`` listener looks at what the unit of work is about to
write and adds the derived rows (shop-name index entries, notifications,
rating aggregates, outbox events) to the same flush, so a trigger's output
commits or rolls back together with the change that caused it.
"""

import logging
from contextlib import contextmanager
from datetime import datetime

from sqlalchemy import event, inspect, select
from sqlalchemy.orm import Session

from .models import (
    Booking,
    DeletedAccount,
    Message,
    Notification,
    Rating,
    Shop,
    ShopName,
    User,
    generate_id,
)
from .services import email_templates, outbox
from .services.email_service import email_service
from .utils.validators import is_valid_email

logger = logging.getLogger(__name__)

SUSPEND_KEY = "triggers_suspended"
PREVIEW_LENGTH = 100


def name_search_key(name):
    return (name or "").lower().strip()


def preview(content, length=PREVIEW_LENGTH):
    content = content or ""
    if len(content) > length:
        return content[:length] + "..."
    return content


def _ensure_id(obj):
    if obj.id is None:
        obj.id = generate_id()
    return obj.id


def _changed(obj, attr):
    """Return (old, new) when ``attr`` changed in this flush, else None."""
    history = inspect(obj).attrs[attr].history
    if not history.has_changes():
        return None
    old = history.deleted[0] if history.deleted else None
    new = history.added[0] if history.added else None
    if old == new:
        return None
    return old, new


# Shops -> shop-name index


def on_shop_created(session, shop):
    shop_id = _ensure_id(shop)
    session.add(
        ShopName(
            id=shop_id,
            name=shop.name,
            name_search=name_search_key(shop.name),
            created_at=shop.created_at or datetime.now(),
        )
    )


def on_shop_updated(session, shop):
    change = _changed(shop, "name")
    if change is None:
        return
    entry = session.get(ShopName, shop.id)
    if entry is None:
        on_shop_created(session, shop)
        return
    entry.name = shop.name
    entry.name_search = name_search_key(shop.name)


def on_shop_deleted(session, shop):
    entry = session.get(ShopName, shop.id)
    if entry is not None:
        session.delete(entry)


# Messages -> notification, push and email for the other party


def _find_user(session, reference):
    if not reference:
        return None
    user = session.get(User, reference)
    if user is None and "@" in reference:
        user = session.scalars(select(User).where(User.email == reference)).first()
    return user


def _message_recipient(session, message):
    """Return (notification user id, user record or None, email or None)."""
    if message.sender_type == "customer":
        shop = session.get(Shop, message.shop_id)
        owner = _find_user(session, shop.owner_id) if shop is not None else None
        email = shop.email if shop is not None and shop.email else None
        if email is None and owner is not None:
            email = owner.email
        return message.shop_id, owner, email

    customer = _find_user(session, message.customer_id)
    email = customer.email if customer is not None else None
    if email is None and is_valid_email(message.customer_id):
        email = message.customer_id
    return message.customer_id, customer, email


def on_message_created(session, message):
    message_id = _ensure_id(message)
    sender_name = (
        message.customer_name if message.sender_type == "customer" else message.shop_name
    )
    title = f"New message from {sender_name or ('Customer' if message.sender_type == 'customer' else 'Shop')}"
    recipient_id, recipient, recipient_email = _message_recipient(session, message)
    message.receiver_id = recipient_id

    session.add(
        Notification(
            id=generate_id(),
            user_id=recipient_id,
            type="new_message",
            title=title,
            message=preview(message.content),
            booking_id=message.booking_id,
            shop_id=message.shop_id,
            read=False,
            created_at=datetime.now(),
        )
    )

    if recipient is not None and recipient.fcm_token:
        outbox.enqueue_push(
            session,
            "message_push",
            message_id,
            recipient.fcm_token,
            title,
            message.content[:PREVIEW_LENGTH],
            {"type": "message", "bookingId": message.booking_id, "messageId": message_id},
        )

    if recipient_email:
        subject, html = email_templates.new_message(
            message.booking_id, sender_name, message.content
        )
        outbox.enqueue_email(
            session, "message_email", message_id, recipient_email, subject, html
        )


# Ratings -> shop aggregates and owner push


def apply_rating_to_shop(shop, rating):
    ratings = list(shop.ratings or []) + [rating.rating]
    distribution = {str(score): 0 for score in range(1, 6)}
    for score, count in (shop.rating_distribution or {}).items():
        distribution[str(score)] = count
    distribution[str(rating.rating)] = distribution.get(str(rating.rating), 0) + 1

    shop.ratings = ratings
    shop.average_rating = round(sum(ratings) / len(ratings), 1)
    shop.total_ratings = len(ratings)
    shop.rating_distribution = distribution
    shop.rating_ids = list(shop.rating_ids or []) + [rating.id]
    shop.last_rated_at = rating.created_at or datetime.now()


def on_rating_created(session, rating):
    rating_id = _ensure_id(rating)
    shop = session.get(Shop, rating.shop_id)
    if shop is None:
        logger.warning("Rating %s refers to unknown shop %s", rating_id, rating.shop_id)
        return

    apply_rating_to_shop(shop, rating)

    owner = _find_user(session, shop.owner_id)
    if owner is not None and owner.fcm_token:
        outbox.enqueue_push(
            session,
            "rating_push",
            rating_id,
            owner.fcm_token,
            "New Rating Received",
            f"You received a {rating.rating}-star rating with a review",
            {"type": "rating", "ratingId": rating_id, "shopId": shop.id},
        )


# Bookings -> status change notification


def on_booking_updated(session, booking):
    change = _changed(booking, "status")
    if change is None:
        return

    session.add(
        Notification(
            id=generate_id(),
            user_id=booking.user_email,
            type="status_update",
            title="Appointment Status Updated",
            message=f"Your appointment status has been updated to {booking.status}",
            booking_id=booking.id,
            shop_id=booking.shop_id,
            read=False,
            created_at=datetime.now(),
        )
    )
    subject, html = email_templates.status_update(booking)
    outbox.enqueue_email(
        session, "status_update_email", booking.id, booking.user_email, subject, html
    )


# Account deletion -> confirmation email


def on_account_deleted(session, record):
    subject, html = email_templates.account_deletion(record.display_name, record.language)
    outbox.enqueue_email(
        session,
        "account_deletion_email",
        record.id,
        record.email,
        subject,
        html,
        sender=email_service.from_email,
        on_sent={"delete_deleted_account": record.id},
    )


CREATE_TRIGGERS = (
    (Shop, on_shop_created),
    (Message, on_message_created),
    (Rating, on_rating_created),
    (DeletedAccount, on_account_deleted),
)
UPDATE_TRIGGERS = (
    (Shop, on_shop_updated),
    (Booking, on_booking_updated),
)
DELETE_TRIGGERS = ((Shop, on_shop_deleted),)


def _dispatch(session, objects, triggers):
    for obj in objects:
        for model, handler in triggers:
            if isinstance(obj, model):
                handler(session, obj)


def before_flush(session, flush_context, instances):
    if session.info.get(SUSPEND_KEY):
        return

    new = list(session.new)
    dirty = [obj for obj in session.dirty if session.is_modified(obj)]
    deleted = list(session.deleted)

    _dispatch(session, new, CREATE_TRIGGERS)
    _dispatch(session, dirty, UPDATE_TRIGGERS)
    _dispatch(session, deleted, DELETE_TRIGGERS)


@contextmanager
def triggers_suspended(session):
    """Run a block with triggers off, e.g. for bulk seeding."""
    previous = session.info.get(SUSPEND_KEY, False)
    session.info[SUSPEND_KEY] = True
    try:
        yield session
    finally:
        session.info[SUSPEND_KEY] = previous


def init_triggers(app=None):
    if not event.contains(Session, "before_flush", before_flush):
        event.listen(Session, "before_flush", before_flush)
