"""
Notification outbox.

State changes and the emails/pushes they cause are written in the same
transaction as OutboxEvent rows. Delivery happens afterwards: right after the
request commits (best effort) and again from the scheduler, with exponential
backoff until the event is sent or runs out of attempts.
"""

import logging
from datetime import datetime, timedelta

from flask import current_app
from sqlalchemy import select

from ..extensions import db
from ..models import DeletedAccount, OutboxEvent, generate_id
from .email_service import email_service
from .push_service import push_service

logger = logging.getLogger(__name__)

PENDING = "pending"
SENT = "sent"
FAILED = "failed"

EMAIL = "email"
PUSH = "push"

ENQUEUED_KEY = "outbox_enqueued_ids"


def _new_event(channel, event_type, aggregate_id, payload):
    now = datetime.now()
    return OutboxEvent(
        id=generate_id(),
        channel=channel,
        event_type=event_type,
        aggregate_id=aggregate_id,
        payload=payload,
        status=PENDING,
        attempt_count=0,
        next_attempt_at=now,
        created_at=now,
        updated_at=now,
    )


def _track(session, event):
    session.info.setdefault(ENQUEUED_KEY, []).append(event.id)


def pop_enqueued_ids(session=None):
    """Ids of events queued in this session since the last call."""
    session = session or db.session
    return session.info.pop(ENQUEUED_KEY, [])


def enqueue_email(
    session, event_type, aggregate_id, to, subject, html, sender=None, on_sent=None
):
    """Queue an email in the caller's transaction."""
    payload = {"params": email_service.build_params(to, subject, html, sender)}
    if on_sent:
        payload["on_sent"] = on_sent
    event = _new_event(EMAIL, event_type, aggregate_id, payload)
    session.add(event)
    _track(session, event)
    return event


def enqueue_push(session, event_type, aggregate_id, token, title, body, data=None):
    """Queue a push notification in the caller's transaction."""
    payload = {"token": token, "title": title, "body": body, "data": data or {}}
    event = _new_event(PUSH, event_type, aggregate_id, payload)
    session.add(event)
    _track(session, event)
    return event


def backoff_delay(attempt_count, base_seconds):
    return timedelta(seconds=max(base_seconds, 1) * (2 ** max(attempt_count - 1, 0)))


def deliver(event):
    payload = event.payload or {}
    if event.channel == EMAIL:
        return email_service.send(payload["params"])
    if event.channel == PUSH:
        return push_service.send(
            payload["token"], payload["title"], payload["body"], payload.get("data")
        )
    raise ValueError(f"Unknown outbox channel: {event.channel}")


def _run_on_sent(session, event):
    on_sent = (event.payload or {}).get("on_sent") or {}
    deleted_account_id = on_sent.get("delete_deleted_account")
    if deleted_account_id:
        record = session.get(DeletedAccount, deleted_account_id)
        if record is not None:
            session.delete(record)


def fetch_due(session, event_ids=None, limit=None, now=None):
    now = now or datetime.now()
    stmt = (
        select(OutboxEvent)
        .where(OutboxEvent.status == PENDING, OutboxEvent.next_attempt_at <= now)
        .order_by(OutboxEvent.next_attempt_at.asc(), OutboxEvent.created_at.asc())
    )
    if event_ids is not None:
        if not event_ids:
            return []
        stmt = stmt.where(OutboxEvent.id.in_(list(event_ids)))
    if limit:
        stmt = stmt.limit(limit)
    return list(session.scalars(stmt))


def dispatch_pending(session=None, event_ids=None, limit=None, now=None):
    """
    Deliver due pending events.

    Returns a summary dict with the number of events sent, scheduled for a
    retry, and failed permanently.
    """
    session = session or db.session
    config = current_app.config
    max_attempts = config.get("OUTBOX_MAX_ATTEMPTS", 5)
    backoff_seconds = config.get("OUTBOX_BACKOFF_SECONDS", 30)
    if limit is None:
        limit = config.get("OUTBOX_BATCH_SIZE", 100)

    summary = {"sent": 0, "retrying": 0, "failed": 0}
    events = fetch_due(session, event_ids=event_ids, limit=limit, now=now)

    for event in events:
        event_id = event.id
        attempt = (event.attempt_count or 0) + 1
        try:
            deliver(event)
        except Exception as e:
            current = datetime.now()
            event.attempt_count = attempt
            event.last_error = str(e)[:1000]
            event.updated_at = current
            if attempt >= max_attempts:
                event.status = FAILED
                summary["failed"] += 1
                logger.error(
                    "Outbox event %s (%s) failed permanently after %s attempts: %s",
                    event_id,
                    event.event_type,
                    attempt,
                    e,
                )
            else:
                event.next_attempt_at = current + backoff_delay(attempt, backoff_seconds)
                summary["retrying"] += 1
                logger.warning(
                    "Outbox event %s (%s) attempt %s failed, retrying at %s: %s",
                    event_id,
                    event.event_type,
                    attempt,
                    event.next_attempt_at,
                    e,
                )
            session.commit()
            continue

        event.attempt_count = attempt
        event.status = SENT
        event.last_error = None
        event.updated_at = datetime.now()
        _run_on_sent(session, event)
        session.commit()
        summary["sent"] += 1

    return summary


def dispatch_after_commit(event_ids=None):
    """Best-effort immediate delivery for events a request just committed."""
    if event_ids is None:
        event_ids = pop_enqueued_ids()
    if not event_ids:
        return None
    try:
        return dispatch_pending(event_ids=event_ids)
    except Exception as e:
        db.session.rollback()
        logger.error("Immediate outbox dispatch failed, scheduler will retry: %s", e)
        return None
