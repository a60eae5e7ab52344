# Shop <-> customer messages about a booking
from datetime import datetime

from flask import Blueprint, jsonify

from ..errors import ValidationError
from ..extensions import db
from ..models import Message, generate_id
from .common import commit_and_dispatch, get_payload, register_error_handlers, require_fields

messaging_bp = Blueprint("messaging", __name__, url_prefix="/api")
register_error_handlers(messaging_bp, "sending message")

SENDER_TYPES = ("customer", "shop")


def appointment_snapshot(details):
    details = details if isinstance(details, dict) else {}
    return {
        "date": details.get("date"),
        "time": details.get("time"),
        "services": details.get("services") or [],
        "totalPrice": details.get("totalPrice") or 0,
    }


@messaging_bp.route("/shopMessage", methods=["POST"])
def shop_message():
    """
    POST /api/shopMessage
    Purpose: Store a message between a shop and a customer.

    Input: bookingId, content, senderId, senderType ('customer' | 'shop'),
    shopId, customerId, customerName, shopName, appointmentDetails.

    Only the message is written here. The message trigger adds the
    recipient's notification and queues the push and email.
    """
    data = get_payload()
    require_fields(data, ("bookingId", "content", "senderId", "shopId", "customerId"))

    if not isinstance(data["content"], str):
        raise ValidationError("content must be text")

    sender_type = data.get("senderType") or "customer"
    if sender_type not in SENDER_TYPES:
        raise ValidationError("senderType must be 'customer' or 'shop'")

    message = Message(
        id=generate_id(),
        booking_id=data["bookingId"],
        shop_id=data["shopId"],
        customer_id=data["customerId"],
        customer_name=data.get("customerName"),
        shop_name=data.get("shopName"),
        content=data["content"],
        sender_id=data["senderId"],
        sender_type=sender_type,
        appointment_details=appointment_snapshot(data.get("appointmentDetails")),
        timestamp=datetime.now(),
        read=False,
    )
    db.session.add(message)
    commit_and_dispatch()

    return jsonify({"success": True, "messageId": message.id}), 200
