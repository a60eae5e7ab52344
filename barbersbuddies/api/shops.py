# Owner dashboard shop writes and name search
from datetime import datetime

from flask import Blueprint, jsonify
from sqlalchemy import select

from ..errors import NotFoundError, ValidationError
from ..extensions import db
from ..models import Shop, ShopName, generate_id
from ..triggers import name_search_key
from ..utils.validators import is_valid_email, is_valid_phone, normalize_services
from .common import commit_and_dispatch, get_payload, register_error_handlers, require_fields

shops_bp = Blueprint("shops", __name__, url_prefix="/api")
register_error_handlers(shops_bp, "processing shop")

SEARCH_LIMIT = 20

# request key -> Shop column, for the plain text fields
TEXT_FIELDS = {
    "name": "name",
    "email": "email",
    "address": "address",
    "phoneNumber": "phone_number",
    "uniqueUrl": "unique_url",
    "biography": "biography",
}
LIST_FIELDS = {
    "categories": "categories",
    "employees": "employees",
}


def _apply_fields(shop, data):
    if "email" in data and not is_valid_email(data["email"]):
        raise ValidationError("Invalid email address")
    if data.get("phoneNumber") and not is_valid_phone(data["phoneNumber"]):
        raise ValidationError("Invalid phone number")
    if "name" in data and not (data["name"] or "").strip():
        raise ValidationError("Shop name cannot be empty")

    for key, column in TEXT_FIELDS.items():
        if key in data:
            setattr(shop, column, data[key])
    for key, column in LIST_FIELDS.items():
        if key in data:
            if not isinstance(data[key], list):
                raise ValidationError(f"{key} must be a list")
            setattr(shop, column, data[key])
    if "services" in data:
        shop.services = normalize_services(data["services"])
    if "availability" in data:
        if not isinstance(data["availability"], dict):
            raise ValidationError("availability must be an object")
        shop.availability = data["availability"]


def shop_to_dict(shop):
    return {
        "id": shop.id,
        "ownerId": shop.owner_id,
        "name": shop.name,
        "email": shop.email,
        "address": shop.address,
        "phoneNumber": shop.phone_number,
        "averageRating": shop.average_rating,
        "totalRatings": shop.total_ratings,
    }


@shops_bp.route("/createShop", methods=["POST"])
def create_shop():
    data = get_payload()
    require_fields(data, ("ownerId", "name", "email"))

    shop = Shop(
        id=generate_id(),
        owner_id=data["ownerId"],
        categories=[],
        services=[],
        employees=[],
        availability={},
        ratings=[],
        average_rating=0,
        total_ratings=0,
        rating_distribution={},
        rating_ids=[],
        created_at=datetime.now(),
    )
    _apply_fields(shop, data)
    db.session.add(shop)
    commit_and_dispatch()

    return jsonify({"message": "Shop created successfully", "shopId": shop.id}), 200


@shops_bp.route("/updateShop", methods=["POST"])
def update_shop():
    data = get_payload()
    require_fields(data, ("shopId",))

    shop = db.session.get(Shop, data["shopId"])
    if shop is None:
        raise NotFoundError("Shop not found")

    _apply_fields(shop, data)
    commit_and_dispatch()

    return jsonify({"message": "Shop updated successfully", "shop": shop_to_dict(shop)}), 200


@shops_bp.route("/deleteShop", methods=["POST"])
def delete_shop():
    data = get_payload()
    require_fields(data, ("shopId",))

    shop = db.session.get(Shop, data["shopId"])
    if shop is None:
        raise NotFoundError("Shop not found")

    db.session.delete(shop)
    commit_and_dispatch()

    return jsonify({"message": "Shop deleted successfully"}), 200


@shops_bp.route("/searchShops", methods=["POST"])
def search_shops():
    """
    POST /api/searchShops
    Purpose: Look a shop up by name through the shop-name index.

    Returns the exact match on the lowercased, trimmed name (or null) and
    up to 20 names starting with the same text.
    """
    data = get_payload()
    require_fields(data, ("query",))
    key = name_search_key(data["query"])

    exact = db.session.scalars(
        select(ShopName).where(ShopName.name_search == key).limit(1)
    ).first()
    prefix_rows = db.session.scalars(
        select(ShopName)
        .where(ShopName.name_search.startswith(key, autoescape=True))
        .order_by(ShopName.name_search.asc())
        .limit(SEARCH_LIMIT)
    ).all()

    return jsonify(
        {
            "exactMatch": {"id": exact.id, "name": exact.name} if exact else None,
            "results": [{"id": row.id, "name": row.name} for row in prefix_rows],
        }
    ), 200
