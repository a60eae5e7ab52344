import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

from ..errors import ValidationError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[\d\s\-().]{6,20}$")

TWO_PLACES = Decimal("0.01")


def is_valid_email(value) -> bool:
    if not isinstance(value, str):
        return False
    return bool(EMAIL_RE.match(value))


def is_valid_phone(value) -> bool:
    if not isinstance(value, str):
        return False
    digits = re.sub(r"\D", "", value)
    return bool(PHONE_RE.match(value)) and 6 <= len(digits) <= 15


def missing_fields(data, names):
    """Return the names whose values are absent, blank or empty."""
    missing = []
    for name in names:
        value = data.get(name)
        if value is None:
            missing.append(name)
        elif isinstance(value, str) and not value.strip():
            missing.append(name)
        elif isinstance(value, (list, dict)) and len(value) == 0:
            missing.append(name)
    return missing


def to_decimal(value) -> Decimal:
    if isinstance(value, bool):
        raise ValidationError(f"Invalid price: {value}")
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, ValueError, TypeError):
        raise ValidationError(f"Invalid price: {value}")
    if not amount.is_finite():
        raise ValidationError(f"Invalid price: {value}")
    return amount


def compute_total_price(services) -> Decimal:
    """Sum of the services' prices, rounded to cents."""
    total = sum((to_decimal(service.get("price", 0)) for service in services), Decimal("0"))
    return total.quantize(TWO_PLACES, rounding=ROUND_HALF_UP)


def format_price(amount) -> str:
    return str(to_decimal(amount).quantize(TWO_PLACES, rounding=ROUND_HALF_UP))


def normalize_services(services):
    """Validate a submitted service list and keep only the stored fields."""
    if not isinstance(services, list) or not services:
        raise ValidationError("At least one service must be selected")

    normalized = []
    for service in services:
        if not isinstance(service, dict) or not service.get("name"):
            raise ValidationError("Each service needs a name and a price")
        price = to_decimal(service.get("price", 0))
        if price < 0:
            raise ValidationError(f"Invalid price: {service.get('price')}")
        entry = {"name": service["name"], "price": float(price)}
        if service.get("duration") is not None:
            entry["duration"] = service["duration"]
        normalized.append(entry)
    return normalized
