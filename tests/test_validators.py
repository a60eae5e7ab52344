from decimal import Decimal
from itertools import permutations

import pytest

from barbersbuddies.errors import ValidationError
from barbersbuddies.utils.validators import (
    compute_total_price,
    format_price,
    is_valid_email,
    is_valid_phone,
    missing_fields,
    normalize_services,
)


@pytest.mark.unit
class TestValidators:
    @pytest.mark.parametrize("email", ["jo@x.com", "first.last@shop.co.uk"])
    def test_valid_emails(self, email):
        assert is_valid_email(email)

    @pytest.mark.parametrize("email", ["jo", "jo@x", "jo @x.com", "", None, 42])
    def test_invalid_emails(self, email):
        assert not is_valid_email(email)

    def test_phone_numbers(self):
        assert is_valid_phone("+49 151 2345 6789")
        assert is_valid_phone("(555) 123-4567")
        assert not is_valid_phone("123")
        assert not is_valid_phone("call me")

    def test_missing_fields(self):
        data = {"a": "x", "b": "  ", "c": [], "d": 0}

        assert missing_fields(data, ["a", "b", "c", "d", "e"]) == ["b", "c", "e"]

    def test_total_price_is_exact(self):
        services = [{"name": "Cut", "price": 0.1}, {"name": "Wash", "price": 0.2}]

        assert compute_total_price(services) == Decimal("0.30")

    def test_total_price_ignores_order(self):
        services = [
            {"name": "Cut", "price": "19.99"},
            {"name": "Beard", "price": 0.1},
            {"name": "Wash", "price": 7.35},
            {"name": "Style", "price": 0.2},
        ]

        totals = {compute_total_price(list(order)) for order in permutations(services)}

        assert totals == {Decimal("27.64")}

    def test_total_price_example(self):
        services = [{"name": "Cut", "price": 25}, {"name": "Beard", "price": 15}]

        assert compute_total_price(services) == Decimal("40.00")
        assert format_price(compute_total_price(services)) == "40.00"

    def test_normalize_services_keeps_known_fields(self):
        services = normalize_services(
            [{"name": "Cut", "price": "25", "duration": 30, "color": "red"}]
        )

        assert services == [{"name": "Cut", "price": 25.0, "duration": 30}]

    @pytest.mark.parametrize(
        "services",
        [[], "Cut", [{"price": 10}], [{"name": "Cut", "price": -1}], [{"name": "Cut", "price": "free"}]],
    )
    def test_normalize_services_rejects(self, services):
        with pytest.raises(ValidationError):
            normalize_services(services)
