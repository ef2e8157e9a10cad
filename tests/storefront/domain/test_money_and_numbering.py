import random
import re
from decimal import Decimal

import pytest

from storefront.order.numbering import generate_order_number
from storefront.shared.money import format_amount, from_minor, parse_amount, to_minor


class TestMoney:
    def test_parse_float_goes_through_str(self):
        assert parse_amount(0.1) == Decimal("0.10")

    def test_parse_rounds_half_up(self):
        assert parse_amount("2.345") == Decimal("2.35")

    @pytest.mark.parametrize("value", ["abc", None, "NaN", "Infinity"])
    def test_parse_rejects_non_amounts(self, value):
        with pytest.raises(ValueError):
            parse_amount(value)

    def test_minor_units(self):
        assert to_minor(Decimal("730.00")) == 73000
        assert from_minor(73000) == Decimal("730.00")
        assert from_minor(None) == Decimal("0.00")

    def test_format(self):
        assert format_amount(Decimal("5")) == "5.00"


class TestOrderNumber:
    def test_shape(self):
        assert re.fullmatch(r"ORD-\d+-\d{1,4}", generate_order_number())

    def test_uses_timestamp_and_suffix(self):
        number = generate_order_number(now_ms=1700000000000, rng=random.Random(7))
        prefix, millis, suffix = number.split("-")
        assert prefix == "ORD"
        assert millis == "1700000000000"
        assert 0 <= int(suffix) <= 9998
