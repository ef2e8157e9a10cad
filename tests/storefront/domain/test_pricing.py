from decimal import Decimal

import pytest

from storefront.order.pricing import PricingPolicy, price_line, price_order


def _line(quantity, unit_price, product_id="p1"):
    return price_line(product_id, "Item", quantity, Decimal(unit_price))


class TestPriceOrder:
    def test_reference_cart(self):
        breakdown = price_order([_line(3, "200")], PricingPolicy())
        assert breakdown.subtotal == Decimal("600.00")
        assert breakdown.shipping_cost == Decimal("100.00")
        assert breakdown.tax == Decimal("30.00")
        assert breakdown.total == Decimal("730.00")

    def test_total_is_sum_of_parts(self):
        breakdown = price_order([_line(2, "19.99"), _line(1, "5.25", "p2")], PricingPolicy())
        assert breakdown.total == breakdown.subtotal + breakdown.shipping_cost + breakdown.tax

    def test_subtotal_at_threshold_still_pays_shipping(self):
        breakdown = price_order([_line(1, "1000")], PricingPolicy())
        assert breakdown.shipping_cost == Decimal("100.00")

    def test_subtotal_above_threshold_ships_free(self):
        breakdown = price_order([_line(1, "1000.01")], PricingPolicy())
        assert breakdown.shipping_cost == Decimal("0.00")

    def test_tax_rounds_half_up(self):
        # 0.10 * 0.05 = 0.005
        breakdown = price_order([_line(1, "0.10")], PricingPolicy())
        assert breakdown.tax == Decimal("0.01")

    def test_tax_rounded_once_on_subtotal_not_per_line(self):
        lines = [_line(1, "0.10", f"p{i}") for i in range(3)]
        breakdown = price_order(lines, PricingPolicy())
        # Per-line rounding would give 0.03
        assert breakdown.tax == Decimal("0.02")

    def test_line_total_is_quantity_times_unit_price(self):
        line = _line(4, "2.50")
        assert line.line_total == Decimal("10.00")

    def test_no_float_drift(self):
        breakdown = price_order([_line(1, "0.1"), _line(1, "0.2", "p2")], PricingPolicy())
        assert breakdown.subtotal == Decimal("0.30")


class TestPricingPolicy:
    def test_defaults(self):
        policy = PricingPolicy()
        assert policy.free_shipping_threshold == Decimal("1000")
        assert policy.flat_shipping_cost == Decimal("100")
        assert policy.tax_rate == Decimal("0.05")

    def test_from_env_overrides(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_FREE_SHIPPING_THRESHOLD", "50")
        monkeypatch.setenv("STOREFRONT_FLAT_SHIPPING_COST", "7.5")
        monkeypatch.setenv("STOREFRONT_TAX_RATE", "0.2")

        breakdown = price_order([_line(1, "40")], PricingPolicy.from_env())
        assert breakdown.shipping_cost == Decimal("7.50")
        assert breakdown.tax == Decimal("8.00")
        assert breakdown.total == Decimal("55.50")

    def test_from_env_rejects_garbage(self, monkeypatch):
        monkeypatch.setenv("STOREFRONT_TAX_RATE", "five percent")
        with pytest.raises(ValueError):
            PricingPolicy.from_env()
