"""Application tests for order placement through CreateOrder."""

import json
from decimal import Decimal

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError

from storefront.api.auth import actor_fields
from storefront.order.creation import CreateOrder
from storefront.order.order import Order
from storefront.product.details import RetireProduct
from storefront.product.product import Product
from storefront.product.repository import ProductRepository
from storefront.shared.errors import (
    ForbiddenError,
    InsufficientStockError,
    InvalidRequestError,
    ProductNotFoundError,
)
from storefront.shared.principal import Principal


class TestPlaceOrder:
    def test_reference_scenario(self, create_product, place_order, customer, stock_of):
        product_id = create_product(price="200", stock=5)

        order_id = place_order(customer, [(product_id, 3)])

        order = current_domain.repository_for(Order).get(order_id)
        assert order.pricing.subtotal == Decimal("600.00")
        assert order.pricing.shipping_cost == Decimal("100.00")
        assert order.pricing.tax == Decimal("30.00")
        assert order.pricing.total == Decimal("730.00")
        assert order.status == "pending"
        assert order.payment_status == "pending"
        assert order.user_id == customer.user_id
        assert order.order_number.startswith("ORD-")
        assert stock_of(product_id) == 2

    def test_insufficient_stock_changes_nothing(self, create_product, place_order, customer, stock_of, order_count):
        product_id = create_product(stock=5)
        place_order(customer, [(product_id, 3)])

        with pytest.raises(InsufficientStockError) as exc:
            place_order(customer, [(product_id, 3)])

        assert exc.value.available == 2
        assert exc.value.requested == 3
        assert stock_of(product_id) == 2
        assert order_count() == 1

    def test_later_failing_item_leaves_earlier_stock_untouched(
        self, create_product, place_order, customer, stock_of, order_count
    ):
        plenty = create_product(name="Plenty", stock=10)
        scarce = create_product(name="Scarce", stock=1)

        with pytest.raises(InsufficientStockError) as exc:
            place_order(customer, [(plenty, 4), (scarce, 2)])

        assert exc.value.product_name == "Scarce"
        assert stock_of(plenty) == 10
        assert stock_of(scarce) == 1
        assert order_count() == 0

    def test_unknown_product_is_named(self, create_product, place_order, customer, order_count):
        product_id = create_product()

        with pytest.raises(ProductNotFoundError) as exc:
            place_order(customer, [(product_id, 1), ("no-such-product", 1)])

        assert exc.value.product_id == "no-such-product"
        assert order_count() == 0

    def test_empty_cart(self, place_order, customer):
        with pytest.raises(InvalidRequestError):
            place_order(customer, [])

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_non_positive_quantity(self, create_product, place_order, customer, quantity):
        product_id = create_product()
        with pytest.raises(InvalidRequestError):
            place_order(customer, [(product_id, quantity)])

    def test_repeated_product_checked_against_combined_quantity(
        self, create_product, place_order, customer, stock_of
    ):
        product_id = create_product(stock=4)

        with pytest.raises(InsufficientStockError):
            place_order(customer, [(product_id, 2), (product_id, 3)])
        assert stock_of(product_id) == 4

        order_id = place_order(customer, [(product_id, 2), (product_id, 2)])
        order = current_domain.repository_for(Order).get(order_id)
        assert len(order.items) == 2
        assert stock_of(product_id) == 0

    def test_retired_product_cannot_be_ordered(self, create_product, place_order, customer, admin):
        product_id = create_product()
        current_domain.process(RetireProduct(**actor_fields(admin), product_id=product_id), asynchronous=False)

        with pytest.raises(InvalidRequestError):
            place_order(customer, [(product_id, 1)])

    def test_free_shipping_above_threshold(self, create_product, place_order, customer):
        product_id = create_product(price="600", stock=5)
        order_id = place_order(customer, [(product_id, 2)])

        order = current_domain.repository_for(Order).get(order_id)
        assert order.pricing.shipping_cost == Decimal("0.00")
        assert order.pricing.total == Decimal("1260.00")

    def test_price_snapshot_survives_price_change(self, create_product, place_order, customer, admin):
        from storefront.product.details import UpdateProduct

        product_id = create_product(price="200")
        order_id = place_order(customer, [(product_id, 1)])
        current_domain.process(
            UpdateProduct(**actor_fields(admin), product_id=product_id, price="999"),
            asynchronous=False,
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert order.items[0].unit_price == Decimal("200.00")
        assert order.pricing.total == Decimal("310.00")

    def test_notes_payment_and_addresses(self, create_product, place_order, customer):
        product_id = create_product()
        billing = {"street": "9 Ledger Ln", "city": "Leeds", "postal_code": "LS1", "country": "UK"}

        order_id = place_order(
            customer,
            [(product_id, 1)],
            billing_address=json.dumps(billing),
            payment_method="card",
            customer_note="Ring twice",
            admin_note="ignored for customers",
        )

        order = current_domain.repository_for(Order).get(order_id)
        assert order.payment_method == "card"
        assert order.customer_note == "Ring twice"
        assert order.admin_note is None
        assert order.billing_address.city == "Leeds"
        assert order.shipping_address.city == "London"

    def test_incomplete_address(self, create_product, place_order, customer):
        product_id = create_product()
        with pytest.raises(InvalidRequestError):
            place_order(customer, [(product_id, 1)], shipping_address={"city": "Nowhere"})

    def test_inactive_principal_is_forbidden(self, create_product, place_order):
        product_id = create_product()
        with pytest.raises(ForbiddenError):
            place_order(Principal("cust-0003", is_active=False), [(product_id, 1)])

    def test_malformed_items_payload(self, customer):
        with pytest.raises(InvalidRequestError):
            current_domain.process(
                CreateOrder(
                    **actor_fields(customer),
                    items="not json",
                    shipping_address=json.dumps({"street": "s", "city": "c", "postal_code": "p", "country": "US"}),
                ),
                asynchronous=False,
            )

    def test_stock_is_never_oversold(self, create_product, place_order, customer, other_customer, stock_of):
        product_id = create_product(stock=5)

        placed = 0
        for buyer in [customer, other_customer] * 4:
            try:
                place_order(buyer, [(product_id, 2)])
                placed += 1
            except InsufficientStockError:
                pass

        assert placed == 2
        assert stock_of(product_id) == 1

    def test_stale_stock_read_cannot_oversell(
        self, create_product, place_order, customer, other_customer, stock_of, order_count, monkeypatch
    ):
        product_id = create_product(stock=5)
        # Snapshot taken before the first order commits, as a concurrent buyer would see it
        snapshot = current_domain.repository_for(Product).get(product_id)
        assert snapshot.stock == 5

        place_order(customer, [(product_id, 3)])

        real_find_many = ProductRepository.find_many
        served = []

        def find_many_serving_snapshot(self, product_ids):
            if not served:
                served.append(snapshot)
                return {product_id: snapshot}
            return real_find_many(self, product_ids)

        monkeypatch.setattr(ProductRepository, "find_many", find_many_serving_snapshot)

        with pytest.raises((InsufficientStockError, ExpectedVersionError)):
            place_order(other_customer, [(product_id, 3)])

        assert len(served) == 1
        assert order_count() == 1
        assert stock_of(product_id) == 2
