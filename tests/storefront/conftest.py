import json

import pytest
from protean import current_domain
from protean.integrations.pytest import DomainFixture

from storefront.api.auth import actor_fields
from storefront.shared.principal import Principal, Role

ADDRESS = {
    "name": "Ada Lovelace",
    "street": "12 Analytical Row",
    "city": "London",
    "state": "Greater London",
    "postal_code": "EC1A 1BB",
    "country": "UK",
}


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        # Clear all databases and drain the event store
        for _, provider in current_domain.providers.items():
            provider._data_reset()
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def admin():
    return Principal(user_id="admin-0001", role=Role.ADMIN)


@pytest.fixture()
def customer():
    return Principal(user_id="cust-0001")


@pytest.fixture()
def other_customer():
    return Principal(user_id="cust-0002")


@pytest.fixture()
def create_product(admin):
    """Factory: create a catalog product through the command and return its id."""

    def _create(name="Widget", price="200.00", stock=5, category="gadgets", **overrides):
        from storefront.product.creation import CreateProduct

        images = overrides.pop("images", [])
        return current_domain.process(
            CreateProduct(
                **actor_fields(admin),
                name=name,
                price=price,
                stock=stock,
                category=category,
                images=json.dumps(images),
                **overrides,
            ),
            asynchronous=False,
        )

    return _create


@pytest.fixture()
def place_order():
    """Factory: place an order for ``[(product_id, quantity), ...]`` as ``principal``."""

    def _place(principal, lines, **overrides):
        from storefront.order.creation import CreateOrder

        return current_domain.process(
            CreateOrder(
                **actor_fields(principal),
                items=json.dumps([{"product_id": pid, "quantity": qty} for pid, qty in lines]),
                shipping_address=json.dumps(overrides.pop("shipping_address", ADDRESS)),
                **overrides,
            ),
            asynchronous=False,
        )

    return _place


@pytest.fixture()
def stock_of():
    def _stock(product_id):
        from storefront.product.product import Product

        return current_domain.repository_for(Product).get(product_id).stock

    return _stock


@pytest.fixture()
def order_count():
    def _count():
        from storefront.order.order import Order

        return current_domain.repository_for(Order)._dao.query.all().total

    return _count
