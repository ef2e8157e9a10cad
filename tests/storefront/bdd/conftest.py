"""Shared BDD fixtures and step definitions for the storefront."""

import json

import pytest
from protean import current_domain
from pytest_bdd import given, parsers, then

from storefront.api.auth import actor_fields
from storefront.order.order import Order
from storefront.product.creation import CreateProduct
from storefront.product.product import Product


@pytest.fixture()
def catalog():
    """Product ids by name, filled in by Given steps."""
    return {}


@pytest.fixture()
def outcome():
    """The last error raised by a When step, if any."""
    return {"error": None}


@given(
    parsers.cfparse('a product "{name}" priced at {price} with {stock:d} units in stock'),
)
def _(catalog, admin, name, price, stock):
    catalog[name] = current_domain.process(
        CreateProduct(**actor_fields(admin), name=name, price=price, stock=stock, images=json.dumps([])),
        asynchronous=False,
    )


@then(parsers.cfparse('"{name}" has {stock:d} units in stock'))
def _(catalog, name, stock):
    assert current_domain.repository_for(Product).get(catalog[name]).stock == stock


@then(parsers.cfparse('the order is rejected with "{message}"'))
def _(outcome, message):
    assert outcome["error"] is not None
    assert outcome["error"].message == message


@then("no order was created")
def _():
    assert current_domain.repository_for(Order)._dao.query.all().total == 0
