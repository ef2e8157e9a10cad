import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from protean import current_domain

from storefront.api import order_router, product_router, register_exception_handlers, user_router
from storefront.user.user import User


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(order_router)
    app.include_router(product_router)
    app.include_router(user_router)
    register_exception_handlers(app)
    return TestClient(app)


@pytest.fixture(autouse=True)
def directory(_ctx, admin, customer, other_customer):
    """Directory entries for the principals the tests act as."""
    repo = current_domain.repository_for(User)
    for principal in (admin, customer, other_customer):
        repo.add(
            User(
                id=principal.user_id,
                external_id=f"idp|{principal.user_id}",
                email=f"{principal.user_id}@example.com",
                role=principal.role.value,
                is_active=principal.is_active,
            )
        )
    return repo


def headers_for(principal):
    return {"X-User-Id": principal.user_id}


@pytest.fixture()
def as_admin(admin):
    return headers_for(admin)


@pytest.fixture()
def as_customer(customer):
    return headers_for(customer)


@pytest.fixture()
def as_other_customer(other_customer):
    return headers_for(other_customer)
