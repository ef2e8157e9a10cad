"""Integration tests for principal resolution against the user directory."""

import pytest
from protean import current_domain

from storefront.api.auth import actor_fields
from storefront.product.details import RetireProduct


def _register(client, external_id, email):
    response = client.post("/users", json={"external_id": external_id, "email": email})
    assert response.status_code == 201
    return response.json()["data"]["user_id"]


class TestPrincipalResolution:
    def test_unknown_user_is_unauthenticated(self, client):
        response = client.get("/orders/admin/all", headers={"X-User-Id": "nobody", "X-User-Role": "ADMIN"})

        assert response.status_code == 401
        assert response.json()["error"] == "Unauthenticated"

    def test_role_header_is_ignored(self, client, as_customer):
        headers = {**as_customer, "X-User-Role": "admin"}
        assert client.get("/orders/admin/all", headers=headers).status_code == 403

    def test_registered_user_acts_as_customer(self, client, create_product):
        user_id = _register(client, "idp|new", "new@example.com")
        product_id = create_product(stock=2)

        response = client.post(
            "/orders",
            json={
                "items": [{"product_id": product_id, "quantity": 1}],
                "shipping_address": {"street": "1 Main", "city": "Leeds", "postal_code": "LS1", "country": "UK"},
            },
            headers={"X-User-Id": user_id},
        )

        assert response.status_code == 201
        assert response.json()["data"]["user_id"] == user_id
        assert response.json()["data"]["user"]["email"] == "new@example.com"

    def test_deactivated_user_loses_access(self, client, as_admin):
        user_id = _register(client, "idp|leaver", "leaver@example.com")
        assert client.get("/orders", headers={"X-User-Id": user_id}).status_code == 200

        client.put(f"/users/{user_id}/deactivate", headers=as_admin)

        response = client.get("/orders", headers={"X-User-Id": user_id, "X-User-Active": "true"})
        assert response.status_code == 403
        assert response.json()["message"] == "Account is deactivated"

    def test_promotion_and_demotion_take_effect(self, client, as_admin):
        user_id = _register(client, "idp|staff", "staff@example.com")
        headers = {"X-User-Id": user_id}
        assert client.get("/orders/admin/stats", headers=headers).status_code == 403

        client.put(f"/users/{user_id}/role", json={"role": "admin"}, headers=as_admin)
        assert client.get("/orders/admin/stats", headers=headers).status_code == 200

        client.put(f"/users/{user_id}/role", json={"role": "customer"}, headers=as_admin)
        assert client.get("/orders/admin/stats", headers=headers).status_code == 403


class TestInactiveProductListing:
    @pytest.fixture()
    def retired(self, create_product, admin):
        product_id = create_product(name="Old Widget")
        current_domain.process(RetireProduct(**actor_fields(admin), product_id=product_id), asynchronous=False)
        return product_id

    def test_anonymous_cannot_list_inactive(self, client, retired):
        assert client.get("/products", params={"active": "false"}).status_code == 403

    def test_customer_cannot_list_inactive(self, client, retired, as_customer):
        assert client.get("/products", params={"active": "false"}, headers=as_customer).status_code == 403

    def test_admin_lists_inactive(self, client, retired, as_admin):
        response = client.get("/products", params={"active": "false"}, headers=as_admin)

        assert response.status_code == 200
        assert [p["id"] for p in response.json()["data"]] == [retired]
