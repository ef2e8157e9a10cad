"""Catalog load test scenarios.

Anonymous browsing over the read side, and a merchant journey that creates,
edits, restocks and finally retires a product.
"""

import random

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import admin_headers, browse_params, product_data
from loadtests.helpers.response import envelope_data, extract_error_detail
from loadtests.helpers.state import MerchantState


class CatalogBrowsingUser(HttpUser):
    """Read-only traffic: listings, categories, featured and product detail."""

    wait_time = between(0.5, 2)

    def on_start(self):
        self.seen = []

    @task(6)
    def browse(self):
        resp = self.client.get("/products", params=browse_params(), name="GET /products")
        items = envelope_data(resp) or []
        self.seen = [item["id"] for item in items][:20] or self.seen

    @task(2)
    def categories(self):
        self.client.get("/products/categories", name="GET /products/categories")

    @task(2)
    def featured(self):
        self.client.get("/products/featured", name="GET /products/featured")

    @task(4)
    def product_detail(self):
        if not self.seen:
            return
        product_id = random.choice(self.seen)
        self.client.get(f"/products/{product_id}", name="GET /products/{id}")
        self.client.get(f"/products/{product_id}/related", name="GET /products/{id}/related")


class MerchantJourney(SequentialTaskSet):
    """Create Product -> Update Price -> Restock -> Retire."""

    def on_start(self):
        self.state = MerchantState()

    @task
    def create_product(self):
        payload = product_data()
        with self.client.post(
            "/products",
            json=payload,
            headers=admin_headers(),
            catch_response=True,
            name="POST /products",
        ) as resp:
            if resp.status_code == 201:
                self.state.product_id = envelope_data(resp)["id"]
                self.state.stock = payload["stock"]
            else:
                resp.failure(f"Create product failed: {resp.status_code} {extract_error_detail(resp)}")
                self.interrupt()

    @task
    def update_price(self):
        with self.client.put(
            f"/products/{self.state.product_id}",
            json={"price": f"{random.randint(5, 900)}.99"},
            headers=admin_headers(),
            catch_response=True,
            name="PUT /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Update product failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def restock(self):
        with self.client.put(
            f"/products/{self.state.product_id}/stock",
            json={"delta": random.randint(5, 50), "reason": "Supplier delivery"},
            headers=admin_headers(),
            catch_response=True,
            name="PUT /products/{id}/stock",
        ) as resp:
            if resp.status_code == 200:
                self.state.stock = envelope_data(resp)["stock"]
            else:
                resp.failure(f"Restock failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def retire(self):
        with self.client.delete(
            f"/products/{self.state.product_id}",
            headers=admin_headers(),
            catch_response=True,
            name="DELETE /products/{id}",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Retire failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()
