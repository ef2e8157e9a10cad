"""Checkout load test scenarios.

Stateful journeys through the order lifecycle: the happy path to delivery
followed by a review, and the cancellation path that hands stock back.
"""

from locust import SequentialTaskSet, task

from loadtests.data_generators import (
    admin_headers,
    cancellation_reason,
    customer_headers,
    order_data,
    product_data,
    review_data,
    shipping_data,
)
from loadtests.helpers.directory import register_shopper
from loadtests.helpers.response import envelope_data, extract_error_detail
from loadtests.helpers.state import ShopperState


class _ShopperJourney(SequentialTaskSet):
    def on_start(self):
        self.state = ShopperState(user_id=register_shopper(self.client))
        if self.state.user_id is None:
            self.interrupt()

    @property
    def headers(self):
        return customer_headers(self.state.user_id)

    def _stock_products(self):
        for _ in range(2):
            with self.client.post(
                "/products",
                json=product_data(stock=50),
                headers=admin_headers(),
                catch_response=True,
                name="POST /products",
            ) as resp:
                if resp.status_code == 201:
                    self.state.product_ids.append(envelope_data(resp)["id"])
                else:
                    resp.failure(f"Create product failed: {resp.status_code} {extract_error_detail(resp)}")
                    self.interrupt()

    def _place_order(self):
        with self.client.post(
            "/orders",
            json=order_data(self.state.product_ids),
            headers=self.headers,
            catch_response=True,
            name="POST /orders",
        ) as resp:
            if resp.status_code == 201:
                order = envelope_data(resp)
                self.state.order_id = order["id"]
                self.state.order_status = order["status"]
            else:
                resp.failure(f"Place order failed: {resp.status_code} {extract_error_detail(resp)}")
                self.interrupt()


class OrderDeliveryJourney(_ShopperJourney):
    """Place Order -> Processing -> Shipping Info -> Shipped -> Delivered -> Review."""

    @task
    def stock_products(self):
        self._stock_products()

    @task
    def place_order(self):
        self._place_order()

    @task
    def view_order(self):
        self.client.get(f"/orders/{self.state.order_id}", headers=self.headers, name="GET /orders/{id}")

    @task
    def start_processing(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/status",
            json={"status": "processing", "note": "Picked by load test"},
            headers=admin_headers(),
            catch_response=True,
            name="PUT /orders/{id}/status",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Processing failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def add_shipping(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/shipping",
            json=shipping_data(),
            headers=admin_headers(),
            catch_response=True,
            name="PUT /orders/{id}/shipping",
        ) as resp:
            if resp.status_code != 200:
                resp.failure(f"Shipping info failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def ship(self):
        self.client.put(
            f"/orders/{self.state.order_id}/status",
            json={"status": "shipped"},
            headers=admin_headers(),
            name="PUT /orders/{id}/status",
        )

    @task
    def deliver(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/delivered",
            headers=admin_headers(),
            catch_response=True,
            name="PUT /orders/{id}/delivered",
        ) as resp:
            if resp.status_code == 200:
                self.state.order_status = "delivered"
            else:
                resp.failure(f"Delivery failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def review(self):
        product_id = self.state.product_ids[0]
        with self.client.post(
            f"/products/{product_id}/reviews",
            json=review_data(),
            headers=self.headers,
            catch_response=True,
            name="POST /products/{id}/reviews",
        ) as resp:
            if resp.status_code == 201:
                self.state.review_id = envelope_data(resp)["id"]
            else:
                resp.failure(f"Review failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()


class OrderCancellationJourney(_ShopperJourney):
    """Place Order -> List My Orders -> Cancel."""

    @task
    def stock_products(self):
        self._stock_products()

    @task
    def place_order(self):
        self._place_order()

    @task
    def list_my_orders(self):
        self.client.get("/orders", headers=self.headers, name="GET /orders")

    @task
    def cancel(self):
        with self.client.put(
            f"/orders/{self.state.order_id}/cancel",
            json={"reason": cancellation_reason()},
            headers=self.headers,
            catch_response=True,
            name="PUT /orders/{id}/cancel",
        ) as resp:
            if resp.status_code == 200:
                self.state.order_status = "cancelled"
            else:
                resp.failure(f"Cancel failed: {resp.status_code} {extract_error_detail(resp)}")

    @task
    def done(self):
        self.interrupt()
