"""Stock contention scenario.

Every ContendedCheckoutUser races to buy the same scarce product. A correct
run ends with the product's stock at zero or above and the number of units
sold equal to the units withdrawn; ``InsufficientStock`` rejections are the
expected outcome once the shelf is empty and are not counted as failures.
"""

import logging
import random

import requests
from locust import HttpUser, constant_pacing, events, task

from loadtests.data_generators import address_data, admin_headers, customer_headers, product_data
from loadtests.helpers.directory import register_shopper
from loadtests.helpers.response import envelope_data, extract_error_detail

logger = logging.getLogger("loadtest")

INITIAL_STOCK = 100

# Shared across users within one Locust process
contended = {"product_id": None, "units_sold": 0}


@events.test_start.add_listener
def _create_contended_product(environment, **_kwargs):
    if not environment.host:
        return

    resp = requests.post(
        f"{environment.host}/products",
        json=product_data(stock=INITIAL_STOCK),
        headers=admin_headers(),
        timeout=10,
    )
    if resp.status_code == 201:
        contended["product_id"] = envelope_data(resp)["id"]
        logger.info("Contended product %s created with %d units", contended["product_id"], INITIAL_STOCK)
    else:
        logger.error("Could not create contended product: %s", extract_error_detail(resp))


class ContendedCheckoutUser(HttpUser):
    """Hammers POST /orders for a single product with limited stock."""

    wait_time = constant_pacing(0.2)

    def on_start(self):
        self.user_id = register_shopper(self.client)

    @task
    def buy(self):
        product_id = contended["product_id"]
        if product_id is None or self.user_id is None:
            return

        quantity = random.randint(1, 3)
        with self.client.post(
            "/orders",
            json={"items": [{"product_id": product_id, "quantity": quantity}], "shipping_address": address_data()},
            headers=customer_headers(self.user_id),
            catch_response=True,
            name="[CONTENTION] POST /orders",
        ) as resp:
            if resp.status_code == 201:
                contended["units_sold"] += quantity
            elif resp.status_code in (400, 409):
                # Sold out or lost an optimistic-concurrency race
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code} {extract_error_detail(resp)}")
