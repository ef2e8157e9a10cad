"""Mixed storefront workload scenario.

Combines the catalog and checkout journeys with weights that model realistic
e-commerce traffic. This is the recommended scenario for load baselines.
"""

from locust import HttpUser, SequentialTaskSet, between, task

from loadtests.data_generators import browse_params, user_data
from loadtests.scenarios.catalog import MerchantJourney
from loadtests.scenarios.checkout import OrderCancellationJourney, OrderDeliveryJourney


class BrowseJourney(SequentialTaskSet):
    """Listing -> Categories -> Featured."""

    @task
    def browse(self):
        self.client.get("/products", params=browse_params(), name="GET /products")

    @task
    def categories(self):
        self.client.get("/products/categories", name="GET /products/categories")

    @task
    def featured(self):
        self.client.get("/products/featured", name="GET /products/featured")

    @task
    def done(self):
        self.interrupt()


class SignUpJourney(SequentialTaskSet):
    @task
    def register(self):
        self.client.post("/users", json=user_data(), name="POST /users")

    @task
    def done(self):
        self.interrupt()


class MixedWorkloadUser(HttpUser):
    """Realistic mixed workload.

    Browsing dominates, checkouts outnumber cancellations, and catalog
    maintenance is the rarest activity.
    """

    wait_time = between(0.5, 3.0)
    tasks = {
        BrowseJourney: 10,
        SignUpJourney: 2,
        OrderDeliveryJourney: 4,
        OrderCancellationJourney: 2,
        MerchantJourney: 1,
    }
