"""Storefront load testing, Locust entry point.

Discovers all user classes from the scenarios package.
Run specific scenarios with Locust's class selection.

Scenarios that act as an administrator send the directory id from
`LOADTEST_ADMIN_ID`; create that user first with `python src/manage.py create-admin`.

Usage:
    # All scenarios (web UI):
    locust -f loadtests/locustfile.py

    # Mixed workload only:
    locust -f loadtests/locustfile.py MixedWorkloadUser

    # Oversell check: many buyers racing for one product
    locust -f loadtests/locustfile.py ContendedCheckoutUser --headless -u 50 -r 10 -t 60s

    # Headless (CI mode):
    locust -f loadtests/locustfile.py MixedWorkloadUser --headless \
           -u 50 -r 5 -t 300s --csv=results/loadtest
"""

import logging
import time

import requests
from locust import events

# Import all user classes so Locust discovers them
from loadtests.helpers.response import envelope_data, extract_error_detail
from loadtests.scenarios.catalog import CatalogBrowsingUser  # noqa: F401
from loadtests.scenarios.contention import INITIAL_STOCK, ContendedCheckoutUser, contended  # noqa: F401
from loadtests.scenarios.mixed import MixedWorkloadUser  # noqa: F401

logger = logging.getLogger("loadtest")


@events.request.add_listener
def on_request(request_type, name, response, exception, **_kw):
    """Log error details for every failed request.

    Extracts the envelope's error kind and message so you see
    "InsufficientStock: Insufficient stock for Widget. Available: 0"
    instead of just "400".
    """
    if exception:
        logger.error("[EXCEPTION] %s %s: %s", request_type, name, exception)
    elif response is not None and response.status_code >= 400:
        detail = extract_error_detail(response)
        logger.error("[%s] %s %s: %s", response.status_code, request_type, name, detail)


@events.test_start.add_listener
def on_test_start(environment, **_kwargs):
    print(f"\n[LOADTEST] Started at {time.strftime('%H:%M:%S')}")
    print(f"[LOADTEST] Target host: {environment.host}")
    print()


@events.test_stop.add_listener
def on_test_stop(environment, **_kwargs):
    """Report whether the contended product was oversold."""
    print(f"\n[LOADTEST] Stopped at {time.strftime('%H:%M:%S')}")
    product_id = contended["product_id"]
    if product_id is None:
        return
    try:
        resp = requests.get(f"{environment.host}/products/{product_id}", timeout=5)
    except requests.RequestException as e:
        print(f"[LOADTEST] Could not fetch contended product: {e}\n")
        return

    product = envelope_data(resp)
    if product is None:
        print(f"[LOADTEST] Could not read contended product: {extract_error_detail(resp)}\n")
        return

    sold = contended["units_sold"]
    remaining = product["stock"]
    verdict = "OK" if remaining >= 0 and sold + remaining == INITIAL_STOCK else "MISMATCH"
    print(f"[LOADTEST] Contended stock: initial={INITIAL_STOCK} sold={sold} remaining={remaining} -> {verdict}\n")
