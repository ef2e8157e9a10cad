"""Shopper sign-up shared by the scenarios that act as a customer.

The API resolves ``X-User-Id`` against the user directory, so every simulated
customer registers before acting.
"""

from loadtests.data_generators import user_data
from loadtests.helpers.response import envelope_data, extract_error_detail


def register_shopper(client) -> str | None:
    """POST /users and return the new directory id, or None on failure."""
    with client.post("/users", json=user_data(), catch_response=True, name="POST /users") as resp:
        if resp.status_code == 201:
            return envelope_data(resp)["user_id"]
        resp.failure(f"Register user failed: {resp.status_code} {extract_error_detail(resp)}")
        return None
