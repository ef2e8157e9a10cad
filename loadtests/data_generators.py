"""Faker-based data generators for Locust load test scenarios.

Each generator produces payloads that pass the storefront's validation rules
and match the field names expected by the API's Pydantic request schemas.
"""

import os
import random
import uuid

from faker import Faker

fake = Faker()

CATEGORIES = ["apparel", "books", "electronics", "garden", "kitchen", "toys"]
# Directory id of an administrator, created with `python src/manage.py create-admin`
ADMIN_ID = os.getenv("LOADTEST_ADMIN_ID", "loadtest-admin")


# ---------- Principals ----------


def customer_headers(user_id: str) -> dict:
    return {"X-User-Id": user_id}


def admin_headers() -> dict:
    return {"X-User-Id": ADMIN_ID}


def user_data() -> dict:
    """Generate a RegisterUserRequest payload."""
    return {
        "external_id": f"EXT-LT-{uuid.uuid4().hex[:8]}",
        "email": f"{fake.user_name()[:20]}.{uuid.uuid4().hex[:4]}@{fake.free_email_domain()}",
        "first_name": fake.first_name()[:100],
        "last_name": fake.last_name()[:100],
    }


# ---------- Catalog ----------


def product_data(stock: int | None = None) -> dict:
    """Generate a CreateProductRequest payload."""
    word = fake.word().capitalize()
    return {
        "name": f"{word} {fake.word().capitalize()} {uuid.uuid4().hex[:4]}"[:200],
        "description": fake.sentence(nb_words=12),
        "category": random.choice(CATEGORIES),
        "price": f"{random.randint(5, 900)}.{random.randint(0, 99):02d}",
        "stock": stock if stock is not None else random.randint(20, 500),
        "images": [f"https://cdn.example.com/{uuid.uuid4().hex[:12]}.jpg"],
        "is_featured": random.random() < 0.2,
    }


def browse_params() -> dict:
    params = {"page": random.randint(1, 3), "limit": random.choice([12, 24])}
    roll = random.random()
    if roll < 0.3:
        params["category"] = random.choice(CATEGORIES)
    elif roll < 0.5:
        params["search"] = fake.word()
    if random.random() < 0.3:
        params["sort"] = random.choice(["price", "rating_average", "name"])
        params["order"] = random.choice(["asc", "desc"])
    return params


def review_data() -> dict:
    return {"rating": random.randint(1, 5), "comment": fake.sentence(nb_words=15)}


# ---------- Orders ----------


def address_data() -> dict:
    """Generate an AddressSchema payload."""
    return {
        "name": fake.name()[:100],
        "phone": fake.numerify("+1-###-###-####"),
        "street": fake.street_address()[:255],
        "city": fake.city()[:100],
        "state": fake.state_abbr(),
        "postal_code": fake.zipcode()[:20],
        "country": "US",
    }


def order_data(product_ids: list[str], max_quantity: int = 3) -> dict:
    """Generate a CreateOrderRequest payload over one to three of ``product_ids``."""
    chosen = random.sample(product_ids, k=min(len(product_ids), random.randint(1, 3)))
    payload = {
        "items": [{"product_id": pid, "quantity": random.randint(1, max_quantity)} for pid in chosen],
        "shipping_address": address_data(),
        "payment_method": random.choice(["card", "paypal", "cod"]),
    }
    if random.random() < 0.3:
        payload["notes"] = {"customer": fake.sentence(nb_words=8)}
    return payload


def shipping_data() -> dict:
    return {
        "tracking_number": f"TRK-{uuid.uuid4().hex[:12].upper()}",
        "carrier": random.choice(["UPS", "FedEx", "DHL", "USPS"]),
        "estimated_delivery": fake.date_between(start_date="+1d", end_date="+10d").isoformat(),
    }


def cancellation_reason() -> str:
    return random.choice(["Changed my mind", "Found a better price", "Ordered by mistake", "Delivery too slow"])
