"""Per-user state tracking for Locust load test scenarios.

Each Locust user instance maintains its own state, no cross-user sharing.
State tracks entity IDs returned by creation endpoints so follow-up
operations can reference them.
"""

from dataclasses import dataclass, field


@dataclass
class ShopperState:
    """A simulated customer browsing and buying."""

    user_id: str | None = None
    product_ids: list[str] = field(default_factory=list)
    order_id: str | None = None
    order_status: str = "pending"
    review_id: str | None = None


@dataclass
class MerchantState:
    """A simulated administrator maintaining the catalog."""

    product_id: str | None = None
    stock: int = 0
