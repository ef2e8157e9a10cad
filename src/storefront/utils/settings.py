"""Environment-driven settings."""

import os
from decimal import Decimal, InvalidOperation

from storefront.utils.logging import get_environment


def is_development() -> bool:
    return get_environment() == "development"


def env_decimal(name: str, default: str) -> Decimal:
    """Read a decimal setting from the environment, falling back to `default`."""
    raw = os.getenv(name, default)
    try:
        return Decimal(raw)
    except InvalidOperation:
        raise ValueError(f"{name} must be a decimal number, got {raw!r}") from None
