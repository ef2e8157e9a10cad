"""Human-readable order numbers: ``ORD-<epoch millis>-<random 0..9998>``.

Collision-resistant, not collision-proof: two orders placed in the same
millisecond have a 1 in 9999 chance of sharing a number. There is no
uniqueness check against stored orders.
"""

import random
import time

PREFIX = "ORD"


def generate_order_number(now_ms: int | None = None, rng: random.Random | None = None) -> str:
    millis = now_ms if now_ms is not None else time.time_ns() // 1_000_000
    suffix = (rng or random).randrange(9999)
    return f"{PREFIX}-{millis}-{suffix}"
