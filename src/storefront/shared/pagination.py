"""Page arithmetic shared by the catalog and order queries."""

import math
from dataclasses import dataclass
from typing import Any

from storefront.shared.errors import InvalidRequestError

MAX_LIMIT = 100


@dataclass(frozen=True)
class PageRequest:
    page: int = 1
    limit: int = 10

    def __post_init__(self):
        if not isinstance(self.page, int) or self.page < 1:
            raise InvalidRequestError("page must be a positive integer", {"page": self.page})
        if not isinstance(self.limit, int) or not 1 <= self.limit <= MAX_LIMIT:
            raise InvalidRequestError(f"limit must be between 1 and {MAX_LIMIT}", {"limit": self.limit})

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


@dataclass
class Page:
    """One page of results plus the counters callers render as ``pagination``."""

    items: list[Any]
    request: PageRequest
    total: int

    @property
    def total_pages(self) -> int:
        return max(1, math.ceil(self.total / self.request.limit))

    @property
    def has_next(self) -> bool:
        return self.request.offset + len(self.items) < self.total

    @property
    def has_prev(self) -> bool:
        return self.request.page > 1

    def pagination(self) -> dict[str, Any]:
        return {
            "current_page": self.request.page,
            "total_pages": self.total_pages,
            "total_items": self.total,
            "has_next": self.has_next,
            "has_prev": self.has_prev,
        }