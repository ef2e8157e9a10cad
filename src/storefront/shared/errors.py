"""Error taxonomy for storefront operations.

Every business-rule failure is raised as a subclass of ``StorefrontError``.
Each carries the HTTP status it maps to and a stable ``error`` kind name, so
the API layer can render the failure without knowing the concrete class.

Hierarchy:
    StorefrontError
    ├── InvalidRequestError (400)
    ├── NotFoundError (404)
    │   ├── ProductNotFoundError
    │   ├── OrderNotFoundError
    │   ├── ReviewNotFoundError
    │   └── UserNotFoundError
    ├── ForbiddenError (403)
    ├── InvalidTransitionError (400)
    ├── InsufficientStockError (400)
    ├── DuplicateReviewError (409)
    ├── ConflictError (409)
    └── InternalError (500)
"""

from typing import Any


class StorefrontError(Exception):
    """Base class for all storefront failures."""

    error = "Internal"
    status_code = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "success": False,
            "error": self.error,
            "message": self.message,
        }
        if self.details:
            payload["details"] = self.details
        return payload


class InvalidRequestError(StorefrontError):
    """Malformed or empty input."""

    error = "InvalidRequest"
    status_code = 400


class NotFoundError(StorefrontError):
    error = "NotFound"
    status_code = 404


class ProductNotFoundError(NotFoundError):
    def __init__(self, product_id: str) -> None:
        super().__init__(f"Product not found: {product_id}", {"product_id": str(product_id)})
        self.product_id = str(product_id)


class OrderNotFoundError(NotFoundError):
    def __init__(self, order_id: str) -> None:
        super().__init__(f"Order not found: {order_id}", {"order_id": str(order_id)})
        self.order_id = str(order_id)


class ReviewNotFoundError(NotFoundError):
    def __init__(self, review_id: str) -> None:
        super().__init__(f"Review not found: {review_id}", {"review_id": str(review_id)})
        self.review_id = str(review_id)


class UserNotFoundError(NotFoundError):
    def __init__(self, user_id: str) -> None:
        super().__init__(f"User not found: {user_id}", {"user_id": str(user_id)})
        self.user_id = str(user_id)


class ForbiddenError(StorefrontError):
    """The acting principal lacks ownership or role."""

    error = "Forbidden"
    status_code = 403


class InvalidTransitionError(StorefrontError):
    """Illegal order state machine move."""

    error = "InvalidTransition"
    status_code = 400

    def __init__(self, current: str, target: str, message: str | None = None) -> None:
        super().__init__(
            message or f"Cannot change order status from {current} to {target}",
            {"current_status": current, "requested_status": target},
        )
        self.current = current
        self.target = target


class InsufficientStockError(StorefrontError):
    error = "InsufficientStock"
    status_code = 400

    def __init__(self, product_id: str, product_name: str, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock for {product_name}. Available: {available}",
            {
                "product_id": str(product_id),
                "product_name": product_name,
                "available": available,
                "requested": requested,
            },
        )
        self.product_id = str(product_id)
        self.product_name = product_name
        self.available = available
        self.requested = requested


class DuplicateReviewError(StorefrontError):
    error = "DuplicateReview"
    status_code = 409

    def __init__(self, product_id: str, user_id: str) -> None:
        super().__init__(
            "You have already reviewed this product",
            {"product_id": str(product_id), "user_id": str(user_id)},
        )


class ConflictError(StorefrontError):
    """A concurrent writer changed the same aggregate first."""

    error = "Conflict"
    status_code = 409


class InternalError(StorefrontError):
    error = "Internal"
    status_code = 500
