"""Product aggregate: catalog record, stock counter and cached rating."""

import json
from datetime import UTC, datetime
from decimal import Decimal

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.domain import storefront
from storefront.product.events import (
    ProductCreated,
    ProductRatingRefreshed,
    ProductRetired,
    ProductUpdated,
    StockAdjusted,
    StockRestored,
    StockWithdrawn,
)
from storefront.shared.errors import InsufficientStockError, InvalidRequestError
from storefront.shared.money import format_amount, from_minor, parse_amount, to_minor

_EDITABLE_FIELDS = ("name", "description", "category", "price", "images", "is_active", "is_featured")


@storefront.aggregate
class Product:
    """A sellable item.

    ``price_minor`` holds the price in cents; ``price`` exposes it as a Decimal.
    ``rating_average`` and ``rating_count`` are a cache of the product's review
    set and are only ever written through ``refresh_rating``.
    """

    name: String(required=True, max_length=200)
    description: Text(default="")
    category: String(max_length=100, default="")
    price_minor: Integer(required=True, min_value=0)
    stock: Integer(default=0, min_value=0)
    images: Text(default="[]")  # JSON: list of URLs
    is_active: Boolean(default=True)
    is_featured: Boolean(default=False)
    rating_average: Float(default=0.0)
    rating_count: Integer(default=0)
    created_at: DateTime()
    updated_at: DateTime()

    @invariant.post
    def rating_cache_must_be_coherent(self):
        if self.rating_count < 0:
            raise ValidationError({"rating_count": ["Rating count cannot be negative"]})
        if self.rating_count == 0 and self.rating_average != 0:
            raise ValidationError({"rating_average": ["Rating average must be 0 when there are no reviews"]})
        if self.rating_count > 0 and not 1 <= self.rating_average <= 5:
            raise ValidationError({"rating_average": ["Rating average must be between 1 and 5"]})

    @property
    def price(self) -> Decimal:
        return from_minor(self.price_minor)

    @property
    def image_list(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    @classmethod
    def create(
        cls,
        name,
        price,
        stock=0,
        description="",
        category="",
        images=None,
        is_active=True,
        is_featured=False,
    ):
        now = datetime.now(UTC)
        product = cls(
            name=name,
            description=description or "",
            category=category or "",
            price_minor=to_minor(parse_amount(price)),
            stock=stock,
            images=json.dumps(list(images or [])),
            is_active=is_active,
            is_featured=is_featured,
            created_at=now,
            updated_at=now,
        )
        product.raise_(
            ProductCreated(
                product_id=product.id,
                name=product.name,
                category=product.category,
                price=format_amount(product.price),
                stock=product.stock,
                created_at=now,
            )
        )
        return product

    def update_details(self, **changes):
        """Apply a partial edit. Keys left out (or set to None) are untouched.

        Existing orders are unaffected by a price change because order items
        carry their own price snapshot.
        """
        unknown = set(changes) - set(_EDITABLE_FIELDS)
        if unknown:
            raise InvalidRequestError(f"Unknown product fields: {', '.join(sorted(unknown))}")

        changed = []
        for field_name in _EDITABLE_FIELDS:
            value = changes.get(field_name)
            if value is None:
                continue
            if field_name == "price":
                self.price_minor = to_minor(parse_amount(value))
            elif field_name == "images":
                self.images = json.dumps(list(value))
            else:
                setattr(self, field_name, value)
            changed.append(field_name)

        if not changed:
            return

        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductUpdated(
                product_id=self.id,
                changed_fields=json.dumps(changed),
                price=format_amount(self.price),
                is_active=self.is_active,
                is_featured=self.is_featured,
            )
        )

    def retire(self):
        """Soft-delete: hide the product from sale without dropping its row."""
        if not self.is_active:
            return
        now = datetime.now(UTC)
        self.is_active = False
        self.is_featured = False
        self.updated_at = now
        self.raise_(ProductRetired(product_id=self.id, retired_at=now))

    # -------------------------------------------------------------------
    # Stock
    # -------------------------------------------------------------------
    def ensure_available(self, quantity):
        if self.stock < quantity:
            raise InsufficientStockError(self.id, self.name, available=self.stock, requested=quantity)

    def withdraw_stock(self, quantity, order_id=None):
        """Decrement stock if, and only if, enough is on hand."""
        if quantity < 1:
            raise InvalidRequestError("Quantity must be at least 1", {"quantity": quantity})
        self.ensure_available(quantity)

        self.stock = self.stock - quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockWithdrawn(
                product_id=self.id,
                order_id=order_id,
                quantity=quantity,
                remaining=self.stock,
            )
        )

    def restore_stock(self, quantity, order_id=None):
        if quantity < 1:
            raise InvalidRequestError("Quantity must be at least 1", {"quantity": quantity})

        self.stock = self.stock + quantity
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockRestored(
                product_id=self.id,
                order_id=order_id,
                quantity=quantity,
                remaining=self.stock,
            )
        )

    def adjust_stock(self, delta, reason):
        if not reason:
            raise InvalidRequestError("Reason is required for stock adjustments", {"reason": "missing"})
        if delta == 0:
            raise InvalidRequestError("Stock adjustment must be non-zero", {"delta": delta})

        previous = self.stock
        if previous + delta < 0:
            raise InvalidRequestError(
                f"Adjustment would result in negative stock: {previous + delta}",
                {"delta": delta, "stock": previous},
            )

        self.stock = previous + delta
        self.updated_at = datetime.now(UTC)
        self.raise_(
            StockAdjusted(
                product_id=self.id,
                delta=delta,
                previous=previous,
                remaining=self.stock,
                reason=reason,
            )
        )

    # -------------------------------------------------------------------
    # Rating cache
    # -------------------------------------------------------------------
    def refresh_rating(self, average, count):
        with atomic_change(self):
            self.rating_average = float(average)
            self.rating_count = count
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ProductRatingRefreshed(
                product_id=self.id,
                rating_average=self.rating_average,
                rating_count=self.rating_count,
            )
        )
