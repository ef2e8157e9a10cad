"""Order aggregate: line items, price snapshot and the status state machine.

State machine:
    pending → processing → shipped → delivered
    pending | processing | shipped → cancelled

Forward moves may skip states (pending → shipped). ``delivered`` and
``cancelled`` are terminal. ``cancelled`` is only reachable through
``cancel``, which is also where stock is handed back.
"""

import json
from datetime import UTC, datetime
from decimal import Decimal
from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import (
    DateTime,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from storefront.domain import storefront
from storefront.order.events import (
    OrderCancelled,
    OrderDelivered,
    OrderPlaced,
    OrderStatusChanged,
    ShippingInfoAdded,
)
from storefront.order.pricing import PriceBreakdown
from storefront.shared.errors import InvalidRequestError, InvalidTransitionError
from storefront.shared.money import format_amount, from_minor, to_minor
from storefront.shared.principal import Principal


class OrderStatus(Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    REFUNDED = "refunded"
    FAILED = "failed"


# Position along the fulfilment path; status updates only move to a higher rank
_FORWARD_RANK = {
    OrderStatus.PENDING: 0,
    OrderStatus.PROCESSING: 1,
    OrderStatus.SHIPPED: 2,
    OrderStatus.DELIVERED: 3,
}

TERMINAL_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@storefront.value_object(part_of="Order")
class Address:
    """A shipping or billing address as captured at checkout."""

    name = String(max_length=150)
    phone = String(max_length=30)
    street = String(required=True, max_length=255)
    city = String(required=True, max_length=100)
    state = String(max_length=100)
    postal_code = String(required=True, max_length=20)
    country = String(required=True, max_length=100)


@storefront.value_object(part_of="Order")
class OrderPricing:
    """Money summary locked at checkout, in minor units."""

    subtotal_minor = Integer(required=True, min_value=0)
    shipping_cost_minor = Integer(required=True, min_value=0)
    tax_minor = Integer(required=True, min_value=0)
    total_minor = Integer(required=True, min_value=0)

    @invariant.post
    def total_must_balance(self):
        if self.total_minor != self.subtotal_minor + self.shipping_cost_minor + self.tax_minor:
            raise ValidationError({"total_minor": ["Total must equal subtotal + shipping + tax"]})

    @classmethod
    def from_breakdown(cls, breakdown: PriceBreakdown) -> "OrderPricing":
        return cls(
            subtotal_minor=to_minor(breakdown.subtotal),
            shipping_cost_minor=to_minor(breakdown.shipping_cost),
            tax_minor=to_minor(breakdown.tax),
            total_minor=to_minor(breakdown.total),
        )

    @property
    def subtotal(self) -> Decimal:
        return from_minor(self.subtotal_minor)

    @property
    def shipping_cost(self) -> Decimal:
        return from_minor(self.shipping_cost_minor)

    @property
    def tax(self) -> Decimal:
        return from_minor(self.tax_minor)

    @property
    def total(self) -> Decimal:
        return from_minor(self.total_minor)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@storefront.entity(part_of="Order")
class OrderItem:
    """One purchased product with its price snapshot. Never changed after placement."""

    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=200)
    quantity = Integer(required=True, min_value=1)
    unit_price_minor = Integer(required=True, min_value=0)
    line_total_minor = Integer(required=True, min_value=0)

    @invariant.post
    def line_total_must_match_quantity(self):
        if self.line_total_minor != self.unit_price_minor * self.quantity:
            raise ValidationError({"line_total_minor": ["Line total must equal quantity x unit price"]})

    @property
    def unit_price(self) -> Decimal:
        return from_minor(self.unit_price_minor)

    @property
    def line_total(self) -> Decimal:
        return from_minor(self.line_total_minor)


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@storefront.aggregate
class Order:
    user_id = Identifier(required=True)
    order_number = String(required=True, max_length=40)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    items = HasMany(OrderItem)
    shipping_address = ValueObject(Address, required=True)
    billing_address = ValueObject(Address)
    pricing = ValueObject(OrderPricing, required=True)
    payment_method = String(max_length=50)
    customer_note = Text()
    admin_note = Text()
    tracking_number = String(max_length=255)
    carrier = String(max_length=100)
    estimated_delivery = String(max_length=32)  # ISO date
    cancellation_reason = String(max_length=500)
    cancelled_by = Identifier()
    created_at = DateTime()
    updated_at = DateTime()
    delivered_at = DateTime()
    cancelled_at = DateTime()

    @invariant.post
    def must_have_items(self):
        if not self.items:
            raise ValidationError({"items": ["Order must contain at least one item"]})

    @invariant.post
    def subtotal_must_match_items(self):
        if self.pricing is None:
            return
        items_total = sum(item.line_total_minor for item in self.items)
        if items_total != self.pricing.subtotal_minor:
            raise ValidationError({"pricing": ["Subtotal must equal the sum of line totals"]})

    # -------------------------------------------------------------------
    # Factory method
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        user_id,
        order_number,
        breakdown: PriceBreakdown,
        shipping_address: Address,
        billing_address: Address | None = None,
        payment_method=None,
        customer_note=None,
        admin_note=None,
    ):
        """Create a pending order from a priced cart.

        ``billing_address`` falls back to the shipping address.
        """
        now = datetime.now(UTC)
        items = [
            OrderItem(
                product_id=line.product_id,
                product_name=line.product_name,
                quantity=line.quantity,
                unit_price_minor=to_minor(line.unit_price),
                line_total_minor=to_minor(line.line_total),
            )
            for line in breakdown.lines
        ]

        order = cls(
            user_id=str(user_id),
            order_number=order_number,
            items=items,
            shipping_address=shipping_address,
            billing_address=billing_address or shipping_address,
            pricing=OrderPricing.from_breakdown(breakdown),
            payment_method=payment_method,
            customer_note=customer_note,
            admin_note=admin_note,
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order_number,
                user_id=str(user_id),
                items=json.dumps(
                    [
                        {
                            "product_id": str(item.product_id),
                            "quantity": item.quantity,
                            "unit_price": format_amount(item.unit_price),
                            "line_total": format_amount(item.line_total),
                        }
                        for item in order.items
                    ]
                ),
                subtotal=format_amount(breakdown.subtotal),
                shipping_cost=format_amount(breakdown.shipping_cost),
                tax=format_amount(breakdown.tax),
                total=format_amount(breakdown.total),
                payment_method=payment_method,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # State helpers
    # -------------------------------------------------------------------
    @property
    def current_status(self) -> OrderStatus:
        return OrderStatus(self.status)

    @property
    def is_terminal(self) -> bool:
        return self.current_status in TERMINAL_STATES

    def quantities_by_product(self) -> dict[str, int]:
        totals: dict[str, int] = {}
        for item in self.items:
            totals[str(item.product_id)] = totals.get(str(item.product_id), 0) + item.quantity
        return totals

    def _append_admin_note(self, note):
        if not note:
            return
        self.admin_note = f"{self.admin_note}\n{note}" if self.admin_note else note

    def _assert_not_terminal(self, target: str):
        if self.is_terminal:
            raise InvalidTransitionError(
                self.status,
                target,
                f"Order is already {self.status}",
            )

    # -------------------------------------------------------------------
    # Lifecycle transitions
    # -------------------------------------------------------------------
    def update_status(self, new_status, note=None):
        """Move the order forward along the fulfilment path."""
        try:
            target = OrderStatus(new_status)
        except ValueError:
            raise InvalidRequestError(f"Unknown order status: {new_status}", {"status": str(new_status)}) from None

        if target is OrderStatus.CANCELLED:
            raise InvalidTransitionError(
                self.status,
                target.value,
                "Orders are cancelled through the cancellation operation",
            )
        self._assert_not_terminal(target.value)
        if _FORWARD_RANK[target] <= _FORWARD_RANK[self.current_status]:
            raise InvalidTransitionError(self.status, target.value)

        previous = self.status
        now = datetime.now(UTC)
        self.status = target.value
        self._append_admin_note(note)
        if target is OrderStatus.DELIVERED:
            self.delivered_at = now
        self.updated_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                previous_status=previous,
                new_status=target.value,
                note=note,
                changed_at=now,
            )
        )

    def add_shipping_info(self, tracking_number, carrier, estimated_delivery=None):
        """Attach logistics metadata. Status is left as is."""
        if self.current_status is OrderStatus.CANCELLED:
            raise InvalidTransitionError(
                self.status,
                self.status,
                "Cannot add shipping information to a cancelled order",
            )

        self.tracking_number = tracking_number
        self.carrier = carrier
        self.estimated_delivery = estimated_delivery
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ShippingInfoAdded(
                order_id=self.id,
                tracking_number=tracking_number,
                carrier=carrier,
                estimated_delivery=estimated_delivery,
            )
        )

    def mark_delivered(self):
        self._assert_not_terminal(OrderStatus.DELIVERED.value)

        previous = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.DELIVERED.value
        self.payment_status = PaymentStatus.PAID.value
        self.delivered_at = now
        self.updated_at = now

        self.raise_(
            OrderDelivered(
                order_id=self.id,
                previous_status=previous,
                delivered_at=now,
            )
        )

    def cancel(self, actor: Principal, reason=None):
        """Cancel and refund. The caller hands the stock back in the same unit of work."""
        actor.require_owner_or_admin(self.user_id, "order")
        self._assert_not_terminal(OrderStatus.CANCELLED.value)

        previous = self.status
        now = datetime.now(UTC)
        self.status = OrderStatus.CANCELLED.value
        self.payment_status = PaymentStatus.REFUNDED.value
        self.cancellation_reason = reason
        self.cancelled_by = actor.user_id
        self.cancelled_at = now
        self.updated_at = now

        self.raise_(
            OrderCancelled(
                order_id=self.id,
                previous_status=previous,
                reason=reason,
                cancelled_by=actor.user_id,
                items=json.dumps(
                    [{"product_id": pid, "quantity": qty} for pid, qty in self.quantities_by_product().items()]
                ),
                cancelled_at=now,
            )
        )
