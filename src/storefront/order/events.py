"""Domain events for the Order aggregate.

All events are versioned, immutable facts. Amounts travel as two-place
decimal strings.
"""

from protean.fields import DateTime, Identifier, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Order")
class OrderPlaced:
    """A customer placed an order and its stock was withdrawn."""

    __version__ = 1

    order_id = Identifier(required=True)
    order_number = String(required=True)
    user_id = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity, unit_price, line_total}
    subtotal = String(required=True)
    shipping_cost = String(required=True)
    tax = String(required=True)
    total = String(required=True)
    payment_method = String()
    placed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderStatusChanged:
    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    note = Text()
    changed_at = DateTime(required=True)


@storefront.event(part_of="Order")
class ShippingInfoAdded:
    __version__ = 1

    order_id = Identifier(required=True)
    tracking_number = String(required=True)
    carrier = String(required=True)
    estimated_delivery = String()


@storefront.event(part_of="Order")
class OrderDelivered:
    """The order reached the customer and payment is settled."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    delivered_at = DateTime(required=True)


@storefront.event(part_of="Order")
class OrderCancelled:
    """The order was cancelled, refunded, and its stock returned."""

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    reason = Text()
    cancelled_by = Identifier(required=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity} restored
    cancelled_at = DateTime(required=True)
