"""Order placement command and handler.

Placement is one unit of work: resolve products, check stock for every line,
price the cart, persist the order and withdraw the stock. Any failure rolls
the whole thing back, so stock is never withdrawn without a stored order.
"""

import json

from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.numbering import generate_order_number
from storefront.order.order import Address, Order
from storefront.order.pricing import price_line, price_order
from storefront.product.product import Product
from storefront.shared.errors import InsufficientStockError, InvalidRequestError, ProductNotFoundError
from storefront.shared.principal import principal_from
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class CreateOrder:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    items = Text(required=True)  # JSON: list of {product_id, quantity}
    shipping_address = Text(required=True)  # JSON: address dict
    billing_address = Text()  # JSON: address dict, defaults to shipping
    payment_method = String(max_length=50)
    customer_note = Text()
    admin_note = Text()


def _load_json(raw, field_name):
    if raw is None or isinstance(raw, list | dict):
        return raw
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        raise InvalidRequestError(f"{field_name} must be valid JSON", {field_name: "invalid"}) from None


def parse_cart(raw_items) -> list[tuple[str, int]]:
    """Validate the requested lines into ``(product_id, quantity)`` pairs."""
    items = _load_json(raw_items, "items")
    if not isinstance(items, list) or not items:
        raise InvalidRequestError("Order must contain at least one item", {"items": "empty"})

    lines = []
    for index, item in enumerate(items):
        if not isinstance(item, dict) or not item.get("product_id"):
            raise InvalidRequestError(f"Item {index} is missing a product_id", {"index": index})
        quantity = item.get("quantity")
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity < 1:
            raise InvalidRequestError(
                f"Item {index} quantity must be a positive integer",
                {"index": index, "quantity": quantity},
            )
        lines.append((str(item["product_id"]), quantity))
    return lines


def _address(raw, field_name) -> Address | None:
    data = _load_json(raw, field_name)
    if not data:
        return None
    if not isinstance(data, dict):
        raise InvalidRequestError(f"{field_name} must be an object", {field_name: "invalid"})
    try:
        return Address(**data)
    except ValidationError as exc:
        raise InvalidRequestError(f"{field_name} is incomplete", {field_name: exc.messages}) from None


@storefront.command_handler(part_of=Order)
class CreateOrderHandler:
    @handle(CreateOrder)
    def create_order(self, command):
        actor = principal_from(command)
        actor.require_active()

        lines = parse_cart(command.items)
        shipping_address = _address(command.shipping_address, "shipping_address")
        if shipping_address is None:
            raise InvalidRequestError("shipping_address is required", {"shipping_address": "missing"})
        billing_address = _address(command.billing_address, "billing_address")

        product_repo = current_domain.repository_for(Product)
        products = product_repo.find_many(pid for pid, _ in lines)
        for product_id, _ in lines:
            if product_id not in products:
                raise ProductNotFoundError(product_id)

        # A product listed on several lines is checked against the combined quantity
        requested: dict[str, int] = {}
        for product_id, quantity in lines:
            requested[product_id] = requested.get(product_id, 0) + quantity

        for product_id, quantity in requested.items():
            product = products[product_id]
            if not product.is_active:
                raise InvalidRequestError(
                    f"Product {product.name} is no longer available",
                    {"product_id": product_id},
                )
            try:
                product.ensure_available(quantity)
            except InsufficientStockError as exc:
                logger.warning(
                    "order_rejected_insufficient_stock",
                    user_id=actor.user_id,
                    product_id=product_id,
                    available=exc.available,
                    requested=exc.requested,
                )
                raise

        breakdown = price_order(
            price_line(product_id, products[product_id].name, quantity, products[product_id].price)
            for product_id, quantity in lines
        )

        order = Order.place(
            user_id=actor.user_id,
            order_number=generate_order_number(),
            breakdown=breakdown,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=command.payment_method,
            customer_note=command.customer_note,
            admin_note=command.admin_note if actor.is_admin else None,
        )

        for product_id, quantity in requested.items():
            product = products[product_id]
            product.withdraw_stock(quantity, order_id=order.id)
            product_repo.add(product)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=actor.user_id,
            total=str(breakdown.total),
            items=len(lines),
        )
        return str(order.id)
