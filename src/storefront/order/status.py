"""Administrative order progression."""

from protean import handle
from protean.fields import Boolean, Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.repository import load_order
from storefront.shared.errors import InvalidTransitionError
from storefront.shared.principal import principal_from
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    order_id = Identifier(required=True)
    status = String(required=True, max_length=20)
    note = Text()


@storefront.command(part_of="Order")
class AddShippingInfo:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    order_id = Identifier(required=True)
    tracking_number = String(required=True, max_length=255)
    carrier = String(required=True, max_length=100)
    estimated_delivery = String(max_length=32)  # ISO date


@storefront.command(part_of="Order")
class MarkOrderDelivered:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    order_id = Identifier(required=True)


@storefront.command_handler(part_of=Order)
class OrderProgressHandler:
    @handle(UpdateOrderStatus)
    def update_status(self, command):
        principal_from(command).require_admin()

        order = load_order(command.order_id)
        previous = order.status
        try:
            order.update_status(command.status, note=command.note)
        except InvalidTransitionError:
            logger.warning(
                "order_transition_rejected",
                order_id=str(order.id),
                current_status=previous,
                requested_status=command.status,
            )
            raise
        current_domain.repository_for(Order).add(order)

        logger.info("order_status_changed", order_id=str(order.id), previous=previous, status=order.status)
        return str(order.id)

    @handle(AddShippingInfo)
    def add_shipping_info(self, command):
        principal_from(command).require_admin()

        order = load_order(command.order_id)
        order.add_shipping_info(
            tracking_number=command.tracking_number,
            carrier=command.carrier,
            estimated_delivery=command.estimated_delivery,
        )
        current_domain.repository_for(Order).add(order)

        logger.info("shipping_info_added", order_id=str(order.id), carrier=command.carrier)
        return str(order.id)

    @handle(MarkOrderDelivered)
    def mark_delivered(self, command):
        principal_from(command).require_admin()

        order = load_order(command.order_id)
        order.mark_delivered()
        current_domain.repository_for(Order).add(order)

        logger.info("order_delivered", order_id=str(order.id))
        return str(order.id)
