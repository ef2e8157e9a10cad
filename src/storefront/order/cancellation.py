"""Order cancellation command and handler.

Cancelling refunds the order and hands every purchased unit back to its
product in the same unit of work.
"""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.order.order import Order
from storefront.order.repository import load_order
from storefront.product.product import Product
from storefront.shared.errors import ForbiddenError, InvalidTransitionError
from storefront.shared.principal import principal_from
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    order_id = Identifier(required=True)
    reason = String(max_length=500)


@storefront.command_handler(part_of=Order)
class CancelOrderHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        actor = principal_from(command)
        order = load_order(command.order_id)

        try:
            order.cancel(actor, reason=command.reason)
        except (ForbiddenError, InvalidTransitionError) as exc:
            logger.warning(
                "order_cancellation_rejected",
                order_id=str(order.id),
                actor_id=actor.user_id,
                error=exc.error,
            )
            raise

        # Products are referenced, not owned: a retired product still takes its stock back
        product_repo = current_domain.repository_for(Product)
        restocked = product_repo.find_many(order.quantities_by_product())
        for product_id, quantity in order.quantities_by_product().items():
            product = restocked.get(product_id)
            if product is None:
                logger.warning("restock_skipped_missing_product", order_id=str(order.id), product_id=product_id)
                continue
            product.restore_stock(quantity, order_id=order.id)
            product_repo.add(product)

        current_domain.repository_for(Order).add(order)

        logger.info(
            "order_cancelled",
            order_id=str(order.id),
            order_number=order.order_number,
            actor_id=actor.user_id,
            restocked=len(restocked),
        )
        return str(order.id)
