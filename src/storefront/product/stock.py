"""Manual stock corrections by administrators."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.details import load_product
from storefront.product.product import Product
from storefront.shared.principal import principal_from
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class AdjustStock:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    product_id = Identifier(required=True)
    delta = Integer(required=True)  # signed: positive restocks, negative removes
    reason = String(required=True, max_length=255)


@storefront.command_handler(part_of=Product)
class AdjustStockHandler:
    @handle(AdjustStock)
    def adjust_stock(self, command):
        principal_from(command).require_admin()

        product = load_product(command.product_id)
        product.adjust_stock(command.delta, command.reason)
        current_domain.repository_for(Product).add(product)

        logger.info(
            "stock_adjusted",
            product_id=str(product.id),
            delta=command.delta,
            stock=product.stock,
            reason=command.reason,
        )
        return product.stock
