"""Catalog maintenance: edit and retire."""

import json

from protean import handle
from protean.exceptions import ObjectNotFoundError
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.errors import ProductNotFoundError
from storefront.shared.principal import principal_from
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class UpdateProduct:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    product_id = Identifier(required=True)
    name = String(max_length=200)
    description = Text()
    category = String(max_length=100)
    price = String(max_length=20)
    images = Text()  # JSON: list of URLs
    is_active = Boolean()
    is_featured = Boolean()


@storefront.command(part_of="Product")
class RetireProduct:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    product_id = Identifier(required=True)


def load_product(product_id) -> Product:
    try:
        return current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError:
        raise ProductNotFoundError(product_id) from None


@storefront.command_handler(part_of=Product)
class ProductDetailsHandler:
    @handle(UpdateProduct)
    def update_product(self, command):
        principal_from(command).require_admin()

        product = load_product(command.product_id)
        product.update_details(
            name=command.name,
            description=command.description,
            category=command.category,
            price=command.price,
            images=json.loads(command.images) if command.images else None,
            is_active=command.is_active,
            is_featured=command.is_featured,
        )
        current_domain.repository_for(Product).add(product)

        logger.info("product_updated", product_id=str(product.id))
        return str(product.id)

    @handle(RetireProduct)
    def retire_product(self, command):
        principal_from(command).require_admin()

        product = load_product(command.product_id)
        product.retire()
        current_domain.repository_for(Product).add(product)

        logger.info("product_retired", product_id=str(product.id))
        return str(product.id)
