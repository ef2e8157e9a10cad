"""Catalog creation."""

import json

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.product import Product
from storefront.shared.principal import principal_from
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    name = String(required=True, max_length=200)
    description = Text()
    category = String(max_length=100)
    price = String(required=True, max_length=20)  # decimal string, e.g. "199.99"
    stock = Integer(default=0, min_value=0)
    images = Text()  # JSON: list of URLs
    is_active = Boolean(default=True)
    is_featured = Boolean(default=False)


@storefront.command_handler(part_of=Product)
class CreateProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        principal_from(command).require_admin()

        product = Product.create(
            name=command.name,
            price=command.price,
            stock=command.stock or 0,
            description=command.description,
            category=command.category,
            images=json.loads(command.images) if command.images else [],
            is_active=command.is_active if command.is_active is not None else True,
            is_featured=bool(command.is_featured),
        )
        current_domain.repository_for(Product).add(product)

        logger.info("product_created", product_id=str(product.id), name=product.name, stock=product.stock)
        return str(product.id)
