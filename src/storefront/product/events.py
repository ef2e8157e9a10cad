"""Domain events for the Product aggregate."""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from storefront.domain import storefront


@storefront.event(part_of="Product")
class ProductCreated:
    """A product was added to the catalog."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    category = String()
    price = String(required=True)  # decimal string
    stock = Integer(required=True)
    created_at = DateTime(required=True)


@storefront.event(part_of="Product")
class ProductUpdated:
    """Descriptive fields, price or flags were edited by an administrator."""

    __version__ = 1

    product_id = Identifier(required=True)
    changed_fields = Text(required=True)  # JSON: list of field names
    price = String()
    is_active = Boolean()
    is_featured = Boolean()


@storefront.event(part_of="Product")
class ProductRetired:
    """The product was withdrawn from sale. Historic orders keep referencing it."""

    __version__ = 1

    product_id = Identifier(required=True)
    retired_at = DateTime(required=True)


@storefront.event(part_of="Product")
class StockWithdrawn:
    __version__ = 1

    product_id = Identifier(required=True)
    order_id = Identifier()
    quantity = Integer(required=True)
    remaining = Integer(required=True)


@storefront.event(part_of="Product")
class StockRestored:
    __version__ = 1

    product_id = Identifier(required=True)
    order_id = Identifier()
    quantity = Integer(required=True)
    remaining = Integer(required=True)


@storefront.event(part_of="Product")
class StockAdjusted:
    """Manual correction of the stock counter (restock, shrinkage, recount)."""

    __version__ = 1

    product_id = Identifier(required=True)
    delta = Integer(required=True)
    previous = Integer(required=True)
    remaining = Integer(required=True)
    reason = String(required=True)


@storefront.event(part_of="Product")
class ProductRatingRefreshed:
    __version__ = 1

    product_id = Identifier(required=True)
    rating_average = Float(required=True)
    rating_count = Integer(required=True)
