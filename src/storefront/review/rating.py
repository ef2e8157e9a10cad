"""Product rating aggregation.

The product's ``rating_average``/``rating_count`` are a cache of its review
set. They are always rebuilt from the full set, never nudged incrementally.
Review handlers call ``refresh_product_rating`` in the same unit of work as
the review change, passing the change itself so the result does not depend on
whether the store already reflects it.
"""

from decimal import ROUND_HALF_UP, Decimal

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.details import load_product
from storefront.product.product import Product
from storefront.review.review import Review
from storefront.shared.principal import principal_from
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

_TWO_PLACES = Decimal("0.01")


def summarize_ratings(ratings) -> tuple[Decimal, int]:
    """Mean (two places, half-up) and count. The mean of nothing is 0."""
    ratings = list(ratings)
    if not ratings:
        return Decimal(0), 0
    mean = Decimal(sum(ratings)) / len(ratings)
    return mean.quantize(_TWO_PLACES, rounding=ROUND_HALF_UP), len(ratings)


def refresh_product_rating(product_id, upserted: Review | None = None, removed_id=None) -> Product:
    reviews = current_domain.repository_for(Review).for_product(product_id)
    ratings = {str(review.id): review.rating for review in reviews}
    if removed_id is not None:
        ratings.pop(str(removed_id), None)
    if upserted is not None:
        ratings[str(upserted.id)] = upserted.rating

    average, count = summarize_ratings(ratings.values())

    product = load_product(product_id)
    product.refresh_rating(average, count)
    current_domain.repository_for(Product).add(product)

    logger.info("product_rating_refreshed", product_id=str(product_id), average=str(average), count=count)
    return product


@storefront.command(part_of="Product")
class RecalculateProductRating:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=Product)
class RecalculateProductRatingHandler:
    @handle(RecalculateProductRating)
    def recalculate(self, command):
        principal_from(command).require_admin()
        product = refresh_product_rating(command.product_id)
        return {"rating_average": product.rating_average, "rating_count": product.rating_count}
