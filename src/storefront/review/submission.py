"""A customer's first review of a product.

One review per customer per product. The product's rating cache is rebuilt in
the same unit of work.
"""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.product.details import load_product
from storefront.review.rating import refresh_product_rating
from storefront.review.review import Review
from storefront.shared.errors import DuplicateReviewError
from storefront.shared.principal import principal_from
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Review")
class AddReview:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    product_id = Identifier(required=True)
    rating = Integer(required=True)
    comment = Text()


@storefront.command_handler(part_of=Review)
class AddReviewHandler:
    @handle(AddReview)
    def add_review(self, command):
        actor = principal_from(command)
        actor.require_active()
        product = load_product(command.product_id)

        repo = current_domain.repository_for(Review)
        if repo.find_by_author(product.id, actor.user_id) is not None:
            logger.warning("duplicate_review_rejected", product_id=str(product.id), user_id=actor.user_id)
            raise DuplicateReviewError(product.id, actor.user_id)

        review = Review.write(
            product_id=product.id,
            user_id=actor.user_id,
            rating=command.rating,
            comment=command.comment,
        )
        repo.add(review)
        refresh_product_rating(product.id, upserted=review)

        logger.info("review_added", review_id=str(review.id), product_id=str(product.id), rating=review.rating)
        return str(review.id)
