"""The author revises their rating or comment."""

from protean import handle
from protean.fields import Boolean, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.review.rating import refresh_product_rating
from storefront.review.repository import load_review
from storefront.review.review import Review
from storefront.shared.errors import ForbiddenError
from storefront.shared.principal import principal_from
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Review")
class UpdateReview:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    product_id = Identifier(required=True)
    review_id = Identifier(required=True)
    rating = Integer()
    comment = Text()


@storefront.command_handler(part_of=Review)
class UpdateReviewHandler:
    @handle(UpdateReview)
    def update_review(self, command):
        actor = principal_from(command)
        actor.require_active()

        review = load_review(command.product_id, command.review_id)
        # Administrators may delete any review but only authors may reword one
        if not actor.owns(review.user_id):
            raise ForbiddenError("Only the author can update this review", {"review_id": str(review.id)})

        review.edit(rating=command.rating, comment=command.comment)
        current_domain.repository_for(Review).add(review)
        refresh_product_rating(review.product_id, upserted=review)

        logger.info("review_updated", review_id=str(review.id), rating=review.rating)
        return str(review.id)
