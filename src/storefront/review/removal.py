"""Review removal by the author or an administrator."""

from protean import handle
from protean.fields import Boolean, Identifier, String
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.review.rating import refresh_product_rating
from storefront.review.repository import load_review
from storefront.review.review import Review
from storefront.shared.principal import principal_from
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@storefront.command(part_of="Review")
class DeleteReview:
    actor_id = Identifier(required=True)
    actor_role = String(max_length=20, default="customer")
    actor_active = Boolean(default=True)
    product_id = Identifier(required=True)
    review_id = Identifier(required=True)


@storefront.command_handler(part_of=Review)
class DeleteReviewHandler:
    @handle(DeleteReview)
    def delete_review(self, command):
        actor = principal_from(command)
        review = load_review(command.product_id, command.review_id)
        actor.require_owner_or_admin(review.user_id, "review")

        current_domain.repository_for(Review)._dao.delete(review)
        refresh_product_rating(review.product_id, removed_id=review.id)

        logger.info(
            "review_deleted",
            review_id=str(review.id),
            product_id=str(review.product_id),
            deleted_by=actor.user_id,
        )
        return str(review.id)
