"""Repository for the Review aggregate."""

from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.review.review import Review
from storefront.shared.errors import ReviewNotFoundError

_BATCH = 100


@storefront.repository(part_of=Review)
class ReviewRepository:
    def find_by_author(self, product_id, user_id) -> Review | None:
        found = self._dao.query.filter(product_id=str(product_id), user_id=str(user_id)).limit(1).all()
        return found.items[0] if found.items else None

    def for_product(self, product_id) -> list[Review]:
        """Every review of a product, newest first."""
        reviews = []
        offset = 0
        while True:
            batch = (
                self._dao.query.filter(product_id=str(product_id))
                .order_by("-created_at")
                .offset(offset)
                .limit(_BATCH)
                .all()
            )
            reviews.extend(batch.items)
            offset += _BATCH
            if offset >= batch.total:
                break
        return reviews


def load_review(product_id, review_id) -> Review:
    """Fetch a review that must belong to ``product_id``."""
    try:
        review = current_domain.repository_for(Review).get(review_id)
    except ObjectNotFoundError:
        raise ReviewNotFoundError(review_id) from None
    if str(review.product_id) != str(product_id):
        raise ReviewNotFoundError(review_id)
    return review
