"""Review aggregate: one customer's rating of one product."""

from datetime import UTC, datetime

from protean.fields import DateTime, Identifier, Integer, Text

from storefront.domain import storefront
from storefront.review.events import ReviewAdded, ReviewUpdated
from storefront.shared.errors import InvalidRequestError

MIN_RATING = 1
MAX_RATING = 5


def validate_rating(rating):
    if isinstance(rating, bool) or not isinstance(rating, int) or not MIN_RATING <= rating <= MAX_RATING:
        raise InvalidRequestError(
            f"Rating must be an integer between {MIN_RATING} and {MAX_RATING}",
            {"rating": rating},
        )


@storefront.aggregate
class Review:
    """At most one review exists per (product_id, user_id); the handlers enforce it."""

    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True, min_value=MIN_RATING, max_value=MAX_RATING)
    comment = Text()
    created_at = DateTime()
    updated_at = DateTime()

    @classmethod
    def write(cls, product_id, user_id, rating, comment=None):
        validate_rating(rating)
        now = datetime.now(UTC)
        review = cls(
            product_id=str(product_id),
            user_id=str(user_id),
            rating=rating,
            comment=comment,
            created_at=now,
            updated_at=now,
        )
        review.raise_(
            ReviewAdded(
                review_id=review.id,
                product_id=review.product_id,
                user_id=review.user_id,
                rating=rating,
                comment=comment,
                added_at=now,
            )
        )
        return review

    def edit(self, rating=None, comment=None):
        if rating is None and comment is None:
            return
        previous = self.rating
        if rating is not None:
            validate_rating(rating)
            self.rating = rating
        if comment is not None:
            self.comment = comment
        self.updated_at = datetime.now(UTC)
        self.raise_(
            ReviewUpdated(
                review_id=self.id,
                product_id=self.product_id,
                previous_rating=previous,
                rating=self.rating,
                comment=self.comment,
            )
        )
