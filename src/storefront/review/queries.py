"""Review read side."""

from protean.utils.globals import current_domain

from storefront.review.review import Review


def review_view(review: Review) -> dict:
    return {
        "id": str(review.id),
        "product_id": str(review.product_id),
        "user_id": str(review.user_id),
        "rating": review.rating,
        "comment": review.comment,
        "created_at": review.created_at.isoformat() if review.created_at else None,
        "updated_at": review.updated_at.isoformat() if review.updated_at else None,
    }


def reviews_for_product(product_id) -> list[dict]:
    return [review_view(r) for r in current_domain.repository_for(Review).for_product(product_id)]
