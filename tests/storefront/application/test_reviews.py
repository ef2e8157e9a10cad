"""Application tests for reviews and the product rating cache."""

import pytest
from protean import current_domain

from storefront.api.auth import actor_fields
from storefront.product.product import Product
from storefront.review.editing import UpdateReview
from storefront.review.rating import RecalculateProductRating
from storefront.review.removal import DeleteReview
from storefront.review.review import Review
from storefront.review.submission import AddReview
from storefront.shared.errors import (
    DuplicateReviewError,
    ForbiddenError,
    InvalidRequestError,
    ProductNotFoundError,
    ReviewNotFoundError,
)
from storefront.shared.principal import Principal


def _process(command):
    return current_domain.process(command, asynchronous=False)


def _add(principal, product_id, rating, comment="Solid"):
    return _process(AddReview(**actor_fields(principal), product_id=product_id, rating=rating, comment=comment))


def _rating(product_id):
    product = current_domain.repository_for(Product).get(product_id)
    return product.rating_average, product.rating_count


class TestAddReview:
    def test_first_review_sets_rating(self, create_product, customer):
        product_id = create_product()
        review_id = _add(customer, product_id, 4)

        review = current_domain.repository_for(Review).get(review_id)
        assert review.rating == 4
        assert review.user_id == customer.user_id
        assert _rating(product_id) == (4.0, 1)

    def test_average_of_several(self, create_product, customer, other_customer):
        product_id = create_product()
        _add(customer, product_id, 5)
        _add(other_customer, product_id, 4)
        _add(Principal("cust-0003"), product_id, 4)

        assert _rating(product_id) == (4.33, 3)

    def test_duplicate_review_leaves_rating_unchanged(self, create_product, customer):
        product_id = create_product()
        _add(customer, product_id, 5)

        with pytest.raises(DuplicateReviewError):
            _add(customer, product_id, 1)

        assert _rating(product_id) == (5.0, 1)

    def test_same_user_may_review_different_products(self, create_product, customer):
        first = create_product(name="A")
        second = create_product(name="B")
        _add(customer, first, 5)
        _add(customer, second, 2)
        assert _rating(second) == (2.0, 1)

    @pytest.mark.parametrize("rating", [0, 6])
    def test_rating_out_of_range(self, create_product, customer, rating):
        product_id = create_product()
        with pytest.raises(InvalidRequestError):
            _add(customer, product_id, rating)
        assert _rating(product_id) == (0.0, 0)

    def test_unknown_product(self, customer):
        with pytest.raises(ProductNotFoundError):
            _add(customer, "missing-product", 5)


class TestUpdateReview:
    def test_author_updates_and_rating_follows(self, create_product, customer, other_customer):
        product_id = create_product()
        review_id = _add(customer, product_id, 2)
        _add(other_customer, product_id, 4)

        _process(
            UpdateReview(**actor_fields(customer), product_id=product_id, review_id=review_id, rating=5, comment="Grew on me")
        )

        review = current_domain.repository_for(Review).get(review_id)
        assert review.rating == 5
        assert review.comment == "Grew on me"
        assert _rating(product_id) == (4.5, 2)

    def test_non_author_is_forbidden(self, create_product, customer, admin):
        product_id = create_product()
        review_id = _add(customer, product_id, 2)

        with pytest.raises(ForbiddenError):
            _process(UpdateReview(**actor_fields(admin), product_id=product_id, review_id=review_id, rating=5))

        assert _rating(product_id) == (2.0, 1)

    def test_review_on_another_product_is_not_found(self, create_product, customer):
        product_id = create_product(name="A")
        other_product = create_product(name="B")
        review_id = _add(customer, product_id, 3)

        with pytest.raises(ReviewNotFoundError):
            _process(UpdateReview(**actor_fields(customer), product_id=other_product, review_id=review_id, rating=1))


class TestDeleteReview:
    def test_deleting_only_review_resets_rating(self, create_product, customer):
        product_id = create_product()
        review_id = _add(customer, product_id, 5)

        _process(DeleteReview(**actor_fields(customer), product_id=product_id, review_id=review_id))

        assert _rating(product_id) == (0.0, 0)
        assert current_domain.repository_for(Review).for_product(product_id) == []

    def test_admin_may_delete(self, create_product, customer, other_customer, admin):
        product_id = create_product()
        review_id = _add(customer, product_id, 1)
        _add(other_customer, product_id, 5)

        _process(DeleteReview(**actor_fields(admin), product_id=product_id, review_id=review_id))

        assert _rating(product_id) == (5.0, 1)

    def test_stranger_is_forbidden(self, create_product, customer, other_customer):
        product_id = create_product()
        review_id = _add(customer, product_id, 1)

        with pytest.raises(ForbiddenError):
            _process(DeleteReview(**actor_fields(other_customer), product_id=product_id, review_id=review_id))

        assert _rating(product_id) == (1.0, 1)

    def test_author_may_review_again_after_deleting(self, create_product, customer):
        product_id = create_product()
        review_id = _add(customer, product_id, 1)
        _process(DeleteReview(**actor_fields(customer), product_id=product_id, review_id=review_id))

        _add(customer, product_id, 4)

        assert _rating(product_id) == (4.0, 1)


class TestRecalculateProductRating:
    def test_repairs_drifted_cache(self, create_product, customer, admin):
        product_id = create_product()
        _add(customer, product_id, 3)

        repo = current_domain.repository_for(Product)
        product = repo.get(product_id)
        product.refresh_rating(5, 9)
        repo.add(product)

        result = _process(RecalculateProductRating(**actor_fields(admin), product_id=product_id))

        assert result == {"rating_average": 3.0, "rating_count": 1}
        assert _rating(product_id) == (3.0, 1)

    def test_requires_admin(self, create_product, customer):
        product_id = create_product()
        with pytest.raises(ForbiddenError):
            _process(RecalculateProductRating(**actor_fields(customer), product_id=product_id))
