"""Application service: Add Review use case."""

from __future__ import annotations

from storefront.application.dto import ReviewDTO, review_to_dto
from storefront.domain.exceptions import NotFoundError
from storefront.domain.model.review import Review
from storefront.domain.model.value_objects import canonical_id
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.review_repository import ReviewRepository
from storefront.domain.service.rating_aggregator import RatingAggregator


class AddReviewHandler:

    def __init__(
        self,
        review_repo: ReviewRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._review_repo = review_repo
        self._product_repo = product_repo

    def handle(self, user_id: str, product_id: str, rating: int, comment: str) -> ReviewDTO:
        """Store a review and fold its score into the product's rating."""
        product_id = canonical_id(product_id)
        if self._product_repo.get_by_id(product_id) is None:
            raise NotFoundError("Product not found")

        review = Review.write(
            product_id=product_id,
            user_id=canonical_id(user_id),
            rating=rating,
            comment=comment,
        )
        self._review_repo.save(review)

        RatingAggregator(self._product_repo, self._review_repo).review_added(review)
        return review_to_dto(review)
