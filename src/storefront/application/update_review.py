"""Application service: Update Review use case.

Only the author may edit a review.
"""

from __future__ import annotations

from storefront.application.dto import ReviewDTO, review_to_dto
from storefront.domain.exceptions import NotFoundError, PermissionDeniedError
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.review_repository import ReviewRepository
from storefront.domain.service.rating_aggregator import RatingAggregator


class UpdateReviewHandler:

    def __init__(
        self,
        review_repo: ReviewRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._review_repo = review_repo
        self._product_repo = product_repo

    def handle(self, review_id: str, user_id: str, rating: int, comment: str) -> ReviewDTO:
        review = self._review_repo.get_by_id(review_id)
        if review is None:
            raise NotFoundError("Review not found")
        if not review.is_written_by(user_id):
            raise PermissionDeniedError("Not authorized to edit this review")

        previous = review.edit(rating=rating, comment=comment)
        self._review_repo.save(review)

        RatingAggregator(self._product_repo, self._review_repo).review_changed(
            review.product_id, old=previous, new=review.rating.value
        )
        return review_to_dto(review)
