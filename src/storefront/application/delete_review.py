"""Application service: Delete Review use case.

The author or an admin may delete a review.
"""

from __future__ import annotations

from storefront.domain.exceptions import NotFoundError, PermissionDeniedError
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.review_repository import ReviewRepository
from storefront.domain.service.rating_aggregator import RatingAggregator


class DeleteReviewHandler:

    def __init__(
        self,
        review_repo: ReviewRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._review_repo = review_repo
        self._product_repo = product_repo

    def handle(self, review_id: str, user_id: str, is_admin: bool = False) -> None:
        review = self._review_repo.get_by_id(review_id)
        if review is None:
            raise NotFoundError("Review not found")
        if not is_admin and not review.is_written_by(user_id):
            raise PermissionDeniedError("Not authorized to delete this review")

        self._review_repo.delete(review.id)  # type: ignore[arg-type]
        RatingAggregator(self._product_repo, self._review_repo).review_removed(review)
