"""Application service: Reconcile Ratings use case.

Rebuilds every product's rating aggregate from its reviews and reports
the products that had drifted.
"""

from __future__ import annotations

from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.review_repository import ReviewRepository
from storefront.domain.service.rating_aggregator import (
    RatingAggregator,
    RatingCorrection,
)


class ReconcileRatingsHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
    ) -> None:
        self._product_repo = product_repo
        self._review_repo = review_repo

    def handle(self) -> list[RatingCorrection]:
        return RatingAggregator(self._product_repo, self._review_repo).reconcile_all()
