"""Domain service: Rating Aggregator.

Keeps a product's ``rating``/``num_reviews`` consistent with its reviews.
Review writes apply a delta to the stored sum and count; ``recompute``
re-reads the whole review set and is the consistency backstop, used when
a delta cannot be applied and by the reconciliation pass.

The incremental updates run after the review itself was written, so
they never raise on a lost race: a product that stays contended is left
for ``reconcile_all`` with a warning.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from storefront.domain.exceptions import (
    ConcurrencyConflictError,
    NotFoundError,
    ValidationError,
)
from storefront.domain.model.product import Product
from storefront.domain.model.review import Review
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.review_repository import ReviewRepository
from storefront.domain.service.inventory_ledger import DEFAULT_MAX_ATTEMPTS

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RatingCorrection:
    """A product whose stored aggregate disagreed with its reviews."""

    product_id: str
    product_name: str
    old_rating: float
    old_num_reviews: int
    new_rating: float
    new_num_reviews: int


class RatingAggregator:

    def __init__(
        self,
        product_repo: ProductRepository,
        review_repo: ReviewRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._product_repo = product_repo
        self._review_repo = review_repo
        self._max_attempts = max_attempts

    # --- Incremental updates --------------------------------------------------

    def review_added(self, review: Review) -> None:
        value = review.rating.value
        self._apply(review.product_id, lambda p: p.add_rating(value))

    def review_changed(self, product_id: str, old: int, new: int) -> None:
        if old != new:
            self._apply(product_id, lambda p: p.replace_rating(old, new))

    def review_removed(self, review: Review) -> None:
        value = review.rating.value
        self._apply(review.product_id, lambda p: p.remove_rating(value))

    # --- Full recomputation ---------------------------------------------------

    def recompute(self, product_id: str) -> Product:
        """Rewrite the aggregate from the full review set.  Idempotent."""
        for _ in range(self._max_attempts):
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                raise NotFoundError(f"Product '{product_id}' not found")
            ratings = [r.rating.value for r in self._review_repo.list_by_product(product_id)]
            product.reset_ratings(ratings)
            try:
                self._product_repo.save(product)
            except ConcurrencyConflictError:
                continue
            logger.info(
                "recomputed rating of %s: %.2f over %d review(s)",
                product.name, product.rating, product.num_reviews,
            )
            return product
        raise ConcurrencyConflictError(
            f"Could not recompute rating of product '{product_id}', please retry"
        )

    def reconcile_all(self) -> list[RatingCorrection]:
        """Recompute every product; report those whose aggregate was wrong."""
        corrections: list[RatingCorrection] = []
        for stale in self._product_repo.list_all():
            fresh = self.recompute(stale.id)
            if (fresh.rating_total, fresh.num_reviews) != (stale.rating_total, stale.num_reviews):
                corrections.append(
                    RatingCorrection(
                        product_id=fresh.id,
                        product_name=fresh.name,
                        old_rating=stale.rating,
                        old_num_reviews=stale.num_reviews,
                        new_rating=fresh.rating,
                        new_num_reviews=fresh.num_reviews,
                    )
                )
        if corrections:
            logger.warning("reconciled %d drifted rating aggregate(s)", len(corrections))
        return corrections

    # --- Internal helpers -----------------------------------------------------

    def _apply(self, product_id: str, change: Callable[[Product], None]) -> None:
        for _ in range(self._max_attempts):
            product = self._product_repo.get_by_id(product_id)
            if product is None:
                logger.warning("rating update skipped, product '%s' is gone", product_id)
                return
            try:
                change(product)
            except ValidationError:
                # The stored counters drifted; rebuild them from the reviews.
                logger.warning("rating aggregate of %s drifted", product.name)
                self._recompute_or_defer(product_id)
                return
            try:
                self._product_repo.save(product)
            except ConcurrencyConflictError:
                continue
            return

        logger.warning("rating update of product '%s' kept conflicting", product_id)
        self._recompute_or_defer(product_id)

    def _recompute_or_defer(self, product_id: str) -> None:
        try:
            self.recompute(product_id)
        except ConcurrencyConflictError:
            logger.warning(
                "rating of product '%s' is stale until the next reconciliation", product_id
            )
