"""Abstract repository for Review aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.review import Review


class ReviewRepository(ABC):

    @abstractmethod
    def next_id(self) -> str:
        """Generate the next unique review ID."""

    @abstractmethod
    def get_by_id(self, review_id: str) -> Review | None:
        """Return a review by its ID, or None if not found."""

    @abstractmethod
    def list_by_product(self, product_id: str) -> list[Review]:
        """Return every review of a product, newest first."""

    @abstractmethod
    def save(self, review: Review) -> None:
        """Persist a new or updated review (compare-and-swap on ``version``)."""

    @abstractmethod
    def delete(self, review_id: str) -> None:
        """Remove a review.  Raises NotFoundError if it does not exist."""
