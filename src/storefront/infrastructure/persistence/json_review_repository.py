"""JSON-file-backed implementation of ReviewRepository."""

from __future__ import annotations

from datetime import datetime
from pathlib import Path

from storefront.domain.exceptions import NotFoundError
from storefront.domain.model.review import Review
from storefront.domain.model.value_objects import Rating, canonical_id
from storefront.domain.repository.review_repository import ReviewRepository
from storefront.infrastructure.persistence.json_file import LEGACY_VERSION, JsonCollection


class JsonReviewRepository(ReviewRepository):

    def __init__(self, file_path: Path) -> None:
        self._collection = JsonCollection(file_path)

    # --- ReviewRepository interface -------------------------------------------

    def next_id(self) -> str:
        return self._collection.next_id()

    def get_by_id(self, review_id: str) -> Review | None:
        raw = self._collection.find(canonical_id(review_id))
        return self._to_domain(raw) if raw is not None else None

    def list_by_product(self, product_id: str) -> list[Review]:
        product_id = canonical_id(product_id)
        reviews = [
            self._to_domain(raw)
            for raw in self._collection.load()
            if canonical_id(raw["product_id"]) == product_id
        ]
        reviews.sort(key=lambda r: r.created_at, reverse=True)
        return reviews

    def save(self, review: Review) -> None:
        review.id, review.version = self._collection.save_record(
            self._to_raw(review), expected_version=review.version
        )

    def delete(self, review_id: str) -> None:
        if not self._collection.remove(canonical_id(review_id)):
            raise NotFoundError("Review not found")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(review: Review) -> dict:
        return {
            "id": review.id,
            "product_id": review.product_id,
            "user_id": review.user_id,
            "rating": review.rating.value,
            "comment": review.comment,
            "created_at": review.created_at.isoformat(),
        }

    @staticmethod
    def _to_domain(raw: dict) -> Review:
        return Review(
            id=canonical_id(raw["id"]),
            product_id=canonical_id(raw["product_id"]),
            user_id=raw["user_id"],
            rating=Rating(raw["rating"]),
            comment=raw["comment"],
            created_at=datetime.fromisoformat(raw["created_at"]),
            version=raw.get("version", LEGACY_VERSION),
        )
