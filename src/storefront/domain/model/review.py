"""Review aggregate.

A user may review the same product any number of times; every review
counts towards the product's rating aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Rating

MIN_COMMENT_LENGTH = 3
MAX_COMMENT_LENGTH = 1000


def _validate_comment(comment: str) -> str:
    text = (comment or "").strip()
    if not MIN_COMMENT_LENGTH <= len(text) <= MAX_COMMENT_LENGTH:
        raise ValidationError(
            f"Comment must be between {MIN_COMMENT_LENGTH} and "
            f"{MAX_COMMENT_LENGTH} characters"
        )
    return text


@dataclass
class Review:

    id: str | None
    product_id: str
    user_id: str
    rating: Rating
    comment: str
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = 0

    @staticmethod
    def write(product_id: str, user_id: str, rating: int, comment: str) -> Review:
        return Review(
            id=None,
            product_id=product_id,
            user_id=user_id,
            rating=Rating(rating),
            comment=_validate_comment(comment),
        )

    def edit(self, rating: int, comment: str) -> int:
        """Replace score and text; returns the previous score."""
        new_rating = Rating(rating)
        new_comment = _validate_comment(comment)
        previous = self.rating.value
        self.rating = new_rating
        self.comment = new_comment
        return previous

    def is_written_by(self, user_id: str) -> bool:
        return self.user_id == user_id
