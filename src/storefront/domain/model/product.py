"""Product aggregate.

Only the fields the order and review engines care about live here: the
price snapshot source, the stock counter and the rating aggregate. Every
other catalog attribute belongs to the catalog subsystem.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Product:
    """A product in the catalog.

    ``in_stock`` is derived from ``stock_quantity`` rather than stored, so
    ``in_stock == (stock_quantity > 0)`` holds after every mutation.

    ``version`` is bumped by the repository on every successful write and
    is used as the compare-and-swap token for concurrent updates.
    """

    id: str
    name: str
    price: Money
    stock_quantity: int = 0
    rating_total: int = 0
    num_reviews: int = 0
    version: int = 0

    # --- Stock ----------------------------------------------------------------

    @property
    def in_stock(self) -> bool:
        return self.stock_quantity > 0

    def can_supply(self, quantity: int) -> bool:
        return self.in_stock and self.stock_quantity >= quantity

    def adjust_stock(self, delta: int) -> int:
        """Apply *delta* to the counter, clamped at zero.

        Returns the change actually applied, which differs from *delta*
        only when a decrement hits the floor.
        """
        new_quantity = max(0, self.stock_quantity + delta)
        applied = new_quantity - self.stock_quantity
        self.stock_quantity = new_quantity
        return applied

    def set_stock(self, quantity: int) -> None:
        if quantity < 0:
            raise ValidationError("Stock quantity cannot be negative")
        self.stock_quantity = quantity

    # --- Rating aggregate -----------------------------------------------------

    @property
    def rating(self) -> float:
        if self.num_reviews == 0:
            return 0.0
        return self.rating_total / self.num_reviews

    def add_rating(self, value: int) -> None:
        self.rating_total += value
        self.num_reviews += 1

    def remove_rating(self, value: int) -> None:
        if self.num_reviews == 0 or self.rating_total < value:
            raise ValidationError(
                f"Rating aggregate of {self.name} has no review worth {value} to remove"
            )
        self.rating_total -= value
        self.num_reviews -= 1

    def replace_rating(self, old: int, new: int) -> None:
        if self.num_reviews == 0:
            raise ValidationError(f"Rating aggregate of {self.name} is empty")
        self.rating_total += new - old

    def reset_ratings(self, values: list[int]) -> None:
        self.rating_total = sum(values)
        self.num_reviews = len(values)

