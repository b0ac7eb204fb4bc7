"""Stock lines and stock movements.

A StockLine is a request ("take 3 of product 7"); a StockMovement is what
actually happened to a product's counter, so it can be reverted exactly.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.value_objects import Quantity


@dataclass(frozen=True)
class StockLine:
    """A (product, quantity) pair the ledger applies as one unit."""

    product_id: str
    quantity: Quantity


@dataclass(frozen=True)
class StockMovement:
    """A signed change applied to one product's ``stock_quantity``."""

    product_id: str
    delta: int

    def inverse(self) -> StockMovement:
        return StockMovement(self.product_id, -self.delta)


def merge_lines(lines: list[StockLine]) -> dict[str, int]:
    """Combine lines for the same product, preserving first-seen order.

    Two lines for one product must be checked against their combined
    quantity, not each against the full stock.
    """
    merged: dict[str, int] = {}
    for line in lines:
        merged[line.product_id] = merged.get(line.product_id, 0) + line.quantity.value
    return merged
