"""Application service: Set Stock use case (stock take by an admin)."""

from __future__ import annotations

from storefront.application.dto import ProductDTO, product_to_dto
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.inventory_ledger import (
    DEFAULT_MAX_ATTEMPTS,
    InventoryLedger,
)


class SetStockHandler:

    def __init__(
        self,
        product_repo: ProductRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._product_repo = product_repo
        self._max_attempts = max_attempts

    def handle(self, product_id: str, quantity: int) -> ProductDTO:
        """Set the absolute stock level of a product."""
        ledger = InventoryLedger(self._product_repo, self._max_attempts)
        return product_to_dto(ledger.restock(product_id, quantity))
