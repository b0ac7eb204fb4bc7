"""Domain service: Inventory Ledger.

The ledger is the only writer of a product's stock counter.  It applies
a batch of stock lines as one unit, using a two-phase approach:

  Phase 1 — load and validate every product.  Fails fast before any
            mutation.
  Phase 2 — mutate and persist each product with a compare-and-swap on
            its version.

If a write in phase 2 fails, the lines already written in this attempt
are undone.  A lost race against a concurrent writer is then retried
from a fresh read; any other failure is raised.  A batch either lands
completely or not at all.
"""

from __future__ import annotations

import logging

from storefront.domain.exceptions import (
    ConcurrencyConflictError,
    DomainException,
    InsufficientStockError,
    InternalError,
    NotFoundError,
)
from storefront.domain.model.inventory import StockLine, StockMovement, merge_lines
from storefront.domain.model.product import Product
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 3

# Compensating writes must not be lost, so they get more room than a batch.
_COMPENSATION_ATTEMPT_FACTOR = 5


class InventoryLedger:

    def __init__(
        self,
        product_repo: ProductRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self._product_repo = product_repo
        self._max_attempts = max_attempts

    # --- Queries --------------------------------------------------------------

    def check_availability(self, lines: list[StockLine]) -> dict[str, Product]:
        """Validate that every line could be reserved right now.

        Read-only.  Returns the loaded products keyed by ID.
        """
        deltas = {pid: -qty for pid, qty in merge_lines(lines).items()}
        products = self._load(deltas)
        self._check_supply(products, deltas)
        return products

    # --- Commands -------------------------------------------------------------

    def reserve(self, lines: list[StockLine]) -> list[StockMovement]:
        """Take stock for every line, or for none of them.

        Raises NotFoundError / InsufficientStockError before any write,
        ConcurrencyConflictError once retries are exhausted.
        """
        deltas = {pid: -qty for pid, qty in merge_lines(lines).items()}
        return self._apply_batch(deltas, validate=True, action="reserve")

    def release(self, lines: list[StockLine]) -> list[StockMovement]:
        """Give back stock for every line, or for none of them."""
        deltas = dict(merge_lines(lines))
        return self._apply_batch(deltas, validate=False, action="release")

    def revert(self, movements: list[StockMovement]) -> None:
        """Undo movements returned by ``reserve`` or ``release``."""
        for movement in reversed(movements):
            if movement.delta:
                self._force(movement.inverse(), action="revert")

    def restock(self, product_id: str, quantity: int) -> Product:
        """Set the absolute stock level of a product (stock take)."""
        for _ in range(self._max_attempts):
            product = self._get(product_id)
            before = product.stock_quantity
            product.set_stock(quantity)
            try:
                self._product_repo.save(product)
            except ConcurrencyConflictError:
                logger.warning("restock of %s conflicted, retrying", product.name)
                continue
            logger.info("restock %s: stock %d -> %d", product.name, before, quantity)
            return product
        raise ConcurrencyConflictError(
            f"Could not restock product '{product_id}' after "
            f"{self._max_attempts} attempts, please retry"
        )

    # --- Internal helpers -----------------------------------------------------

    def _apply_batch(
        self,
        deltas: dict[str, int],
        validate: bool,
        action: str,
    ) -> list[StockMovement]:
        for attempt in range(1, self._max_attempts + 1):
            # Phase 1: load (and validate) against a fresh read
            products = self._load(deltas)
            if validate:
                self._check_supply(products, deltas)

            # Phase 2: mutate and persist
            applied: list[StockMovement] = []
            try:
                for product_id, delta in deltas.items():
                    product = products[product_id]
                    before = product.stock_quantity
                    movement = StockMovement(product_id, product.adjust_stock(delta))
                    self._product_repo.save(product)
                    applied.append(movement)
                    logger.info(
                        "%s %s: stock %d -> %d",
                        action, product.name, before, product.stock_quantity,
                    )
            except ConcurrencyConflictError:
                logger.warning(
                    "%s conflicted on attempt %d/%d, undoing %d line(s)",
                    action, attempt, self._max_attempts, len(applied),
                )
                self.revert(applied)
                continue
            except DomainException:
                logger.error(
                    "%s failed after %d line(s), undoing them", action, len(applied)
                )
                self.revert(applied)
                raise
            return applied

        raise ConcurrencyConflictError(
            f"Could not {action} stock after {self._max_attempts} attempts, "
            f"please retry"
        )

    def _force(self, movement: StockMovement, action: str) -> None:
        """Apply a compensating movement, retrying until it lands."""
        for _ in range(self._max_attempts * _COMPENSATION_ATTEMPT_FACTOR):
            product = self._product_repo.get_by_id(movement.product_id)
            if product is None:
                break
            applied = product.adjust_stock(movement.delta)
            try:
                self._product_repo.save(product)
            except ConcurrencyConflictError:
                continue
            if applied != movement.delta:
                logger.warning(
                    "%s %s applied %+d instead of %+d (stock floor)",
                    action, product.name, applied, movement.delta,
                )
            return
        logger.error(
            "%s of %+d on product '%s' could not be written",
            action, movement.delta, movement.product_id,
        )
        raise InternalError(
            f"Stock of product '{movement.product_id}' could not be restored"
        )

    def _load(self, deltas: dict[str, int]) -> dict[str, Product]:
        return {product_id: self._get(product_id) for product_id in deltas}

    def _get(self, product_id: str) -> Product:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise NotFoundError(f"Product '{product_id}' not found")
        return product

    @staticmethod
    def _check_supply(products: dict[str, Product], deltas: dict[str, int]) -> None:
        for product_id, delta in deltas.items():
            product = products[product_id]
            if delta < 0 and not product.can_supply(-delta):
                raise InsufficientStockError(
                    product.name, requested=-delta, available=product.stock_quantity
                )
