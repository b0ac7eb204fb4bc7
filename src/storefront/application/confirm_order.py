"""Application service: Confirm Order use case.

Orchestrates the Order aggregate (state transition) and the inventory
ledger (stock reservation) to confirm a pending order.
"""

from __future__ import annotations

import logging

from storefront.application.dto import OrderDTO, current_products, order_to_dto
from storefront.domain.exceptions import (
    DomainException,
    NotFoundError,
    ValidationError,
)
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.inventory_ledger import (
    DEFAULT_MAX_ATTEMPTS,
    InventoryLedger,
)

logger = logging.getLogger(__name__)


class ConfirmOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._max_attempts = max_attempts

    def handle(self, order_id: str, status: str | None = None) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order #{order_id} not found")

        target = OrderStatus.parse(status) if status is not None else OrderStatus.ACTIVE
        if target is not OrderStatus.ACTIVE:
            raise ValidationError("An order can only be confirmed as active")

        # Transition first, so a non-pending order never touches stock
        order.confirm()

        # Stock may have been taken since placement: the ledger re-validates
        ledger = InventoryLedger(self._product_repo, self._max_attempts)
        movements = ledger.reserve(order.stock_lines())
        try:
            self._order_repo.save(order)
        except DomainException:
            # Lost the race for this order (or the write failed)
            ledger.revert(movements)
            raise

        logger.info("order #%s confirmed, stock reserved", order.id)
        return order_to_dto(order, current_products(self._product_repo, [order]))
