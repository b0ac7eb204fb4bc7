"""Application service: Cancel Order use case.

Both the buyer and an admin can cancel.  If the order was active its
reserved stock is released; a pending order never reserved anything, so
nothing is released for it.

Stock is released before the order is written.  The order write is a
compare-and-swap; when it fails the release is reverted, so of two
racing cancellations only the winner keeps its release.
"""

from __future__ import annotations

import logging

from storefront.application.dto import OrderDTO, current_products, order_to_dto
from storefront.domain.exceptions import DomainException, NotFoundError
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.inventory_ledger import (
    DEFAULT_MAX_ATTEMPTS,
    InventoryLedger,
)

logger = logging.getLogger(__name__)

ADMIN_CANCEL_REMINDER = (
    "You didn't send WhatsApp message for order confirmation."
)


class CancelOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._max_attempts = max_attempts

    def handle(
        self,
        order_id: str,
        by_admin: bool,
        user_id: str | None = None,
    ) -> OrderDTO:
        """Cancel an order.

        Args:
            order_id: The order to cancel.
            by_admin: True for the admin console, False for the buyer.
            user_id: The buyer; required when ``by_admin`` is False.  Another
                user's order is reported as not found.
        """
        order = self._order_repo.get_by_id(order_id)
        if order is None or (not by_admin and order.user_id != user_id):
            raise NotFoundError(f"Order #{order_id} not found")

        held = order.status.holds_reservation

        # Transition first, so a terminal order never touches stock
        order.cancel(by_admin=by_admin)

        ledger = InventoryLedger(self._product_repo, self._max_attempts)
        movements = ledger.release(order.stock_lines()) if held else []
        try:
            self._order_repo.save(order)
        except DomainException:
            # Lost the race for this order (or the write failed)
            ledger.revert(movements)
            raise

        logger.info(
            "order #%s cancelled by %s%s",
            order.id,
            "admin" if by_admin else f"user {user_id}",
            ", stock released" if held else "",
        )
        return order_to_dto(order, current_products(self._product_repo, [order]))
