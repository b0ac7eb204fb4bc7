"""Application service: Place Order use case.

This is the only place that coordinates a new order with the catalog:
product lookup, stock check, price snapshot, and (for orders placed
without the pending step) the stock reservation.
"""

from __future__ import annotations

import logging

from storefront.application.dto import OrderDTO, OrderItemSpec, order_to_dto
from storefront.domain.exceptions import DomainException, ValidationError
from storefront.domain.model.inventory import StockLine
from storefront.domain.model.order import Order, OrderLineItem, OrderStatus
from storefront.domain.model.value_objects import Quantity, canonical_id
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.service.inventory_ledger import (
    DEFAULT_MAX_ATTEMPTS,
    InventoryLedger,
)

logger = logging.getLogger(__name__)


class PlaceOrderHandler:

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
        user_id: str,
        item_specs: list[OrderItemSpec],
        status: str | None = None,
    ) -> OrderDTO:
        """Place a new order.

        Steps:
        1. Decide the initial status: ``pending`` if asked for, else active.
        2. Check every line against current stock (no effects on failure).
        3. Build OrderLineItems with *current* prices (snapshot).
        4. For an active order, reserve stock for all lines as one batch.
        5. Persist; if that fails, give the reservation back.
        """
        if not item_specs:
            raise ValidationError("No items in order.")

        initial = OrderStatus.parse(status) if status is not None else OrderStatus.ACTIVE
        lines = [
            StockLine(canonical_id(spec.product_id), Quantity(spec.quantity))
            for spec in item_specs
        ]

        ledger = InventoryLedger(self._product_repo, self._max_attempts)
        products = ledger.check_availability(lines)

        line_items = [
            OrderLineItem(
                product_id=line.product_id,
                product_name=products[line.product_id].name,
                quantity=line.quantity,
                unit_price=products[line.product_id].price,  # <-- price snapshot
            )
            for line in lines
        ]
        order = Order.place(user_id=user_id, items=line_items, status=initial)

        movements = ledger.reserve(lines) if initial is OrderStatus.ACTIVE else []
        try:
            self._order_repo.save(order)
        except DomainException:
            ledger.revert(movements)
            raise

        logger.info(
            "order #%s placed by user %s as %s, total %s",
            order.id, order.user_id, order.status.value, order.total,
        )
        return order_to_dto(order)
