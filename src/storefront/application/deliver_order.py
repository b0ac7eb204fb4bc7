"""Application service: Deliver Order use case.

Stock was taken when the order became active, so delivery only moves
the order to its terminal status.
"""

from __future__ import annotations

import logging

from storefront.application.dto import OrderDTO, current_products, order_to_dto
from storefront.domain.exceptions import NotFoundError
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class DeliverOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(self, order_id: str) -> OrderDTO:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise NotFoundError(f"Order #{order_id} not found")

        order.deliver()
        self._order_repo.save(order)

        logger.info("order #%s delivered", order.id)
        return order_to_dto(order, current_products(self._product_repo, [order]))
