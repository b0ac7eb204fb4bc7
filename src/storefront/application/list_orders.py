"""Application service: List Orders use case (query).

Buyers see their own orders; the admin console sees everything, with an
optional status filter.  Line items carry the current product details.
"""

from __future__ import annotations

from storefront.application.dto import OrderDTO, current_products, order_to_dto
from storefront.domain.model.order import OrderStatus
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository


class ListOrdersHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo

    def handle(
        self,
        user_id: str | None = None,
        status: str | None = None,
    ) -> list[OrderDTO]:
        wanted = OrderStatus.parse(status) if status else None

        if user_id is not None:
            orders = self._order_repo.list_by_user(user_id)
            if wanted is not None:
                orders = [o for o in orders if o.status is wanted]
        else:
            orders = self._order_repo.list_all(status=wanted)

        products = current_products(self._product_repo, orders)
        return [order_to_dto(order, products) for order in orders]
