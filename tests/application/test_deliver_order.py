"""Integration tests for the DeliverOrder use case."""

import pytest

from storefront.application.cancel_order import CancelOrderHandler
from storefront.application.deliver_order import DeliverOrderHandler
from storefront.application.dto import OrderItemSpec
from storefront.application.place_order import PlaceOrderHandler
from storefront.domain.exceptions import IllegalTransitionError, NotFoundError
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeOrderRepository, FakeProductRepository


def _setup(status=None):
    order_repo = FakeOrderRepository()
    product_repo = FakeProductRepository([
        Product(id="1", name="Widget", price=Money.of("15.00"), stock_quantity=10),
    ])
    dto = PlaceOrderHandler(order_repo, product_repo).handle(
        "alice", [OrderItemSpec("1", 4)], status=status
    )
    return order_repo, product_repo, dto.id


class TestDeliverOrder:

    def test_active_order_delivered(self):
        order_repo, product_repo, order_id = _setup()

        dto = DeliverOrderHandler(order_repo, product_repo).handle(order_id)

        assert dto.status == "delivered"
        assert dto.delivered_by_admin is True
        assert dto.delivered_at is not None
        # Stock was taken at placement and stays taken
        assert product_repo.stock_of("1") == 6

    def test_pending_order_cannot_be_delivered(self):
        order_repo, product_repo, order_id = _setup(status="pending")

        with pytest.raises(IllegalTransitionError, match="cannot be delivered"):
            DeliverOrderHandler(order_repo, product_repo).handle(order_id)

        assert order_repo.get_by_id(order_id).status == OrderStatus.PENDING

    def test_deliver_twice_rejected(self):
        order_repo, product_repo, order_id = _setup()
        handler = DeliverOrderHandler(order_repo, product_repo)
        handler.handle(order_id)

        with pytest.raises(IllegalTransitionError, match="already delivered"):
            handler.handle(order_id)

    def test_cancelled_order_cannot_be_delivered(self):
        order_repo, product_repo, order_id = _setup()
        CancelOrderHandler(order_repo, product_repo).handle(order_id, by_admin=True)

        with pytest.raises(IllegalTransitionError):
            DeliverOrderHandler(order_repo, product_repo).handle(order_id)

        assert product_repo.stock_of("1") == 10

    def test_missing_order_rejected(self):
        order_repo, product_repo, _ = _setup()
        with pytest.raises(NotFoundError):
            DeliverOrderHandler(order_repo, product_repo).handle("77")
