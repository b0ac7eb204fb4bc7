"""Integration tests for the PlaceOrder use case."""

import pytest

from storefront.application.dto import OrderItemSpec
from storefront.application.place_order import PlaceOrderHandler
from storefront.domain.exceptions import (
    InsufficientStockError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from tests.fakes import FakeOrderRepository, FakeProductRepository


class _BrokenOrderRepository(FakeOrderRepository):

    def save(self, order):
        raise InternalError("Could not write orders.json")


def _setup(order_repo=None):
    products = [
        Product(id="1", name="Widget", price=Money.of("15.00"), stock_quantity=100),
        Product(id="2", name="Gadget", price=Money.of("25.00"), stock_quantity=50),
    ]
    order_repo = order_repo or FakeOrderRepository()
    product_repo = FakeProductRepository(products)
    return order_repo, product_repo, PlaceOrderHandler(order_repo, product_repo)


class TestPlaceOrderHappyPath:

    def test_active_by_default_and_stock_reserved(self):
        order_repo, product_repo, handler = _setup()

        dto = handler.handle("alice", [OrderItemSpec("1", 3), OrderItemSpec("2", 5)])

        assert dto.status == "active"
        assert dto.total == "$170.00"
        assert dto.user_id == "alice"
        assert product_repo.stock_of("1") == 97
        assert product_repo.stock_of("2") == 45
        assert order_repo.get_by_id(dto.id).status == OrderStatus.ACTIVE

    def test_pending_order_reserves_nothing(self):
        _, product_repo, handler = _setup()

        dto = handler.handle("alice", [OrderItemSpec("1", 3)], status="pending")

        assert dto.status == "pending"
        assert product_repo.stock_of("1") == 100
        assert product_repo.save_count == 0

    def test_confirmed_is_accepted_as_active(self):
        _, product_repo, handler = _setup()
        dto = handler.handle("alice", [OrderItemSpec("1", 1)], status="confirmed")
        assert dto.status == "active"
        assert product_repo.stock_of("1") == 99

    def test_integer_product_ids_are_normalized(self):
        _, product_repo, handler = _setup()
        dto = handler.handle("alice", [OrderItemSpec(2, 1)])
        assert dto.items[0].product_id == "2"
        assert product_repo.stock_of("2") == 49

    def test_price_snapshot_survives_price_change(self):
        order_repo, product_repo, handler = _setup()
        dto = handler.handle("alice", [OrderItemSpec("1", 2)])

        widget = product_repo.get_by_id("1")
        widget.price = Money.of("99.00")
        product_repo.save(widget)

        order = order_repo.get_by_id(dto.id)
        assert order.items[0].unit_price == Money.of("15.00")
        assert order.total == Money.of("30.00")

    def test_line_item_names_come_from_catalog(self):
        _, _, handler = _setup()
        dto = handler.handle("alice", [OrderItemSpec("2", 1)])
        assert dto.items[0].product_name == "Gadget"
        assert dto.items[0].unit_price == "$25.00"


class TestPlaceOrderValidation:

    def test_no_items_rejected(self):
        order_repo, _, handler = _setup()
        with pytest.raises(ValidationError, match="No items in order"):
            handler.handle("alice", [])
        assert order_repo.list_all() == []

    def test_unknown_product_rejected(self):
        order_repo, product_repo, handler = _setup()
        with pytest.raises(NotFoundError, match="not found"):
            handler.handle("alice", [OrderItemSpec("1", 1), OrderItemSpec("9", 1)])
        assert order_repo.list_all() == []
        assert product_repo.stock_of("1") == 100

    def test_insufficient_stock_names_product(self):
        order_repo, product_repo, handler = _setup()
        with pytest.raises(InsufficientStockError, match="Insufficient stock for product: Gadget"):
            handler.handle("alice", [OrderItemSpec("1", 10), OrderItemSpec("2", 51)])
        assert order_repo.list_all() == []
        assert product_repo.stock_of("1") == 100
        assert product_repo.stock_of("2") == 50

    def test_zero_quantity_rejected(self):
        _, _, handler = _setup()
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle("alice", [OrderItemSpec("1", 0)])

    def test_unknown_status_rejected(self):
        _, _, handler = _setup()
        with pytest.raises(ValidationError, match="Unknown order status"):
            handler.handle("alice", [OrderItemSpec("1", 1)], status="shipped")

    @pytest.mark.parametrize("status", ["cancelled", "delivered"])
    def test_terminal_status_rejected(self, status):
        _, product_repo, handler = _setup()
        with pytest.raises(ValidationError, match="cannot be placed"):
            handler.handle("alice", [OrderItemSpec("1", 1)], status=status)
        assert product_repo.stock_of("1") == 100

    def test_reservation_given_back_when_order_write_fails(self):
        _, product_repo, handler = _setup(_BrokenOrderRepository())
        with pytest.raises(InternalError):
            handler.handle("alice", [OrderItemSpec("1", 4), OrderItemSpec("2", 1)])
        assert product_repo.stock_of("1") == 100
        assert product_repo.stock_of("2") == 50
