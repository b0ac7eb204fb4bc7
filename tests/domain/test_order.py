"""Unit tests for the Order aggregate and its transition table."""

from datetime import datetime, timezone

import pytest

from storefront.domain.exceptions import IllegalTransitionError, ValidationError
from storefront.domain.model.inventory import StockLine
from storefront.domain.model.order import (
    ALLOWED_TRANSITIONS,
    Order,
    OrderLineItem,
    OrderStatus,
)
from storefront.domain.model.value_objects import Money, Quantity


def _make_item(product_id: str = "1", qty: int = 1, price: str = "15.00") -> OrderLineItem:
    """Helper to build a valid line item."""
    return OrderLineItem(
        product_id=product_id,
        product_name=f"Product {product_id}",
        quantity=Quantity(qty),
        unit_price=Money.of(price),
    )


def _order(status: OrderStatus) -> Order:
    order = Order.place("u1", [_make_item()], OrderStatus.PENDING)
    order.id = "7"
    order.status = status
    return order


class TestOrderPlacement:

    def test_happy_path(self):
        order = Order.place("alice", [_make_item(qty=2, price="10.00")])
        assert order.user_id == "alice"
        assert order.status == OrderStatus.PENDING
        assert order.total == Money.of("20.00")
        assert order.id is None  # assigned by repository

    def test_total_is_sum_of_line_items(self):
        items = [
            _make_item("1", qty=3, price="15.00"),
            _make_item("2", qty=5, price="25.00"),
        ]
        order = Order.place("bob", items, OrderStatus.ACTIVE)
        assert order.total == Money.of("170.00")
        assert order.status == OrderStatus.ACTIVE

    def test_no_items_rejected(self):
        with pytest.raises(ValidationError, match="No items in order"):
            Order.place("alice", [])

    def test_missing_user_rejected(self):
        with pytest.raises(ValidationError, match="User is required"):
            Order.place("  ", [_make_item()])

    @pytest.mark.parametrize("status", [OrderStatus.CANCELLED, OrderStatus.DELIVERED])
    def test_terminal_initial_status_rejected(self, status):
        with pytest.raises(ValidationError, match="cannot be placed"):
            Order.place("alice", [_make_item()], status)

    def test_total_is_not_recomputed(self):
        order = Order.place("alice", [_make_item(price="10.00")])
        order.items[0] = _make_item(price="99.00")
        assert order.total == Money.of("10.00")

    def test_stock_lines(self):
        order = Order.place("alice", [_make_item("1", 2), _make_item("2", 1)])
        assert order.stock_lines() == [
            StockLine("1", Quantity(2)),
            StockLine("2", Quantity(1)),
        ]


class TestStatusParsing:

    def test_confirmed_is_alias_of_active(self):
        assert OrderStatus.parse("confirmed") is OrderStatus.ACTIVE
        assert OrderStatus.parse(" Active ") is OrderStatus.ACTIVE

    def test_unknown_rejected(self):
        with pytest.raises(ValidationError, match="Unknown order status"):
            OrderStatus.parse("shipped")

    def test_terminal_and_reservation_flags(self):
        assert OrderStatus.CANCELLED.is_terminal
        assert OrderStatus.DELIVERED.is_terminal
        assert not OrderStatus.PENDING.is_terminal
        assert OrderStatus.ACTIVE.holds_reservation
        assert not OrderStatus.PENDING.holds_reservation


class TestTransitionTable:

    def test_table_matches_lifecycle(self):
        assert ALLOWED_TRANSITIONS == {
            OrderStatus.PENDING: {OrderStatus.ACTIVE, OrderStatus.CANCELLED},
            OrderStatus.ACTIVE: {OrderStatus.CANCELLED, OrderStatus.DELIVERED},
            OrderStatus.CANCELLED: set(),
            OrderStatus.DELIVERED: set(),
        }

    def test_confirm_pending(self):
        order = _order(OrderStatus.PENDING)
        order.confirm()
        assert order.status == OrderStatus.ACTIVE

    @pytest.mark.parametrize(
        "status", [OrderStatus.ACTIVE, OrderStatus.CANCELLED, OrderStatus.DELIVERED]
    )
    def test_confirm_non_pending_rejected(self, status):
        order = _order(status)
        with pytest.raises(IllegalTransitionError, match=status.value):
            order.confirm()
        assert order.status == status

    def test_cancel_records_actor_and_time(self):
        now = datetime(2024, 5, 1, tzinfo=timezone.utc)
        order = _order(OrderStatus.ACTIVE)
        order.cancel(by_admin=True, now=now)
        assert order.status == OrderStatus.CANCELLED
        assert order.cancelled_at == now
        assert order.cancelled_by_admin is True

    def test_cancel_by_user(self):
        order = _order(OrderStatus.PENDING)
        order.cancel(by_admin=False)
        assert order.cancelled_by_admin is False
        assert order.cancelled_at is not None

    def test_cancel_twice_rejected(self):
        order = _order(OrderStatus.CANCELLED)
        with pytest.raises(IllegalTransitionError, match="already cancelled"):
            order.cancel(by_admin=False)
        assert order.cancelled_at is None

    def test_cancel_delivered_rejected(self):
        order = _order(OrderStatus.DELIVERED)
        with pytest.raises(IllegalTransitionError, match="current status is delivered"):
            order.cancel(by_admin=True)

    def test_deliver_active(self):
        order = _order(OrderStatus.ACTIVE)
        order.deliver()
        assert order.status == OrderStatus.DELIVERED
        assert order.delivered_by_admin is True
        assert order.delivered_at is not None

    def test_deliver_twice_rejected(self):
        order = _order(OrderStatus.DELIVERED)
        with pytest.raises(IllegalTransitionError, match="already delivered"):
            order.deliver()
        assert order.delivered_at is None

    def test_deliver_pending_rejected(self):
        order = _order(OrderStatus.PENDING)
        with pytest.raises(IllegalTransitionError, match="cannot be delivered"):
            order.deliver()
