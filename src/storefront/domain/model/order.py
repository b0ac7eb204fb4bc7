"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items and its status.
Every status change goes through ``Order._transition``, which checks the
move against ``ALLOWED_TRANSITIONS``; stock side effects are coordinated
by the application handlers through the InventoryLedger.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import IllegalTransitionError, ValidationError
from storefront.domain.model.inventory import StockLine
from storefront.domain.model.value_objects import Money, Quantity


class OrderStatus(Enum):
    PENDING = "pending"
    ACTIVE = "active"
    CANCELLED = "cancelled"
    DELIVERED = "delivered"

    @staticmethod
    def parse(raw: str) -> OrderStatus:
        """Parse a client-supplied status; ``confirmed`` is an alias of ``active``."""
        value = raw.strip().lower()
        if value == "confirmed":
            return OrderStatus.ACTIVE
        try:
            return OrderStatus(value)
        except ValueError as exc:
            raise ValidationError(f"Unknown order status: {raw!r}") from exc

    @property
    def is_terminal(self) -> bool:
        return not ALLOWED_TRANSITIONS[self]

    @property
    def holds_reservation(self) -> bool:
        """True while the order's stock is reserved and not yet delivered."""
        return self is OrderStatus.ACTIVE


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.ACTIVE, OrderStatus.CANCELLED}),
    OrderStatus.ACTIVE: frozenset({OrderStatus.CANCELLED, OrderStatus.DELIVERED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.DELIVERED: frozenset(),
}

_VERBS = {
    OrderStatus.ACTIVE: "confirmed",
    OrderStatus.CANCELLED: "cancelled",
    OrderStatus.DELIVERED: "delivered",
}


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class OrderLineItem:
    """Captures the price snapshot of a product at placement time."""

    product_id: str
    product_name: str
    quantity: Quantity
    unit_price: Money  # locked at placement

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.place()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.

    ``total`` is computed once by ``place()`` and never recomputed from
    current product prices.
    """

    id: str | None
    user_id: str
    items: list[OrderLineItem]
    total: Money
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=_utcnow)
    cancelled_at: datetime | None = None
    delivered_at: datetime | None = None
    cancelled_by_admin: bool = False
    delivered_by_admin: bool = False
    version: int = 0

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        user_id: str,
        items: list[OrderLineItem],
        status: OrderStatus = OrderStatus.PENDING,
        now: datetime | None = None,
    ) -> Order:
        """Create a new order in its initial status."""
        if not user_id or not user_id.strip():
            raise ValidationError("User is required")

        if not items:
            raise ValidationError("No items in order.")

        if status not in (OrderStatus.PENDING, OrderStatus.ACTIVE):
            raise ValidationError(
                f"An order cannot be placed as {status.value}"
            )

        total = Money.zero(items[0].unit_price.currency)
        for item in items:
            total = total + item.line_total

        return Order(
            id=None,
            user_id=user_id.strip(),
            items=list(items),
            total=total,
            status=status,
            created_at=now or _utcnow(),
        )

    # --- State transitions ----------------------------------------------------

    def confirm(self) -> None:
        """Transition pending -> active.

        Stock must be reserved by the caller in the same unit of work.
        """
        self._transition(OrderStatus.ACTIVE)

    def cancel(self, by_admin: bool, now: datetime | None = None) -> None:
        """Transition pending|active -> cancelled.

        If the order was active its stock must be released by the caller.
        """
        self._transition(OrderStatus.CANCELLED)
        self.cancelled_at = now or _utcnow()
        self.cancelled_by_admin = by_admin

    def deliver(self, now: datetime | None = None) -> None:
        """Transition active -> delivered.  Stock is left untouched."""
        self._transition(OrderStatus.DELIVERED)
        self.delivered_at = now or _utcnow()
        self.delivered_by_admin = True

    def _transition(self, target: OrderStatus) -> None:
        if target in ALLOWED_TRANSITIONS[self.status]:
            self.status = target
            return
        label = f"Order #{self.id}" if self.id is not None else "Order"
        if target is self.status:
            raise IllegalTransitionError(f"{label} is already {self.status.value}")
        raise IllegalTransitionError(
            f"{label} cannot be {_VERBS.get(target, target.value)}: "
            f"current status is {self.status.value}"
        )

    # --- Computed properties --------------------------------------------------

    def stock_lines(self) -> list[StockLine]:
        return [StockLine(item.product_id, item.quantity) for item in self.items]
