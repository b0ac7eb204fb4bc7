"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from storefront.domain.model.order import Order, OrderLineItem, OrderStatus
from storefront.domain.model.value_objects import Money, Quantity, canonical_id
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.json_file import LEGACY_VERSION, JsonCollection


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._collection = JsonCollection(file_path)

    # --- OrderRepository interface --------------------------------------------

    def next_id(self) -> str:
        return self._collection.next_id()

    def get_by_id(self, order_id: str) -> Order | None:
        raw = self._collection.find(canonical_id(order_id))
        return self._to_domain(raw) if raw is not None else None

    def list_by_user(self, user_id: str) -> list[Order]:
        user_id = canonical_id(user_id)
        return [
            self._to_domain(raw)
            for raw in self._collection.load()
            if str(raw["user_id"]) == user_id
        ]

    def list_all(self, status: OrderStatus | None = None) -> list[Order]:
        orders = [self._to_domain(raw) for raw in self._collection.load()]
        if status is not None:
            orders = [o for o in orders if o.status is status]
        return orders

    def save(self, order: Order) -> None:
        # ID is assigned inside the store's lock for new orders
        order.id, order.version = self._collection.save_record(
            self._to_raw(order), expected_version=order.version
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order) -> dict:
        return {
            "id": order.id,
            "user_id": order.user_id,
            "status": order.status.value,
            "total": str(order.total.amount),
            "currency": order.total.currency,
            "created_at": order.created_at.isoformat(),
            "cancelled_at": order.cancelled_at.isoformat() if order.cancelled_at else None,
            "delivered_at": order.delivered_at.isoformat() if order.delivered_at else None,
            "cancelled_by_admin": order.cancelled_by_admin,
            "delivered_by_admin": order.delivered_by_admin,
            "items": [
                {
                    "product_id": item.product_id,
                    "product_name": item.product_name,
                    "quantity": item.quantity.value,
                    "unit_price": str(item.unit_price.amount),
                    "currency": item.unit_price.currency,
                }
                for item in order.items
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        items = [
            OrderLineItem(
                product_id=canonical_id(i["product_id"]),
                product_name=i["product_name"],
                quantity=Quantity(i["quantity"]),
                unit_price=Money(Decimal(str(i["unit_price"])), i.get("currency", "USD")),
            )
            for i in raw["items"]
        ]
        return Order(
            id=canonical_id(raw["id"]),
            user_id=raw["user_id"],
            items=items,
            total=Money(Decimal(str(raw["total"])), raw.get("currency", "USD")),
            status=OrderStatus.parse(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
            cancelled_at=_parse_timestamp(raw.get("cancelled_at")),
            delivered_at=_parse_timestamp(raw.get("delivered_at")),
            cancelled_by_admin=raw.get("cancelled_by_admin", False),
            delivered_by_admin=raw.get("delivered_by_admin", False),
            version=raw.get("version", LEGACY_VERSION),
        )


def _parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None
