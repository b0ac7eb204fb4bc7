"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.

Like the real repositories they hand out copies and check ``version`` on
every save, so a stale copy loses the compare-and-swap.
"""

from __future__ import annotations

import copy
from collections.abc import Callable

from storefront.domain.exceptions import (
    ConcurrencyConflictError,
    DomainException,
    NotFoundError,
)
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.product import Product
from storefront.domain.model.review import Review
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.review_repository import ReviewRepository


class _VersionedStore:

    def __init__(self) -> None:
        self._store: dict[str, object] = {}
        self._next_id = 1
        self._interference: dict[str, list[Callable]] = {}
        self._failures: dict[str, DomainException] = {}
        self.save_count = 0

    def next_id(self) -> str:
        return str(self._next_id)

    def _get(self, entity_id: str):
        return copy.deepcopy(self._store.get(entity_id))

    def _all(self) -> list:
        return [copy.deepcopy(e) for e in self._store.values()]

    def _seed(self, entity) -> None:
        entity = copy.deepcopy(entity)
        entity.version = max(entity.version, 1)
        self._store[entity.id] = entity
        if entity.id.isdigit():
            self._next_id = max(self._next_id, int(entity.id) + 1)

    def _put(self, entity) -> None:
        if entity.id is None:
            entity.id = str(self._next_id)
        failure = self._failures.pop(entity.id, None)
        if failure is not None:
            raise failure
        pending = self._interference.get(entity.id)
        if pending:
            # A concurrent writer gets in just before this save
            change = pending.pop(0)
            stored = self._store[entity.id]
            change(stored)
            stored.version += 1
        stored = self._store.get(entity.id)
        stored_version = stored.version if stored is not None else 0
        if stored_version != entity.version:
            raise ConcurrencyConflictError(
                f"#{entity.id} was modified concurrently "
                f"(expected version {entity.version}, found {stored_version})"
            )
        entity.version += 1
        self._store[entity.id] = copy.deepcopy(entity)
        if entity.id.isdigit():
            self._next_id = max(self._next_id, int(entity.id) + 1)
        self.save_count += 1

    def interfere(
        self,
        entity_id: str,
        change: Callable = lambda e: None,
        times: int = 1,
    ) -> None:
        """Make the next *times* saves of an entity lose a race to *change*."""
        self._interference.setdefault(entity_id, []).extend([change] * times)

    def fail(self, entity_id: str, error: DomainException) -> None:
        """Make the next save of an entity raise *error* without writing."""
        self._failures[entity_id] = error


class FakeOrderRepository(_VersionedStore, OrderRepository):

    def get_by_id(self, order_id: str) -> Order | None:
        return self._get(order_id)

    def list_by_user(self, user_id: str) -> list[Order]:
        return [o for o in self._all() if o.user_id == user_id]

    def list_all(self, status: OrderStatus | None = None) -> list[Order]:
        return [o for o in self._all() if status is None or o.status is status]

    def save(self, order: Order) -> None:
        self._put(order)


class FakeProductRepository(_VersionedStore, ProductRepository):

    def __init__(self, products: list[Product] | None = None) -> None:
        super().__init__()
        for p in products or []:
            self._seed(p)

    def get_by_id(self, product_id: str) -> Product | None:
        return self._get(product_id)

    def get_by_name(self, name: str) -> Product | None:
        for p in self._all():
            if p.name.lower() == name.lower():
                return p
        return None

    def list_all(self) -> list[Product]:
        return self._all()

    def save(self, product: Product) -> None:
        self._put(product)

    def stock_of(self, product_id: str) -> int:
        return self._store[product_id].stock_quantity


class FakeReviewRepository(_VersionedStore, ReviewRepository):

    def __init__(self, reviews: list[Review] | None = None) -> None:
        super().__init__()
        for r in reviews or []:
            self._seed(r)

    def get_by_id(self, review_id: str) -> Review | None:
        return self._get(review_id)

    def list_by_product(self, product_id: str) -> list[Review]:
        reviews = [r for r in self._all() if r.product_id == product_id]
        reviews.sort(key=lambda r: r.created_at, reverse=True)
        return reviews

    def save(self, review: Review) -> None:
        self._put(review)

    def delete(self, review_id: str) -> None:
        if self._store.pop(review_id, None) is None:
            raise NotFoundError("Review not found")
