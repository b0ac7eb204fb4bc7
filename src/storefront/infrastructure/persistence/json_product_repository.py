"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money, canonical_id
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.persistence.json_file import LEGACY_VERSION, JsonCollection


class JsonProductRepository(ProductRepository):

    def __init__(self, file_path: Path) -> None:
        self._collection = JsonCollection(file_path)

    # --- ProductRepository interface ------------------------------------------

    def next_id(self) -> str:
        return self._collection.next_id()

    def get_by_id(self, product_id: str) -> Product | None:
        raw = self._collection.find(canonical_id(product_id))
        return self._to_domain(raw) if raw is not None else None

    def get_by_name(self, name: str) -> Product | None:
        for raw in self._collection.load():
            if raw["name"].lower() == name.lower():
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._collection.load()]

    def save(self, product: Product) -> None:
        _, product.version = self._collection.save_record(
            self._to_raw(product), expected_version=product.version
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "stock_quantity": product.stock_quantity,
            # Derived fields, written for readers of the raw documents
            "in_stock": product.in_stock,
            "rating": product.rating,
            "rating_total": product.rating_total,
            "num_reviews": product.num_reviews,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=canonical_id(raw["id"]),
            name=raw["name"],
            price=Money(Decimal(str(raw["price"])), raw.get("currency", "USD")),
            stock_quantity=raw.get("stock_quantity", 0),
            rating_total=raw.get("rating_total", 0),
            num_reviews=raw.get("num_reviews", 0),
            version=raw.get("version", LEGACY_VERSION),
        )
