"""Application service: Add Product use case (catalog seeding)."""

from __future__ import annotations

from storefront.application.dto import ProductDTO, product_to_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.product import Product
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.product_repository import ProductRepository


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, name: str, price: str, stock: int = 0) -> ProductDTO:
        """Add a new product to the catalog with an opening stock level."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        existing = self._product_repo.get_by_name(name.strip())
        if existing is not None:
            raise ValidationError(f"Product '{name}' already exists")

        product = Product(
            id=self._product_repo.next_id(),
            name=name.strip(),
            price=Money.of(price),
        )
        if product.price.amount <= 0:
            raise ValidationError("Product price must be greater than zero")
        product.set_stock(stock)

        self._product_repo.save(product)
        return product_to_dto(product)
