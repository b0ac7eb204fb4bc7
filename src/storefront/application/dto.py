"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the CLI/HTTP layers and the application layer
without exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from storefront.domain.model.order import Order
from storefront.domain.model.product import Product
from storefront.domain.model.review import Review
from storefront.domain.repository.product_repository import ProductRepository


@dataclass(frozen=True)
class OrderItemSpec:
    """Input: what the customer asked for (product ID + quantity)."""

    product_id: str
    quantity: int


@dataclass(frozen=True)
class ProductDTO:
    """Output: current catalog state of a product."""

    id: str
    name: str
    price: str
    stock_quantity: int
    in_stock: bool
    rating: float
    num_reviews: int


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    product_name: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str
    product: ProductDTO | None = None  # populated with current details on request


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: str
    user_id: str
    status: str
    items: list[OrderLineItemDTO]
    total: str
    created_at: str
    cancelled_at: str | None
    delivered_at: str | None
    cancelled_by_admin: bool
    delivered_by_admin: bool


@dataclass(frozen=True)
class ReviewDTO:

    id: str
    product_id: str
    user_id: str
    rating: int
    comment: str
    created_at: str


# --- Mapping ------------------------------------------------------------------


def _timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def product_to_dto(product: Product) -> ProductDTO:
    return ProductDTO(
        id=product.id,
        name=product.name,
        price=str(product.price),
        stock_quantity=product.stock_quantity,
        in_stock=product.in_stock,
        rating=product.rating,
        num_reviews=product.num_reviews,
    )


def order_to_dto(order: Order, products: dict[str, Product] | None = None) -> OrderDTO:
    """Map an order; with *products*, line items carry current product details."""
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        user_id=order.user_id,
        status=order.status.value,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                product_name=item.product_name,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
                product=(
                    product_to_dto(products[item.product_id])
                    if products is not None and item.product_id in products
                    else None
                ),
            )
            for item in order.items
        ],
        total=str(order.total),
        created_at=order.created_at.isoformat(),
        cancelled_at=_timestamp(order.cancelled_at),
        delivered_at=_timestamp(order.delivered_at),
        cancelled_by_admin=order.cancelled_by_admin,
        delivered_by_admin=order.delivered_by_admin,
    )


def review_to_dto(review: Review) -> ReviewDTO:
    return ReviewDTO(
        id=review.id,  # type: ignore[arg-type]
        product_id=review.product_id,
        user_id=review.user_id,
        rating=review.rating.value,
        comment=review.comment,
        created_at=review.created_at.isoformat(),
    )


def current_products(product_repo: ProductRepository, orders: list[Order]) -> dict[str, Product]:
    """Load the current state of every product referenced by *orders*.

    Products that no longer exist are simply absent from the result.
    """
    products: dict[str, Product] = {}
    for order in orders:
        for item in order.items:
            if item.product_id not in products:
                product = product_repo.get_by_id(item.product_id)
                if product is not None:
                    products[item.product_id] = product
    return products
