"""Request bodies of the HTTP API."""

from pydantic import BaseModel


class OrderItemRequest(BaseModel):
    product: str | int
    quantity: int
    # Accepted for compatibility; the catalog price at placement is what counts
    price: float | None = None


class PlaceOrderRequest(BaseModel):
    items: list[OrderItemRequest] = []
    status: str | None = None


class ConfirmOrderRequest(BaseModel):
    status: str | None = None


class ReviewRequest(BaseModel):
    rating: int
    comment: str
