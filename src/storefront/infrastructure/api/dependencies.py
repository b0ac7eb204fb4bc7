"""FastAPI dependencies: caller identity and repositories.

Authentication is handled upstream; the gateway forwards the caller's ID
in ``X-User-Id`` and ``X-User-Role: admin`` for admin sessions.
"""

from dataclasses import dataclass

from fastapi import Depends, Header, HTTPException

from storefront.config import Settings
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.domain.repository.review_repository import ReviewRepository
from storefront.infrastructure import bootstrap


@dataclass(frozen=True)
class Caller:
    user_id: str
    is_admin: bool = False


def current_caller(
    x_user_id: str | None = Header(default=None),
    x_user_role: str | None = Header(default=None),
) -> Caller:
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(status_code=401, detail="Not authorized, no user")
    return Caller(
        user_id=x_user_id.strip(),
        is_admin=(x_user_role or "").strip().lower() == "admin",
    )


def require_admin(caller: Caller = Depends(current_caller)) -> Caller:
    if not caller.is_admin:
        raise HTTPException(status_code=403, detail="Not authorized as an admin")
    return caller


def get_settings() -> Settings:
    return bootstrap.settings()


def get_order_repository() -> OrderRepository:
    return bootstrap.order_repository()


def get_product_repository() -> ProductRepository:
    return bootstrap.product_repository()


def get_review_repository() -> ReviewRepository:
    return bootstrap.review_repository()
