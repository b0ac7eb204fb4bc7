"""Order endpoints: placement and buyer views, plus the admin console."""

from fastapi import APIRouter, Depends

from storefront.application.cancel_order import ADMIN_CANCEL_REMINDER, CancelOrderHandler
from storefront.application.confirm_order import ConfirmOrderHandler
from storefront.application.deliver_order import DeliverOrderHandler
from storefront.application.dto import OrderItemSpec
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.place_order import PlaceOrderHandler
from storefront.config import Settings
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.product_repository import ProductRepository
from storefront.infrastructure.api.dependencies import (
    Caller,
    current_caller,
    get_order_repository,
    get_product_repository,
    get_settings,
    require_admin,
)
from storefront.infrastructure.api.schemas import ConfirmOrderRequest, PlaceOrderRequest

router = APIRouter(prefix="/orders", tags=["orders"])


# ── Buyer ────────────────────────────────────────


@router.post("", status_code=201)
def place_order(
    req: PlaceOrderRequest,
    caller: Caller = Depends(current_caller),
    order_repo: OrderRepository = Depends(get_order_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
    settings: Settings = Depends(get_settings),
):
    """Place an order; stock is reserved unless ``status`` is ``pending``."""
    handler = PlaceOrderHandler(order_repo, product_repo, settings.stock_max_attempts)
    specs = [
        OrderItemSpec(product_id=str(item.product), quantity=item.quantity)
        for item in req.items
    ]
    return handler.handle(user_id=caller.user_id, item_specs=specs, status=req.status)


@router.get("/my")
def my_orders(
    caller: Caller = Depends(current_caller),
    order_repo: OrderRepository = Depends(get_order_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    return ListOrdersHandler(order_repo, product_repo).handle(user_id=caller.user_id)


@router.post("/{order_id}/cancel")
def cancel_order(
    order_id: str,
    caller: Caller = Depends(current_caller),
    order_repo: OrderRepository = Depends(get_order_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
    settings: Settings = Depends(get_settings),
):
    handler = CancelOrderHandler(order_repo, product_repo, settings.stock_max_attempts)
    return handler.handle(order_id, by_admin=False, user_id=caller.user_id)


# ── Admin console ────────────────────────────────


@router.get("")
def all_orders(
    status: str | None = None,
    _: Caller = Depends(require_admin),
    order_repo: OrderRepository = Depends(get_order_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    return ListOrdersHandler(order_repo, product_repo).handle(status=status)


@router.post("/{order_id}/confirm")
def confirm_order(
    order_id: str,
    req: ConfirmOrderRequest | None = None,
    _: Caller = Depends(require_admin),
    order_repo: OrderRepository = Depends(get_order_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
    settings: Settings = Depends(get_settings),
):
    handler = ConfirmOrderHandler(order_repo, product_repo, settings.stock_max_attempts)
    return handler.handle(order_id, status=req.status if req else None)


@router.post("/{order_id}/admin-cancel")
def admin_cancel_order(
    order_id: str,
    _: Caller = Depends(require_admin),
    order_repo: OrderRepository = Depends(get_order_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
    settings: Settings = Depends(get_settings),
):
    handler = CancelOrderHandler(order_repo, product_repo, settings.stock_max_attempts)
    order = handler.handle(order_id, by_admin=True)
    return {"order": order, "message": ADMIN_CANCEL_REMINDER}


@router.post("/{order_id}/deliver")
def deliver_order(
    order_id: str,
    _: Caller = Depends(require_admin),
    order_repo: OrderRepository = Depends(get_order_repository),
    product_repo: ProductRepository = Depends(get_product_repository),
):
    return DeliverOrderHandler(order_repo, product_repo).handle(order_id)
