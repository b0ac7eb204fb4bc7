"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from storefront.application.cancel_order import ADMIN_CANCEL_REMINDER, CancelOrderHandler
from storefront.application.confirm_order import ConfirmOrderHandler
from storefront.application.deliver_order import DeliverOrderHandler
from storefront.application.dto import OrderDTO, OrderItemSpec
from storefront.application.list_orders import ListOrdersHandler
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import (
    order_repository,
    product_repository,
    settings,
)


def _parse_items(raw: str) -> list[OrderItemSpec]:
    """Parse '1:3,2:5' (product ID : quantity) into OrderItemSpec list."""
    specs: list[OrderItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        product_id, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{product_id}'."
            )
        specs.append(OrderItemSpec(product_id=product_id.strip(), quantity=qty))
    return specs


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"User:     {dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    if dto.cancelled_at:
        who = "admin" if dto.cancelled_by_admin else "buyer"
        click.echo(f"Cancelled: {dto.cancelled_at} by {who}")
    if dto.delivered_at:
        click.echo(f"Delivered: {dto.delivered_at}")
    click.echo()
    click.echo(f"  {'Product':<20} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*47}")
    for item in dto.items:
        click.echo(
            f"  {item.product_name:<20} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*47}")
    click.echo(f"  {'Order Total':<27} {dto.total:>20}")


@click.command("place")
@click.option("--user", "user_id", required=True, help="Buyer's user ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty,ProductId:Qty'.")
@click.option("--pending", is_flag=True, default=False,
              help="Place as pending (no stock reserved until confirmed).")
def order_place(user_id: str, items: str, pending: bool) -> None:
    """Place a new order."""
    specs = _parse_items(items)

    handler = PlaceOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        max_attempts=settings().stock_max_attempts,
    )

    try:
        dto = handler.handle(
            user_id=user_id,
            item_specs=specs,
            status="pending" if pending else None,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} placed  (status={dto.status})")
    click.echo()
    _display_order(dto)


@click.command("show")
@click.option("--id", "order_id", required=True, help="Order ID to display.")
def order_show(order_id: str) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        dto = handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("list")
@click.option("--user", "user_id", default=None, help="Only this buyer's orders.")
@click.option("--status", default=None, help="Only orders in this status.")
def order_list(user_id: str | None, status: str | None) -> None:
    """List orders."""
    handler = ListOrdersHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        orders = handler.handle(user_id=user_id, status=status)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not orders:
        click.echo("No orders found.")
        return

    click.echo(f"{'ID':<6} {'User':<12} {'Status':<10} {'Items':>5} {'Total':>12}")
    click.echo("-" * 49)
    for dto in orders:
        click.echo(
            f"{dto.id:<6} {dto.user_id:<12} {dto.status:<10} {len(dto.items):>5} {dto.total:>12}"
        )


@click.command("confirm")
@click.option("--id", "order_id", required=True, help="Order ID to confirm.")
def order_confirm(order_id: str) -> None:
    """Confirm a pending order (reserves stock)."""
    handler = ConfirmOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        max_attempts=settings().stock_max_attempts,
    )

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} confirmed — stock reserved.")


@click.command("cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
@click.option("--user", "user_id", required=True, help="Buyer's user ID.")
def order_cancel(order_id: str, user_id: str) -> None:
    """Cancel one of your orders (releases stock if it was confirmed)."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        max_attempts=settings().stock_max_attempts,
    )

    try:
        handler.handle(order_id, by_admin=False, user_id=user_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled.")


@click.command("admin-cancel")
@click.option("--id", "order_id", required=True, help="Order ID to cancel.")
def order_admin_cancel(order_id: str) -> None:
    """Cancel any order from the admin console."""
    handler = CancelOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
        max_attempts=settings().stock_max_attempts,
    )

    try:
        handler.handle(order_id, by_admin=True)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} cancelled by admin.")
    click.echo(ADMIN_CANCEL_REMINDER)


@click.command("deliver")
@click.option("--id", "order_id", required=True, help="Order ID to mark delivered.")
def order_deliver(order_id: str) -> None:
    """Mark a confirmed order as delivered."""
    handler = DeliverOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        handler.handle(order_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} delivered.")
