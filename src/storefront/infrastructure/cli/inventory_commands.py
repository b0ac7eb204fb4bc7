"""CLI commands for stock levels."""

from __future__ import annotations

import click

from storefront.application.set_stock import SetStockHandler
from storefront.application.show_inventory import ShowInventoryHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import product_repository, settings


@click.command("set")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--quantity", required=True, type=int, help="Units in stock.")
def inventory_set(product_id: str, quantity: int) -> None:
    """Set the stock level of a product."""
    handler = SetStockHandler(
        product_repo=product_repository(),
        max_attempts=settings().stock_max_attempts,
    )

    try:
        product = handler.handle(product_id=product_id, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Stock for '{product.name}' set to {product.stock_quantity}")


@click.command("show")
def inventory_show() -> None:
    """Show current stock levels."""
    lines = ShowInventoryHandler(product_repo=product_repository()).handle()

    if not lines:
        click.echo("No products found.")
        return

    click.echo(f"{'Product':<20} {'Stock':>8} {'In stock':>10}")
    click.echo("-" * 40)
    for line in lines:
        click.echo(
            f"{line.name:<20} {line.stock_quantity:>8} {'yes' if line.in_stock else 'no':>10}"
        )
