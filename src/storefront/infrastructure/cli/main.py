import click

from storefront.config import configure_logging
from storefront.infrastructure.cli.inventory_commands import inventory_set, inventory_show
from storefront.infrastructure.cli.order_commands import (
    order_admin_cancel,
    order_cancel,
    order_confirm,
    order_deliver,
    order_list,
    order_place,
    order_show,
)
from storefront.infrastructure.cli.product_commands import product_add, product_list
from storefront.infrastructure.cli.review_commands import (
    review_add,
    review_delete,
    review_list,
    review_reconcile,
    review_update,
)


@click.group()
@click.option("-v", "--verbose", is_flag=True, default=False, help="Log stock movements.")
def cli(verbose: bool) -> None:
    """Storefront — orders, stock and ratings"""
    configure_logging("INFO" if verbose else "WARNING")


@cli.group()
def order() -> None:
    """Manage orders."""


@cli.group()
def product() -> None:
    """Manage products."""


@cli.group()
def inventory() -> None:
    """Manage stock levels."""


@cli.group()
def review() -> None:
    """Manage reviews and ratings."""


# Register subcommands
order.add_command(order_admin_cancel)
order.add_command(order_cancel)
order.add_command(order_confirm)
order.add_command(order_deliver)
order.add_command(order_list)
order.add_command(order_place)
order.add_command(order_show)
product.add_command(product_add)
product.add_command(product_list)
inventory.add_command(inventory_set)
inventory.add_command(inventory_show)
review.add_command(review_add)
review.add_command(review_delete)
review.add_command(review_list)
review.add_command(review_reconcile)
review.add_command(review_update)
