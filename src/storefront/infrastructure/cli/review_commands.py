"""CLI commands for reviews and the rating aggregate."""

from __future__ import annotations

import click

from storefront.application.add_review import AddReviewHandler
from storefront.application.delete_review import DeleteReviewHandler
from storefront.application.list_reviews import ListReviewsHandler
from storefront.application.reconcile_ratings import ReconcileRatingsHandler
from storefront.application.update_review import UpdateReviewHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import product_repository, review_repository


@click.command("add")
@click.option("--user", "user_id", required=True, help="Author's user ID.")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--rating", required=True, type=click.IntRange(1, 5), help="1 to 5 stars.")
@click.option("--comment", required=True, help="Review text.")
def review_add(user_id: str, product_id: str, rating: int, comment: str) -> None:
    """Review a product."""
    handler = AddReviewHandler(
        review_repo=review_repository(),
        product_repo=product_repository(),
    )

    try:
        review = handler.handle(
            user_id=user_id, product_id=product_id, rating=rating, comment=comment
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Review #{review.id} added to product #{review.product_id}")


@click.command("update")
@click.option("--id", "review_id", required=True, help="Review ID.")
@click.option("--user", "user_id", required=True, help="Author's user ID.")
@click.option("--rating", required=True, type=click.IntRange(1, 5), help="1 to 5 stars.")
@click.option("--comment", required=True, help="Review text.")
def review_update(review_id: str, user_id: str, rating: int, comment: str) -> None:
    """Edit one of your reviews."""
    handler = UpdateReviewHandler(
        review_repo=review_repository(),
        product_repo=product_repository(),
    )

    try:
        handler.handle(review_id=review_id, user_id=user_id, rating=rating, comment=comment)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Review #{review_id} updated")


@click.command("delete")
@click.option("--id", "review_id", required=True, help="Review ID.")
@click.option("--user", "user_id", default="", help="Author's user ID.")
@click.option("--admin", "is_admin", is_flag=True, default=False, help="Delete as admin.")
def review_delete(review_id: str, user_id: str, is_admin: bool) -> None:
    """Delete a review."""
    handler = DeleteReviewHandler(
        review_repo=review_repository(),
        product_repo=product_repository(),
    )

    try:
        handler.handle(review_id=review_id, user_id=user_id, is_admin=is_admin)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Review #{review_id} deleted")


@click.command("list")
@click.option("--product", "product_id", required=True, help="Product ID.")
def review_list(product_id: str) -> None:
    """List a product's reviews, newest first."""
    reviews = ListReviewsHandler(review_repo=review_repository()).handle(product_id)

    if not reviews:
        click.echo("No reviews yet.")
        return

    for review in reviews:
        click.echo(f"#{review.id}  {'*' * review.rating:<5}  by {review.user_id}")
        click.echo(f"    {review.comment}")


@click.command("reconcile")
def review_reconcile() -> None:
    """Rebuild every product's rating from its reviews."""
    handler = ReconcileRatingsHandler(
        product_repo=product_repository(),
        review_repo=review_repository(),
    )

    try:
        corrections = handler.handle()
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not corrections:
        click.echo("All ratings are up to date.")
        return

    for c in corrections:
        click.echo(
            f"Updated {c.product_name}: rating {c.old_rating:.2f} -> {c.new_rating:.2f}, "
            f"reviews {c.old_num_reviews} -> {c.new_num_reviews}"
        )
