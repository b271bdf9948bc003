"""CLI commands for product reviews."""

from __future__ import annotations

import click

from commerce.application.moderate_review import ApproveReviewHandler, RejectReviewHandler
from commerce.application.submit_review import SubmitReviewHandler
from commerce.domain.exceptions import DomainException
from commerce.infrastructure.bootstrap import product_repository, review_repository


@click.command("submit")
@click.option("--product", "product_id", required=True, help="Product ID.")
@click.option("--user", "user_id", required=True, help="Reviewer user ID.")
@click.option("--rating", required=True, type=int, help="Rating from 1 to 5.")
@click.option("--title", default=None)
@click.option("--comment", default=None)
def review_submit(
    product_id: str, user_id: str, rating: int, title: str | None, comment: str | None
) -> None:
    """Submit a review; it counts once approved."""
    handler = SubmitReviewHandler(
        review_repo=review_repository(),
        product_repo=product_repository(),
    )

    try:
        dto = handler.handle(product_id, user_id, rating, title, comment)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Review #{dto.id} submitted  (status={dto.status})")


@click.command("approve")
@click.option("--id", "review_id", required=True, type=int, help="Review ID.")
def review_approve(review_id: int) -> None:
    """Approve a review and refresh the product rating."""
    handler = ApproveReviewHandler(
        review_repo=review_repository(),
        product_repo=product_repository(),
    )

    try:
        dto = handler.handle(review_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    product = product_repository().get_by_id(dto.product_id)
    click.echo(f"Review #{review_id} approved.")
    if product is not None:
        click.echo(f"Product #{product.id} rating: {product.average_rating} ({product.review_count} reviews)")


@click.command("reject")
@click.option("--id", "review_id", required=True, type=int, help="Review ID.")
def review_reject(review_id: int) -> None:
    """Reject a review."""
    handler = RejectReviewHandler(
        review_repo=review_repository(),
        product_repo=product_repository(),
    )

    try:
        handler.handle(review_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Review #{review_id} rejected.")
