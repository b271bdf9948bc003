"""CLI commands for the Product aggregate."""

from __future__ import annotations

import click

from commerce.application.add_product import AddProductHandler
from commerce.application.update_product import UpdateProductHandler
from commerce.domain.exceptions import DomainException
from commerce.domain.service.pricing import calculate_discount_percent
from commerce.infrastructure.bootstrap import product_repository


@click.command("add")
@click.option("--name", required=True, help="Product name.")
@click.option("--sku", required=True, help="Unique stock-keeping unit.")
@click.option("--price", required=True, help="Price (e.g. 15.00).")
@click.option("--compare-price", default=None, help="Original price shown as struck through.")
@click.option("--quantity", default=0, type=int, show_default=True, help="Initial stock.")
@click.option("--currency", default="USD", show_default=True)
@click.option("--backorder", is_flag=True, default=False, help="Allow selling below zero stock.")
def product_add(
    name: str,
    sku: str,
    price: str,
    compare_price: str | None,
    quantity: int,
    currency: str,
    backorder: bool,
) -> None:
    """Add a new product to the catalog."""
    handler = AddProductHandler(product_repo=product_repository())

    try:
        product = handler.handle(
            name=name,
            sku=sku,
            price=price,
            quantity=quantity,
            currency=currency,
            compare_price=compare_price,
            allow_backorder=backorder,
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product.id} '{product.name}' ({product.sku}) added at {product.price}")
    click.echo(f"Slug: {product.slug}")


@click.command("list")
def product_list() -> None:
    """List all products in the catalog."""
    repo = product_repository()
    products = repo.list_all()

    if not products:
        click.echo("No products found.")
        return

    click.echo(f"{'ID':<6} {'SKU':<12} {'Name':<20} {'Price':>10} {'Off':>5} {'Rating':>7} {'Sold':>6}")
    click.echo("-" * 72)
    for p in products:
        off = calculate_discount_percent(p.price, p.compare_price)
        click.echo(
            f"{p.id:<6} {p.sku:<12} {p.name:<20} {str(p.price):>10} {off:>4}% "
            f"{str(p.average_rating):>7} {p.sales_count:>6}"
        )


@click.command("update")
@click.option("--id", "product_id", required=True, help="Product ID.")
@click.option("--price", required=True, help="New price (e.g. 29.99).")
def product_update(product_id: str, price: str) -> None:
    """Update a product's price."""
    handler = UpdateProductHandler(product_repo=product_repository())

    try:
        handler.handle(product_id=product_id, new_price=price)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Product #{product_id} price updated to {price}")
