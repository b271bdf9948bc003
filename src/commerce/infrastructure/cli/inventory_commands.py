"""CLI commands for inventory management."""

from __future__ import annotations

import click

from commerce.application.set_inventory import SetInventoryHandler
from commerce.application.show_inventory import ShowInventoryHandler
from commerce.domain.exceptions import DomainException
from commerce.domain.service.inventory_ledger import InventoryLedger
from commerce.infrastructure.bootstrap import product_repository


@click.command("set")
@click.option("--sku", required=True, help="Product or variant SKU.")
@click.option("--quantity", required=True, type=int, help="Available quantity in stock.")
def inventory_set(sku: str, quantity: int) -> None:
    """Set inventory level for a product or variant."""
    handler = SetInventoryHandler(product_repo=product_repository())

    try:
        level = handler.handle(sku=sku, quantity=quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Inventory for '{sku.upper()}' set to {level.quantity}")


@click.command("show")
def inventory_show() -> None:
    """Show current inventory levels."""
    handler = ShowInventoryHandler(product_repo=product_repository())
    lines = handler.handle()

    if not lines:
        click.echo("No inventory records found.")
        return

    click.echo(f"{'SKU':<12} {'Product':<24} {'Available':>10} {'Status':>12}")
    click.echo("-" * 61)
    for line in lines:
        if not line.tracked:
            status = "untracked"
        elif line.low_stock:
            status = "LOW"
        else:
            status = "ok"
        available = line.available if line.tracked else "-"
        click.echo(f"{line.sku:<12} {line.name:<24} {available:>10} {status:>12}")


@click.command("low")
def inventory_low() -> None:
    """List products and variants at or below their low-stock threshold."""
    report = InventoryLedger(product_repository()).low_stock_report()

    if not report:
        click.echo("No low-stock items.")
        return

    for line in report:
        click.echo(f"{line.sku:<12} {line.name:<24} {line.quantity:>6} (threshold {line.threshold})")
