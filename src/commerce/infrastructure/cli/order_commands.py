"""CLI commands for the Order aggregate."""

from __future__ import annotations

import click

from commerce.application.create_order import CreateOrderHandler
from commerce.application.dto import AddressSpec, CartItemSpec, CartSnapshot, OrderDTO
from commerce.application.record_payment import RecordPaymentHandler
from commerce.application.show_order import ShowOrderHandler
from commerce.application.transition_order import TransitionOrderHandler
from commerce.domain.exceptions import DomainException
from commerce.domain.model.order import OrderStatus, PaymentMethod
from commerce.infrastructure.bootstrap import order_repository, product_repository


def _parse_items(raw: str) -> list[CartItemSpec]:
    """Parse '1:3,2/v1:5' into CartItemSpec list (product[/variant]:quantity)."""
    specs: list[CartItemSpec] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'ProductId:Quantity'."
            )
        ref, qty_str = pair.rsplit(":", 1)
        try:
            qty = int(qty_str)
        except ValueError:
            raise click.BadParameter(
                f"Invalid quantity '{qty_str}' for product '{ref}'."
            )
        product_id, _, variant_id = ref.strip().partition("/")
        specs.append(CartItemSpec(product_id=product_id, quantity=qty, variant_id=variant_id or None))
    return specs


def _parse_address(raw: str) -> AddressSpec:
    """Parse 'First,Last,Street,City,State,Zip,Country'."""
    parts = [p.strip() for p in raw.split(",")]
    if len(parts) != 7:
        raise click.BadParameter(
            "Expected 'First,Last,Street,City,State,Zip,Country'.", param_hint="--ship-to"
        )
    first, last, street, city, state, zip_code, country = parts
    return AddressSpec(
        first_name=first,
        last_name=last,
        address1=street,
        city=city,
        state=state,
        zip_code=zip_code,
        country=country,
    )


@click.command("create")
@click.option("--user", "user_id", required=True, help="Customer user ID.")
@click.option("--items", required=True, help="Items as 'ProductId:Qty' or 'ProductId/VariantId:Qty', comma separated.")
@click.option("--ship-to", required=True, help="Address as 'First,Last,Street,City,State,Zip,Country'.")
@click.option(
    "--payment",
    default="CARD",
    show_default=True,
    type=click.Choice([m.value for m in PaymentMethod], case_sensitive=False),
)
@click.option("--shipping-method", default="standard", show_default=True)
@click.option("--shipping-cost", default="0", show_default=True, help="Shipping cost (e.g. 5.00).")
@click.option("--tax", default="0", show_default=True, help="Tax amount.")
@click.option("--tax-rate", default=None, help="Tax rate applied to the subtotal (e.g. 0.08).")
@click.option("--discount", default="0", show_default=True, help="Discount amount.")
@click.option("--currency", default="USD", show_default=True)
@click.option("--notes", default=None)
def order_create(
    user_id: str,
    items: str,
    ship_to: str,
    payment: str,
    shipping_method: str,
    shipping_cost: str,
    tax: str,
    tax_rate: str | None,
    discount: str,
    currency: str,
    notes: str | None,
) -> None:
    """Place a new order, reserving stock for every line."""
    cart = CartSnapshot(
        user_id=user_id,
        items=_parse_items(items),
        shipping_address=_parse_address(ship_to),
        payment_method=payment,
        shipping_method=shipping_method,
        shipping_cost=shipping_cost,
        tax=tax,
        tax_rate=tax_rate,
        discount=discount,
        currency=currency,
        notes=notes,
    )

    handler = CreateOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        dto = handler.handle(cart)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{dto.id} {dto.order_number} created  (status={dto.status})")
    click.echo()
    _display_lines(dto)


def _display_lines(dto: OrderDTO) -> None:
    click.echo(f"  {'Product':<24} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*51}")
    for item in dto.items:
        click.echo(
            f"  {item.name:<24} {item.quantity:>5} {item.unit_price:>10} {item.line_total:>10}"
        )
    click.echo(f"  {'-'*51}")
    for label, value in (
        ("Subtotal", dto.subtotal),
        ("Tax", dto.tax),
        ("Shipping", dto.shipping_cost),
        ("Discount", dto.discount),
        ("Order Total", dto.total),
    ):
        click.echo(f"  {label:<31} {value:>20}")


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id} {dto.order_number}  (status={dto.status}, payment={dto.payment_status})")
    click.echo(f"Customer: {dto.user_id}")
    click.echo(f"Created:  {dto.created_at}")
    for name, stamp in dto.timestamps.items():
        click.echo(f"{name.capitalize() + ':':<10}{stamp}")
    click.echo()
    _display_lines(dto)


@click.command("show")
@click.option("--id", "order_id", type=int, default=None, help="Order ID to display.")
@click.option("--number", "order_number", default=None, help="Order number to display.")
def order_show(order_id: int | None, order_number: str | None) -> None:
    """Show details of an existing order."""
    if (order_id is None) == (order_number is None):
        raise click.UsageError("Give exactly one of --id or --number")

    handler = ShowOrderHandler(order_repo=order_repository())

    try:
        if order_id is not None:
            dto = handler.handle(order_id)
        else:
            dto = handler.handle_by_number(order_number)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)


@click.command("status")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to move.")
@click.option(
    "--to",
    "target",
    required=True,
    type=click.Choice([s.value for s in OrderStatus], case_sensitive=False),
    help="Target status.",
)
def order_status(order_id: int, target: str) -> None:
    """Move an order to a new status (cancel and refund restock items)."""
    handler = TransitionOrderHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        dto = handler.handle(order_id, target)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} is now {dto.status}.")


@click.command("pay")
@click.option("--id", "order_id", required=True, type=int, help="Order ID.")
@click.option("--txn", "transaction_id", default=None, help="Payment provider transaction ID.")
@click.option("--failed", is_flag=True, default=False, help="Record a failed payment instead.")
def order_pay(order_id: int, transaction_id: str | None, failed: bool) -> None:
    """Record the outcome of a payment."""
    if not failed and not transaction_id:
        raise click.UsageError("--txn is required unless --failed is given")

    handler = RecordPaymentHandler(
        order_repo=order_repository(),
        product_repo=product_repository(),
    )

    try:
        if failed:
            dto = handler.handle_failure(order_id)
        else:
            dto = handler.handle(order_id, transaction_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Order #{order_id} payment {dto.payment_status}.")
