"""Data Transfer Objects — plain containers that cross layer boundaries.

DTOs carry data between the outer layers (CLI, web controllers) and the
application layer without exposing domain internals.  Money travels as
strings so no float ever enters the domain.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from commerce.domain.model.order import Order
from commerce.domain.model.review import Review

_TIMESTAMP = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class CartItemSpec:
    """Input: one cart line (product, optional variant, quantity)."""

    product_id: str
    quantity: int
    variant_id: str | None = None


@dataclass(frozen=True)
class AddressSpec:
    first_name: str
    last_name: str
    address1: str
    city: str
    state: str
    zip_code: str
    country: str
    company: str | None = None
    address2: str | None = None
    phone: str | None = None


@dataclass(frozen=True)
class CartSnapshot:
    """Input: everything needed to turn a cart into an order.

    Supply either ``tax`` (an amount) or ``tax_rate`` (e.g. ``"0.08"``).
    """

    user_id: str
    items: list[CartItemSpec]
    shipping_address: AddressSpec
    payment_method: str
    shipping_method: str
    shipping_cost: str = "0"
    estimated_days: int = 5
    billing_address: AddressSpec | None = None  # defaults to shipping address
    tax: str = "0"
    tax_rate: str | None = None
    discount: str = "0"
    currency: str = "USD"
    notes: str | None = None


@dataclass(frozen=True)
class OrderLineItemDTO:
    """Output: a single line item as displayed to the user."""

    product_id: str
    name: str
    sku: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    order_number: str
    user_id: str
    status: str
    payment_status: str
    items: list[OrderLineItemDTO]
    subtotal: str
    tax: str
    shipping_cost: str
    discount: str
    total: str
    currency: str
    created_at: str
    timestamps: dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class ReviewDTO:
    id: int
    product_id: str
    user_id: str
    rating: int
    status: str
    helpful_count: int


def order_to_dto(order: Order) -> OrderDTO:
    stamps = {
        name: value.strftime(_TIMESTAMP)
        for name, value in (
            ("paid", order.payment.paid_at),
            ("delivered", order.delivered_at),
            ("cancelled", order.cancelled_at),
            ("refunded", order.refunded_at),
        )
        if value is not None
    }
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        order_number=order.order_number,
        user_id=order.user_id,
        status=order.status.value,
        payment_status=order.payment.status.value,
        items=[
            OrderLineItemDTO(
                product_id=item.product_id,
                name=item.name,
                sku=item.sku,
                quantity=item.quantity.value,
                unit_price=str(item.unit_price),
                line_total=str(item.line_total),
            )
            for item in order.items
        ],
        subtotal=str(order.subtotal),
        tax=str(order.tax),
        shipping_cost=str(order.shipping_cost),
        discount=str(order.discount),
        total=str(order.total),
        currency=order.currency,
        created_at=order.created_at.strftime(_TIMESTAMP),
        timestamps=stamps,
    )


def review_to_dto(review: Review) -> ReviewDTO:
    return ReviewDTO(
        id=review.id,  # type: ignore[arg-type]
        product_id=review.product_id,
        user_id=review.user_id,
        rating=review.rating,
        status=review.status.value,
        helpful_count=review.helpful_count,
    )
