"""Order aggregate — the core of the domain.

The Order is an aggregate root that owns its line items.  Its status
follows a fixed graph; every other field is frozen once the order is
created.  Inventory side effects of a transition are coordinated by
``OrderLifecycleService``, not by the aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from commerce.domain.exceptions import (
    IllegalTransitionError,
    RefundNotAllowedError,
    ValidationError,
)
from commerce.domain.model.value_objects import Money, Quantity
from commerce.domain.service.pricing import compute_total


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class OrderStatus(Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    PROCESSING = "PROCESSING"
    SHIPPED = "SHIPPED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    REFUNDED = "REFUNDED"

    def can_transition_to(self, target: OrderStatus) -> bool:
        return target in _TRANSITIONS[self]

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.REFUNDED)


_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.CONFIRMED, OrderStatus.CANCELLED}),
    OrderStatus.CONFIRMED: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset({OrderStatus.SHIPPED}),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED, OrderStatus.REFUNDED}),
    # DELIVERED is terminal apart from the refund branch
    OrderStatus.DELIVERED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}


class PaymentStatus(Enum):
    PENDING = "PENDING"
    PAID = "PAID"
    FAILED = "FAILED"
    REFUNDED = "REFUNDED"


class PaymentMethod(Enum):
    CARD = "CARD"
    PAYPAL = "PAYPAL"
    STRIPE = "STRIPE"
    CASH_ON_DELIVERY = "CASH_ON_DELIVERY"


@dataclass(frozen=True)
class Address:
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

    def __post_init__(self) -> None:
        for name in ("first_name", "last_name", "address1", "city", "state", "zip_code", "country"):
            value = getattr(self, name)
            if not value or not value.strip():
                raise ValidationError(f"Address {name.replace('_', ' ')} is required")


@dataclass
class PaymentInfo:
    method: PaymentMethod
    status: PaymentStatus = PaymentStatus.PENDING
    transaction_id: str | None = None
    paid_at: datetime | None = None
    refunded_at: datetime | None = None
    refund_amount: Money | None = None

    def mark_paid(self, transaction_id: str, now: datetime) -> bool:
        """PENDING|FAILED -> PAID.  Returns False if already paid with this id."""
        if self.status == PaymentStatus.PAID:
            if self.transaction_id == transaction_id:
                return False
            raise ValidationError(
                f"Payment already recorded under transaction {self.transaction_id}"
            )
        if self.status == PaymentStatus.REFUNDED:
            raise IllegalTransitionError("Payment has already been refunded")
        self.status = PaymentStatus.PAID
        self.transaction_id = transaction_id
        self.paid_at = now
        return True

    def mark_failed(self) -> bool:
        if self.status == PaymentStatus.FAILED:
            return False
        if self.status != PaymentStatus.PENDING:
            raise IllegalTransitionError(
                f"Cannot mark payment FAILED from {self.status.value}"
            )
        self.status = PaymentStatus.FAILED
        return True

    def mark_refunded(self, amount: Money, now: datetime) -> None:
        self.status = PaymentStatus.REFUNDED
        self.refund_amount = amount
        self.refunded_at = now


@dataclass(frozen=True)
class ShippingInfo:
    method: str
    cost: Money
    estimated_days: int
    carrier: str | None = None
    tracking_url: str | None = None

    def __post_init__(self) -> None:
        if not self.method or not self.method.strip():
            raise ValidationError("Shipping method is required")
        if self.estimated_days < 1:
            raise ValidationError("Estimated delivery must be at least one day")


@dataclass
class OrderLineItem:
    """Captures the product snapshot at order-creation time.

    Name, SKU and ``unit_price`` never change afterwards (price lock).
    """

    product_id: str
    name: str
    sku: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time
    variant_id: str | None = None

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_LINE_ITEMS = 50
MAX_NOTES_LENGTH = 500


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders — it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.

    ``subtotal`` and ``total`` are derived, so the total identity holds
    after every mutation by construction.
    """

    id: int | None
    order_number: str
    user_id: str
    items: list[OrderLineItem]
    shipping_address: Address
    billing_address: Address
    payment: PaymentInfo
    shipping: ShippingInfo
    tax: Money
    discount: Money
    currency: str = "USD"
    status: OrderStatus = OrderStatus.PENDING
    notes: str | None = None
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)
    delivered_at: datetime | None = None
    cancelled_at: datetime | None = None
    refunded_at: datetime | None = None

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        order_number: str,
        user_id: str,
        items: list[OrderLineItem],
        shipping_address: Address,
        billing_address: Address,
        payment: PaymentInfo,
        shipping: ShippingInfo,
        tax: Money,
        discount: Money,
        currency: str = "USD",
        notes: str | None = None,
        now: datetime | None = None,
    ) -> Order:
        """Create a new order, enforcing all invariants."""
        if not user_id:
            raise ValidationError("Order must belong to a user")

        if not items:
            raise ValidationError("Order must contain at least one item")

        if len(items) > MAX_LINE_ITEMS:
            raise ValidationError(f"Maximum {MAX_LINE_ITEMS} items per order")

        if notes is not None and len(notes) > MAX_NOTES_LENGTH:
            raise ValidationError(f"Notes cannot exceed {MAX_NOTES_LENGTH} characters")

        for money in [tax, discount, shipping.cost] + [i.unit_price for i in items]:
            if money.currency != currency:
                raise ValidationError(
                    f"Order currency is {currency} but got an amount in {money.currency}"
                )

        created = now or utcnow()
        order = Order(
            id=None,
            order_number=order_number,
            user_id=user_id,
            items=list(items),
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment=payment,
            shipping=shipping,
            tax=tax,
            discount=discount,
            currency=currency,
            notes=notes,
            created_at=created,
            updated_at=created,
        )

        # Fails with InvalidMoneyValueError if the discount is too large
        order.total
        return order

    # --- State transitions ----------------------------------------------------

    def transition_to(self, target: OrderStatus, now: datetime | None = None) -> bool:
        """Move to *target*, stamping the matching timestamp.

        Returns False when the order is already in *target* (no-op).
        """
        if target == self.status:
            return False
        if not self.status.can_transition_to(target):
            raise IllegalTransitionError(
                f"Cannot move order {self.order_number} from "
                f"{self.status.value} to {target.value}"
            )
        if target == OrderStatus.REFUNDED and self.payment.status != PaymentStatus.PAID:
            raise RefundNotAllowedError(
                f"Order {self.order_number} cannot be refunded — payment is "
                f"{self.payment.status.value}, expected PAID"
            )

        now = now or utcnow()
        self.status = target
        self.updated_at = now

        if target == OrderStatus.CANCELLED and self.cancelled_at is None:
            self.cancelled_at = now
        elif target == OrderStatus.REFUNDED and self.refunded_at is None:
            self.refunded_at = now
            self.payment.mark_refunded(self.total, now)
        elif target == OrderStatus.DELIVERED and self.delivered_at is None:
            self.delivered_at = now
        return True

    def record_payment(self, transaction_id: str, now: datetime | None = None) -> bool:
        if self.status in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
            raise IllegalTransitionError(
                f"Cannot record payment on {self.status.value} order {self.order_number}"
            )
        now = now or utcnow()
        changed = self.payment.mark_paid(transaction_id, now)
        if changed:
            self.updated_at = now
        return changed

    def record_payment_failure(self, now: datetime | None = None) -> bool:
        if self.status in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
            raise IllegalTransitionError(
                f"Cannot record payment failure on {self.status.value} order {self.order_number}"
            )
        changed = self.payment.mark_failed()
        if changed:
            self.updated_at = now or utcnow()
        return changed

    @property
    def can_be_cancelled(self) -> bool:
        return self.status.can_transition_to(OrderStatus.CANCELLED)

    @property
    def can_be_refunded(self) -> bool:
        return (
            self.status.can_transition_to(OrderStatus.REFUNDED)
            and self.payment.status == PaymentStatus.PAID
        )

    # --- Computed properties --------------------------------------------------

    @property
    def subtotal(self) -> Money:
        result = Money.zero(self.currency)
        for item in self.items:
            result = result + item.line_total
        return result

    @property
    def shipping_cost(self) -> Money:
        return self.shipping.cost

    @property
    def total(self) -> Money:
        return compute_total(self.subtotal, self.tax, self.shipping_cost, self.discount)
