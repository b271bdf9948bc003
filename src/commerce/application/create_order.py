"""Application service: Create Order use case.

Turns a cart snapshot into a PENDING order.  This is the only place that
coordinates Product lookup with Order creation; stock reservation and
order-number assignment are delegated to the lifecycle service.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from commerce.application.dto import AddressSpec, CartSnapshot, OrderDTO, order_to_dto
from commerce.domain.exceptions import EntityNotFoundError, ValidationError
from commerce.domain.model.order import (
    Address,
    Order,
    OrderLineItem,
    PaymentInfo,
    PaymentMethod,
    ShippingInfo,
    utcnow,
)
from commerce.domain.model.product import VariantStatus
from commerce.domain.model.value_objects import Money, Quantity
from commerce.domain.repository.order_repository import OrderRepository
from commerce.domain.repository.product_repository import ProductRepository
from commerce.domain.service.identifiers import generate_order_number
from commerce.domain.service.order_lifecycle import OrderLifecycleService
from commerce.domain.service.pricing import calculate_tax


class CreateOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = utcnow,
        order_numbers: Callable[[], str] = generate_order_number,
    ) -> None:
        self._product_repo = product_repo
        self._clock = clock
        self._lifecycle = OrderLifecycleService(order_repo, product_repo, clock, order_numbers)

    def handle(self, cart: CartSnapshot) -> OrderDTO:
        """Create a new order from *cart*.

        Steps:
        1. Resolve each line to a Product/variant (fail if not found or
           not for sale) and snapshot its name, SKU and current price.
        2. Let the Order aggregate validate money and business rules.
        3. Reserve stock for every line, all-or-nothing, and persist.
        """
        currency = cart.currency.upper()
        line_items = [self._snapshot_line(spec.product_id, spec.variant_id, spec.quantity)
                      for spec in cart.items]

        if cart.tax_rate is not None:
            subtotal = sum((item.line_total for item in line_items), Money.zero(currency))
            tax = calculate_tax(subtotal, cart.tax_rate)
        else:
            tax = Money.of(cart.tax, currency)

        try:
            method = PaymentMethod(cart.payment_method.upper())
        except ValueError:
            raise ValidationError(f"Unknown payment method '{cart.payment_method}'") from None

        shipping_address = _address(cart.shipping_address)
        order = Order.create(
            order_number="",  # assigned when placed
            user_id=cart.user_id,
            items=line_items,
            shipping_address=shipping_address,
            billing_address=(
                _address(cart.billing_address) if cart.billing_address else shipping_address
            ),
            payment=PaymentInfo(method=method),
            shipping=ShippingInfo(
                method=cart.shipping_method,
                cost=Money.of(cart.shipping_cost, currency),
                estimated_days=cart.estimated_days,
            ),
            tax=tax,
            discount=Money.of(cart.discount, currency),
            currency=currency,
            notes=cart.notes,
            now=self._clock(),
        )

        placed = self._lifecycle.place(order)
        return order_to_dto(placed)

    def _snapshot_line(self, product_id: str, variant_id: str | None, quantity: int) -> OrderLineItem:
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product not found: '{product_id}'")
        if not product.is_purchasable:
            raise ValidationError(
                f"Product '{product.name}' is {product.status.value} and cannot be ordered"
            )

        name, sku, price = product.name, product.sku, product.price
        if variant_id is not None:
            variant = product.variant(variant_id)
            if variant.status != VariantStatus.ACTIVE:
                raise ValidationError(f"Variant '{variant.name}' is not available")
            name, sku, price = f"{product.name} ({variant.name})", variant.sku, variant.price

        return OrderLineItem(
            product_id=product.id,
            name=name,
            sku=sku,
            quantity=Quantity(quantity),
            unit_price=price,  # <-- price snapshot
            variant_id=variant_id,
        )


def _address(spec: AddressSpec) -> Address:
    return Address(
        first_name=spec.first_name,
        last_name=spec.last_name,
        address1=spec.address1,
        city=spec.city,
        state=spec.state,
        zip_code=spec.zip_code,
        country=spec.country,
        company=spec.company,
        address2=spec.address2,
        phone=spec.phone,
    )
