"""Domain service: Order Lifecycle.

Coordinates the Order aggregate with the Inventory Ledger and the product
sales counter:

* ``place`` reserves stock for every line (all-or-nothing), then persists
  the order under a freshly generated order number, retrying a bounded
  number of times if the number is already taken.
* ``transition`` moves an order along the status graph.  The status write
  is a compare-and-set, so when several callers race only the winner runs
  the side effects; the others re-read and either find the order already
  in the target status (no-op) or get IllegalTransitionError.
"""

from __future__ import annotations

import dataclasses
import logging
from datetime import datetime
from typing import Callable

from commerce.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    IdGenerationFailedError,
    IllegalTransitionError,
    UniqueConstraintViolation,
)
from commerce.domain.model.order import Order, OrderStatus, utcnow
from commerce.domain.repository.order_repository import OrderRepository
from commerce.domain.repository.product_repository import ProductRepository
from commerce.domain.service.identifiers import generate_order_number
from commerce.domain.service.inventory_ledger import InventoryLedger

logger = logging.getLogger(__name__)

ORDER_NUMBER_ATTEMPTS = 3


class OrderLifecycleService:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = utcnow,
        order_numbers: Callable[[], str] = generate_order_number,
    ) -> None:
        self._order_repo = order_repo
        self._product_repo = product_repo
        self._ledger = InventoryLedger(product_repo)
        self._clock = clock
        self._order_numbers = order_numbers

    # --- Creation -------------------------------------------------------------

    def place(self, order: Order) -> Order:
        """Reserve stock for *order* and persist it as PENDING.

        The order's total has already been validated by ``Order.create``.
        Any failure after reservation releases the stock again.
        """
        reservations = self._ledger.reserve_lines(order.items)
        try:
            placed = self._persist_with_fresh_number(order)
        except DomainException:
            self._ledger.compensate(reservations)
            raise
        logger.info(
            f"Order {placed.order_number} placed for user {placed.user_id}: "
            f"{len(placed.items)} line(s), total {placed.total}"
        )
        return placed

    def _persist_with_fresh_number(self, order: Order) -> Order:
        for attempt in range(1, ORDER_NUMBER_ATTEMPTS + 1):
            candidate = dataclasses.replace(order, order_number=self._order_numbers())
            try:
                self._order_repo.add(candidate)
                return candidate
            except UniqueConstraintViolation:
                logger.warning(
                    f"Order number {candidate.order_number} already taken "
                    f"(attempt {attempt}/{ORDER_NUMBER_ATTEMPTS})"
                )
        raise IdGenerationFailedError(
            f"Could not generate a unique order number after {ORDER_NUMBER_ATTEMPTS} attempts"
        )

    # --- Transitions ----------------------------------------------------------

    def transition(self, order_id: int, target: OrderStatus) -> Order:
        """Move the order to *target*, applying that transition's side effects.

        Re-requesting the status the order already has is a successful no-op.
        """
        # Every lost race means the status advanced; the graph is acyclic,
        # so there can be no more losses than there are statuses.
        for _ in range(len(OrderStatus)):
            order = self._load(order_id)
            previous, paid = order.status, order.payment.status
            if not order.transition_to(target, self._clock()):
                logger.debug(f"Order {order.order_number} already {target.value}")
                return order
            if not self._order_repo.save_if_unchanged(order, previous, paid):
                logger.info(
                    f"Order {order.order_number} changed while moving to {target.value}; re-reading"
                )
                continue
            logger.info(f"Order {order.order_number}: {previous.value} -> {target.value}")
            self._apply_side_effects(order, target)
            return order
        raise IllegalTransitionError(f"Order #{order_id} kept changing; gave up moving to {target.value}")

    def _apply_side_effects(self, order: Order, target: OrderStatus) -> None:
        if target in (OrderStatus.CANCELLED, OrderStatus.REFUNDED):
            for line in order.items:
                try:
                    self._ledger.release(line.product_id, line.quantity.value, line.variant_id)
                except EntityNotFoundError:
                    logger.error(
                        f"Order {order.order_number}: product {line.product_id} no longer "
                        f"exists, {line.quantity} unit(s) not restocked"
                    )
        elif target == OrderStatus.DELIVERED:
            for line in order.items:
                try:
                    self._product_repo.increment_sales(line.product_id, line.quantity.value)
                except EntityNotFoundError:
                    logger.error(
                        f"Order {order.order_number}: product {line.product_id} no longer "
                        f"exists, sale not counted"
                    )

    # --- Payment bookkeeping --------------------------------------------------

    def record_payment(self, order_id: int, transaction_id: str) -> Order:
        return self._update_payment(
            order_id, lambda order: order.record_payment(transaction_id, self._clock())
        )

    def record_payment_failure(self, order_id: int) -> Order:
        return self._update_payment(
            order_id, lambda order: order.record_payment_failure(self._clock())
        )

    def _update_payment(self, order_id: int, apply: Callable[[Order], bool]) -> Order:
        for _ in range(len(OrderStatus)):
            order = self._load(order_id)
            previous, paid = order.status, order.payment.status
            if not apply(order):
                return order
            if self._order_repo.save_if_unchanged(order, previous, paid):
                logger.info(
                    f"Order {order.order_number}: payment now {order.payment.status.value}"
                )
                return order
        raise IllegalTransitionError(f"Order #{order_id} kept changing; payment not recorded")

    def _load(self, order_id: int) -> Order:
        order = self._order_repo.get_by_id(order_id)
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        return order
