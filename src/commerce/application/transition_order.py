"""Application service: Transition Order use case.

Moves an order along its status graph.  Cancellation and refund put the
reserved stock back; delivery counts the sale.  Asking for the status the
order already has succeeds without doing anything, so retried requests
are harmless.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from commerce.application.dto import OrderDTO, order_to_dto
from commerce.domain.exceptions import ValidationError
from commerce.domain.model.order import OrderStatus, utcnow
from commerce.domain.repository.order_repository import OrderRepository
from commerce.domain.repository.product_repository import ProductRepository
from commerce.domain.service.order_lifecycle import OrderLifecycleService


class TransitionOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._lifecycle = OrderLifecycleService(order_repo, product_repo, clock)

    def handle(self, order_id: int, target: OrderStatus | str) -> OrderDTO:
        if not isinstance(target, OrderStatus):
            try:
                target = OrderStatus(target.upper())
            except ValueError:
                raise ValidationError(f"Unknown order status '{target}'") from None
        order = self._lifecycle.transition(order_id, target)
        return order_to_dto(order)
