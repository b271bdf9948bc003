"""Application service: Record Payment use case.

Payment status is bookkeeping fed by the payment provider; a refund is
only possible once it reads PAID.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from commerce.application.dto import OrderDTO, order_to_dto
from commerce.domain.exceptions import ValidationError
from commerce.domain.model.order import utcnow
from commerce.domain.repository.order_repository import OrderRepository
from commerce.domain.repository.product_repository import ProductRepository
from commerce.domain.service.order_lifecycle import OrderLifecycleService


class RecordPaymentHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        product_repo: ProductRepository,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._lifecycle = OrderLifecycleService(order_repo, product_repo, clock)

    def handle(self, order_id: int, transaction_id: str) -> OrderDTO:
        """Mark the order's payment PAID under *transaction_id*."""
        if not transaction_id or not transaction_id.strip():
            raise ValidationError("Transaction ID is required")
        order = self._lifecycle.record_payment(order_id, transaction_id.strip())
        return order_to_dto(order)

    def handle_failure(self, order_id: int) -> OrderDTO:
        order = self._lifecycle.record_payment_failure(order_id)
        return order_to_dto(order)
