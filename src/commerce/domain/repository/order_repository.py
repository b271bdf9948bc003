"""Abstract repository for Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from commerce.domain.model.order import Order, OrderStatus, PaymentStatus


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> Order | None:
        """Return an order by its order number, or None if not found."""

    @abstractmethod
    def add(self, order: Order) -> None:
        """Persist a new order and assign its ID.

        Raises UniqueConstraintViolation if the order number is taken.
        """

    @abstractmethod
    def save_if_unchanged(
        self, order: Order, status: OrderStatus, payment_status: PaymentStatus
    ) -> bool:
        """Store *order* only if the stored copy still has both statuses.

        Compare-and-set: returns False (and writes nothing) when another
        writer moved the order first.
        """
