"""StockLevel value: the inventory settings carried by a product or variant.

Quantity here is *available* stock.  A reservation moves units out of it
and a release puts them back; there is no separate reserved counter.
"""

from __future__ import annotations

from dataclasses import dataclass

from commerce.domain.exceptions import InsufficientStockError, InvalidQuantityError

DEFAULT_LOW_STOCK_THRESHOLD = 10


def _check_quantity(quantity: int, action: str) -> None:
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise InvalidQuantityError(
            f"{action} quantity must be an integer, got {type(quantity).__name__}"
        )
    if quantity <= 0:
        raise InvalidQuantityError(f"{action} quantity must be positive")


@dataclass
class StockLevel:
    """Inventory settings and the current available quantity.

    Invariants:
    - ``quantity`` is >= 0 unless ``allow_backorder`` is set
    - untracked stock never changes and is always in stock
    """

    track_quantity: bool = True
    quantity: int = 0
    low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD
    allow_backorder: bool = False

    def __post_init__(self) -> None:
        if self.low_stock_threshold < 0:
            raise InvalidQuantityError("Low stock threshold cannot be negative")
        if self.quantity < 0 and not self.allow_backorder:
            raise InvalidQuantityError("Quantity cannot be negative")

    @property
    def is_in_stock(self) -> bool:
        return not self.track_quantity or self.quantity > 0

    @property
    def is_low_stock(self) -> bool:
        return self.track_quantity and self.quantity <= self.low_stock_threshold

    def can_cover(self, quantity: int) -> bool:
        """True if a reservation of *quantity* would be accepted."""
        if not self.track_quantity or self.allow_backorder:
            return True
        return quantity <= self.quantity

    def take(self, quantity: int) -> None:
        """Decrement available stock for a reservation.

        Repositories call this inside their atomic section; it is the
        guard condition of the conditional decrement.
        """
        _check_quantity(quantity, "Reservation")
        if not self.can_cover(quantity):
            raise InsufficientStockError(
                f"Insufficient stock (need {quantity}, have {self.quantity} available)"
            )
        if self.track_quantity:
            self.quantity -= quantity

    def put_back(self, quantity: int) -> None:
        """Return previously reserved units to available stock."""
        _check_quantity(quantity, "Release")
        if self.track_quantity:
            self.quantity += quantity

    def set_quantity(self, quantity: int) -> None:
        if not isinstance(quantity, int) or isinstance(quantity, bool) or quantity < 0:
            raise InvalidQuantityError("Stock quantity must be a non-negative integer")
        self.quantity = quantity
