"""Domain service: Inventory Ledger.

The ledger is the only way stock moves.  Each single reservation is one
atomic guarded decrement in the repository, never a read followed by a
write, so concurrent checkouts cannot oversell.

Reserving for several lines is a saga: lines are reserved one by one and,
if a later line fails, the earlier ones are released again in reverse
order before the error is re-raised.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from commerce.domain.exceptions import DomainException, InvalidQuantityError
from commerce.domain.model.inventory import StockLevel
from commerce.domain.model.order import OrderLineItem
from commerce.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reservation:
    product_id: str
    variant_id: str | None
    quantity: int


@dataclass(frozen=True)
class LowStockLine:
    product_id: str
    variant_id: str | None
    sku: str
    name: str
    quantity: int
    threshold: int


class InventoryLedger:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    # --- Single-product operations --------------------------------------------

    def reserve(self, product_id: str, quantity: int, variant_id: str | None = None) -> Reservation:
        """Take *quantity* units out of available stock.

        Raises InsufficientStockError unless backorder is allowed or the
        stock covers the request.
        """
        level = self._product_repo.reserve_stock(product_id, variant_id, quantity)
        logger.debug(f"Reserved {quantity} of {_label(product_id, variant_id)}, {level.quantity} left")
        if level.is_low_stock:
            logger.warning(
                f"Low stock for {_label(product_id, variant_id)}: "
                f"{level.quantity} left (threshold {level.low_stock_threshold})"
            )
        return Reservation(product_id, variant_id, quantity)

    def release(self, product_id: str, quantity: int, variant_id: str | None = None) -> StockLevel:
        """Put *quantity* units back into available stock."""
        if not isinstance(quantity, int) or quantity <= 0:
            raise InvalidQuantityError(f"Release quantity must be positive, got {quantity!r}")
        level = self._product_repo.release_stock(product_id, variant_id, quantity)
        logger.debug(f"Released {quantity} of {_label(product_id, variant_id)}, now {level.quantity}")
        return level

    def set_level(self, product_id: str, quantity: int, variant_id: str | None = None) -> StockLevel:
        """Overwrite available stock (restock or stock-take correction)."""
        level = self._product_repo.set_stock(product_id, variant_id, quantity)
        logger.info(f"Stock for {_label(product_id, variant_id)} set to {level.quantity}")
        return level

    @staticmethod
    def is_low_stock(stock: StockLevel) -> bool:
        return stock.is_low_stock

    @staticmethod
    def is_in_stock(stock: StockLevel) -> bool:
        return stock.is_in_stock

    # --- Multi-line operations ------------------------------------------------

    def reserve_lines(self, lines: Iterable[OrderLineItem]) -> list[Reservation]:
        """Reserve every line, all-or-nothing."""
        done: list[Reservation] = []
        for line in lines:
            try:
                done.append(self.reserve(line.product_id, line.quantity.value, line.variant_id))
            except DomainException:
                logger.warning(
                    f"Reservation failed for {_label(line.product_id, line.variant_id)}; "
                    f"rolling back {len(done)} earlier reservation(s)"
                )
                self.compensate(done)
                raise
        return done

    def compensate(self, reservations: list[Reservation]) -> None:
        """Undo *reservations* in reverse order.

        A failing release is logged and the rest are still attempted; the
        caller is already propagating the original error.
        """
        for res in reversed(reservations):
            try:
                self.release(res.product_id, res.quantity, res.variant_id)
            except DomainException as exc:
                logger.error(
                    f"Could not roll back {res.quantity} of "
                    f"{_label(res.product_id, res.variant_id)}: {exc}",
                    exc_info=True,
                )

    def release_lines(self, lines: Iterable[OrderLineItem]) -> None:
        for line in lines:
            self.release(line.product_id, line.quantity.value, line.variant_id)

    # --- Queries --------------------------------------------------------------

    def low_stock_report(self) -> list[LowStockLine]:
        report: list[LowStockLine] = []
        for product in self._product_repo.list_all():
            if product.inventory.is_low_stock:
                report.append(LowStockLine(
                    product.id, None, product.sku, product.name,
                    product.inventory.quantity, product.inventory.low_stock_threshold,
                ))
            for variant in product.variants:
                if variant.inventory.is_low_stock:
                    report.append(LowStockLine(
                        product.id, variant.id, variant.sku, f"{product.name} / {variant.name}",
                        variant.inventory.quantity, variant.inventory.low_stock_threshold,
                    ))
        for line in report:
            logger.warning(f"Low stock: {line.sku} has {line.quantity} (threshold {line.threshold})")
        return report


def _label(product_id: str, variant_id: str | None) -> str:
    return f"product {product_id}" if variant_id is None else f"product {product_id}/{variant_id}"
