"""Application service: Show Inventory use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from commerce.domain.model.inventory import StockLevel
from commerce.domain.repository.product_repository import ProductRepository
from commerce.domain.service.inventory_ledger import InventoryLedger


@dataclass(frozen=True)
class InventoryLineDTO:
    sku: str
    name: str
    tracked: bool
    available: int
    threshold: int
    in_stock: bool
    low_stock: bool
    backorder: bool


class ShowInventoryHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, low_stock_only: bool = False) -> list[InventoryLineDTO]:
        lines: list[InventoryLineDTO] = []
        for product in self._product_repo.list_all():
            lines.append(_line(product.sku, product.name, product.inventory))
            for variant in product.variants:
                lines.append(_line(variant.sku, f"{product.name} ({variant.name})", variant.inventory))
        if low_stock_only:
            return [line for line in lines if line.low_stock]
        return lines


def _line(sku: str, name: str, stock: StockLevel) -> InventoryLineDTO:
    return InventoryLineDTO(
        sku=sku,
        name=name,
        tracked=stock.track_quantity,
        available=stock.quantity,
        threshold=stock.low_stock_threshold,
        in_stock=InventoryLedger.is_in_stock(stock),
        low_stock=InventoryLedger.is_low_stock(stock),
        backorder=stock.allow_backorder,
    )
