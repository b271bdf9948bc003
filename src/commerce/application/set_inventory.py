"""Application service: Set Inventory use case."""

from __future__ import annotations

from commerce.domain.exceptions import EntityNotFoundError
from commerce.domain.model.inventory import StockLevel
from commerce.domain.repository.product_repository import ProductRepository
from commerce.domain.service.inventory_ledger import InventoryLedger


class SetInventoryHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo
        self._ledger = InventoryLedger(product_repo)

    def handle(self, sku: str, quantity: int) -> StockLevel:
        """Set the available quantity for the product or variant owning *sku*."""
        sku = sku.strip().upper()
        product = self._product_repo.get_by_sku(sku)
        if product is None:
            raise EntityNotFoundError(f"No product or variant with SKU '{sku}'")

        variant_id = next((v.id for v in product.variants if v.sku == sku), None)
        return self._ledger.set_level(product.id, quantity, variant_id)
