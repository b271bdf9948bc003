"""Application service: Update Product use case."""

from __future__ import annotations

from commerce.domain.exceptions import EntityNotFoundError
from commerce.domain.model.product import Product
from commerce.domain.model.value_objects import Money
from commerce.domain.repository.product_repository import ProductRepository


class UpdateProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(self, product_id: str, new_price: str) -> Product:
        """Update a product's price.

        This does NOT affect any existing orders — they captured a
        price snapshot at creation time.  Only the price is written, so
        a reservation landing in between is never undone.
        """
        product = self._product_repo.get_by_id(product_id)
        if product is None:
            raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

        return self._product_repo.update_price(
            product_id, Money.of(new_price, product.price.currency)
        )
