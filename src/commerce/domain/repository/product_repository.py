"""Abstract repository for Product aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer.

Besides plain load/save, the repository owns the atomic primitives the
engine relies on.  Each must behave like a single guarded UPDATE: no
caller may observe or interleave with a half-applied change.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from decimal import Decimal

from commerce.domain.model.inventory import StockLevel
from commerce.domain.model.product import Product
from commerce.domain.model.value_objects import Money


class ProductRepository(ABC):

    @abstractmethod
    def get_by_id(self, product_id: str) -> Product | None:
        """Return a product by its ID, or None if not found."""

    @abstractmethod
    def get_by_sku(self, sku: str) -> Product | None:
        """Return the product owning *sku* (product or variant SKU), or None."""

    @abstractmethod
    def slug_exists(self, slug: str) -> bool:
        """True if any product already uses *slug*."""

    @abstractmethod
    def list_all(self) -> list[Product]:
        """Return every product in the catalog."""

    @abstractmethod
    def add(self, product: Product) -> None:
        """Insert a new product and assign its ID.

        The ID is picked and the record written in one atomic step.
        Raises UniqueConstraintViolation if the SKU or slug is taken.
        """

    @abstractmethod
    def save(self, product: Product) -> None:
        """Persist a new or updated product.

        Raises UniqueConstraintViolation if its SKU or slug belongs to
        another product.
        """

    # --- Atomic primitives ----------------------------------------------------

    @abstractmethod
    def reserve_stock(
        self, product_id: str, variant_id: str | None, quantity: int
    ) -> StockLevel:
        """Conditionally decrement stock via ``StockLevel.take``.

        Raises EntityNotFoundError for an unknown product/variant and
        InsufficientStockError when the guard fails.  Returns the new level.
        """

    @abstractmethod
    def release_stock(
        self, product_id: str, variant_id: str | None, quantity: int
    ) -> StockLevel:
        """Increment stock via ``StockLevel.put_back``; returns the new level."""

    @abstractmethod
    def set_stock(
        self, product_id: str, variant_id: str | None, quantity: int
    ) -> StockLevel:
        """Overwrite the available quantity (restock)."""

    @abstractmethod
    def update_price(self, product_id: str, new_price: Money) -> Product:
        """Change only the price via ``Product.update_price``.

        Stock, sales and rating fields are left as stored.  Returns the
        updated product.
        """

    @abstractmethod
    def increment_sales(self, product_id: str, quantity: int) -> None:
        """Atomically add *quantity* to ``sales_count``."""

    @abstractmethod
    def update_rating(self, product_id: str, average: Decimal, count: int) -> None:
        """Overwrite ``average_rating`` and ``review_count``."""
