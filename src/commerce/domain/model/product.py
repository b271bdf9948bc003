"""Product aggregate.

Products live independently of orders. They have their own lifecycle:
prices change, products are added and removed from the catalog.  Orders
only ever hold a snapshot of name, SKU and price.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from commerce.domain.exceptions import EntityNotFoundError, ValidationError
from commerce.domain.model.inventory import StockLevel
from commerce.domain.model.value_objects import Money


class ProductStatus(Enum):
    DRAFT = "DRAFT"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"


class VariantStatus(Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"


@dataclass
class ProductVariant:
    """A purchasable variation of a product with its own SKU and stock."""

    id: str
    name: str
    sku: str
    price: Money
    inventory: StockLevel = field(default_factory=StockLevel)
    compare_price: Money | None = None
    status: VariantStatus = VariantStatus.ACTIVE


@dataclass
class Product:
    """A product in the catalog.

    This is an aggregate root — it is the entry point for any
    operation involving a product, including its variants.  Rating and
    sales aggregates are written by the engine services, never by hand.
    """

    id: str
    name: str
    sku: str
    price: Money
    slug: str = ""
    compare_price: Money | None = None
    inventory: StockLevel = field(default_factory=StockLevel)
    variants: list[ProductVariant] = field(default_factory=list)
    status: ProductStatus = ProductStatus.DRAFT
    average_rating: Decimal = Decimal("0.0")
    review_count: int = 0
    sales_count: int = 0
    view_count: int = 0

    def update_price(self, new_price: Money) -> None:
        """Change the product price.

        This does NOT affect any existing orders because orders
        capture a price snapshot at creation time.
        """
        if new_price.amount < 0:
            raise ValidationError("Product price cannot be negative")
        if new_price.currency != self.price.currency:
            raise ValidationError(
                f"Price currency {new_price.currency} does not match {self.price.currency}"
            )
        self.price = new_price

    @property
    def is_purchasable(self) -> bool:
        return self.status == ProductStatus.ACTIVE

    def variant(self, variant_id: str) -> ProductVariant:
        for variant in self.variants:
            if variant.id == variant_id:
                return variant
        raise EntityNotFoundError(
            f"Variant '{variant_id}' not found on product '{self.name}'"
        )

    def stock_for(self, variant_id: str | None = None) -> StockLevel:
        """The stock record that backs a purchase of this product/variant."""
        if variant_id is None:
            return self.inventory
        return self.variant(variant_id).inventory

    def record_sale(self, quantity: int) -> None:
        self.sales_count += quantity

    def apply_rating(self, average: Decimal, count: int) -> None:
        if not Decimal("0") <= average <= Decimal("5"):
            raise ValidationError(f"Average rating out of range: {average}")
        if count < 0:
            raise ValidationError("Review count cannot be negative")
        self.average_rating = average
        self.review_count = count
