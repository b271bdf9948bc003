"""Application service: Add Product use case."""

from __future__ import annotations

from commerce.domain.exceptions import UniqueConstraintViolation, ValidationError
from commerce.domain.model.inventory import DEFAULT_LOW_STOCK_THRESHOLD, StockLevel
from commerce.domain.model.product import Product, ProductStatus
from commerce.domain.model.value_objects import Money
from commerce.domain.repository.product_repository import ProductRepository
from commerce.domain.service.identifiers import generate_unique_slug, slugify


class AddProductHandler:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def handle(
        self,
        name: str,
        sku: str,
        price: str,
        quantity: int = 0,
        currency: str = "USD",
        compare_price: str | None = None,
        low_stock_threshold: int = DEFAULT_LOW_STOCK_THRESHOLD,
        allow_backorder: bool = False,
        track_quantity: bool = True,
        status: str = "ACTIVE",
    ) -> Product:
        """Add a new product to the catalog with a unique SKU and slug."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")
        if not sku or not sku.strip():
            raise ValidationError("SKU is required")

        sku = sku.strip().upper()
        if self._product_repo.get_by_sku(sku) is not None:
            raise ValidationError(f"SKU '{sku}' already exists")

        base_slug = slugify(name)
        if not base_slug:
            raise ValidationError(f"Cannot derive a slug from product name {name!r}")

        try:
            product_status = ProductStatus(status.upper())
        except ValueError:
            raise ValidationError(f"Unknown product status '{status}'") from None

        product = Product(
            id="",  # assigned by the repository on insert
            name=name.strip(),
            sku=sku,
            price=Money.of(price, currency),
            slug=generate_unique_slug(base_slug, self._product_repo.slug_exists),
            compare_price=Money.of(compare_price, currency) if compare_price else None,
            inventory=StockLevel(
                track_quantity=track_quantity,
                quantity=quantity,
                low_stock_threshold=low_stock_threshold,
                allow_backorder=allow_backorder,
            ),
            status=product_status,
        )
        try:
            self._product_repo.add(product)
        except UniqueConstraintViolation as exc:
            # Lost a race with a concurrent insert
            raise ValidationError(str(exc)) from exc
        return product
