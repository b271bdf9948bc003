"""JSON-file-backed implementation of ProductRepository."""

from __future__ import annotations

import copy
from decimal import Decimal
from typing import Callable, TypeVar

from commerce.domain.exceptions import EntityNotFoundError, UniqueConstraintViolation
from commerce.domain.model.inventory import StockLevel
from commerce.domain.model.product import Product, ProductStatus, ProductVariant, VariantStatus
from commerce.domain.model.value_objects import Money
from commerce.domain.repository.product_repository import ProductRepository
from commerce.infrastructure.persistence.json_file import JsonFile

T = TypeVar("T")


class JsonProductRepository(JsonFile, ProductRepository):

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        with self._lock:
            for raw in self._load_raw():
                if raw["id"] == product_id:
                    return self._to_domain(raw)
        return None

    def get_by_sku(self, sku: str) -> Product | None:
        with self._lock:
            for raw in self._load_raw():
                if sku in _skus(raw):
                    return self._to_domain(raw)
        return None

    def slug_exists(self, slug: str) -> bool:
        with self._lock:
            return any(raw.get("slug") == slug for raw in self._load_raw())

    def list_all(self) -> list[Product]:
        with self._lock:
            return [self._to_domain(raw) for raw in self._load_raw()]

    def add(self, product: Product) -> None:
        with self._lock:
            records = self._load_raw()
            self._check_unique(records, product)
            product.id = str(max((int(raw["id"]) for raw in records), default=0) + 1)
            records.append(self._to_raw(product))
            self._persist_raw(records)

    def save(self, product: Product) -> None:
        with self._lock:
            records = self._load_raw()
            self._check_unique(records, product)
            new_raw = self._to_raw(product)

            # Upsert: replace if exists, otherwise append
            for i, raw in enumerate(records):
                if raw["id"] == product.id:
                    records[i] = new_raw
                    break
            else:
                records.append(new_raw)
            self._persist_raw(records)

    # --- Atomic primitives ----------------------------------------------------

    def reserve_stock(self, product_id: str, variant_id: str | None, quantity: int) -> StockLevel:
        return self._update_stock(product_id, variant_id, lambda s: s.take(quantity))

    def release_stock(self, product_id: str, variant_id: str | None, quantity: int) -> StockLevel:
        return self._update_stock(product_id, variant_id, lambda s: s.put_back(quantity))

    def set_stock(self, product_id: str, variant_id: str | None, quantity: int) -> StockLevel:
        return self._update_stock(product_id, variant_id, lambda s: s.set_quantity(quantity))

    def update_price(self, product_id: str, new_price: Money) -> Product:
        def apply(product: Product) -> Product:
            product.update_price(new_price)
            return product

        return self._update(product_id, apply)

    def increment_sales(self, product_id: str, quantity: int) -> None:
        self._update(product_id, lambda p: p.record_sale(quantity))

    def update_rating(self, product_id: str, average: Decimal, count: int) -> None:
        self._update(product_id, lambda p: p.apply_rating(average, count))

    def _update_stock(
        self, product_id: str, variant_id: str | None, change: Callable[[StockLevel], None]
    ) -> StockLevel:
        def apply(product: Product) -> StockLevel:
            stock = product.stock_for(variant_id)
            change(stock)
            return copy.copy(stock)

        return self._update(product_id, apply)

    def _update(self, product_id: str, apply: Callable[[Product], T]) -> T:
        """Load, mutate and write back one product while holding the lock."""
        with self._lock:
            records = self._load_raw()
            for i, raw in enumerate(records):
                if raw["id"] == product_id:
                    product = self._to_domain(raw)
                    result = apply(product)  # raises before anything is written
                    records[i] = self._to_raw(product)
                    self._persist_raw(records)
                    return result
        raise EntityNotFoundError(f"Product with ID '{product_id}' not found")

    @staticmethod
    def _check_unique(records: list[dict], product: Product) -> None:
        skus = {product.sku} | {v.sku for v in product.variants}
        for raw in records:
            if raw["id"] == product.id:
                continue
            clash = _skus(raw) & skus
            if clash:
                raise UniqueConstraintViolation(f"SKU {sorted(clash)[0]} already exists")
            if product.slug and raw.get("slug") == product.slug:
                raise UniqueConstraintViolation(f"Slug '{product.slug}' already exists")

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "slug": product.slug,
            "sku": product.sku,
            "price": str(product.price.amount),
            "currency": product.price.currency,
            "compare_price": _amount(product.compare_price),
            "inventory": _stock_to_raw(product.inventory),
            "variants": [
                {
                    "id": v.id,
                    "name": v.name,
                    "sku": v.sku,
                    "price": str(v.price.amount),
                    "compare_price": _amount(v.compare_price),
                    "status": v.status.value,
                    "inventory": _stock_to_raw(v.inventory),
                }
                for v in product.variants
            ],
            "status": product.status.value,
            "average_rating": str(product.average_rating),
            "review_count": product.review_count,
            "sales_count": product.sales_count,
            "view_count": product.view_count,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        currency = raw.get("currency", "USD")

        def money(value: str | None) -> Money | None:
            return Money(Decimal(value), currency) if value is not None else None

        return Product(
            id=raw["id"],
            name=raw["name"],
            slug=raw.get("slug", ""),
            sku=raw["sku"],
            price=Money(Decimal(raw["price"]), currency),
            compare_price=money(raw.get("compare_price")),
            inventory=_stock_to_domain(raw.get("inventory", {})),
            variants=[
                ProductVariant(
                    id=v["id"],
                    name=v["name"],
                    sku=v["sku"],
                    price=Money(Decimal(v["price"]), currency),
                    compare_price=money(v.get("compare_price")),
                    status=VariantStatus(v.get("status", "ACTIVE")),
                    inventory=_stock_to_domain(v.get("inventory", {})),
                )
                for v in raw.get("variants", [])
            ],
            status=ProductStatus(raw.get("status", "DRAFT")),
            average_rating=Decimal(raw.get("average_rating", "0.0")),
            review_count=raw.get("review_count", 0),
            sales_count=raw.get("sales_count", 0),
            view_count=raw.get("view_count", 0),
        )


def _skus(raw: dict) -> set[str]:
    return {raw["sku"], *(v["sku"] for v in raw.get("variants", []))}


def _amount(money: Money | None) -> str | None:
    return str(money.amount) if money is not None else None


def _stock_to_raw(stock: StockLevel) -> dict:
    return {
        "track_quantity": stock.track_quantity,
        "quantity": stock.quantity,
        "low_stock_threshold": stock.low_stock_threshold,
        "allow_backorder": stock.allow_backorder,
    }


def _stock_to_domain(raw: dict) -> StockLevel:
    return StockLevel(**raw)
