"""Integration tests for the CreateOrder use case.

Uses in-memory fake repositories — no file I/O.
"""

import re
from datetime import datetime, timezone

import pytest

from commerce.application.create_order import CreateOrderHandler
from commerce.application.dto import AddressSpec, CartItemSpec, CartSnapshot
from commerce.domain.exceptions import (
    EntityNotFoundError,
    IdGenerationFailedError,
    InsufficientStockError,
    InvalidMoneyValueError,
    ValidationError,
)
from commerce.domain.model.inventory import StockLevel
from commerce.domain.model.product import Product, ProductStatus, ProductVariant, VariantStatus
from commerce.domain.model.value_objects import Money
from tests.fakes import FakeOrderRepository, FakeProductRepository

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
ADDRESS = AddressSpec("Ada", "Lovelace", "1 Analytical Way", "London", "LDN", "N1", "GB")


def _product(pid: str, name: str, price: str, quantity: int = 100, **kwargs) -> Product:
    return Product(
        id=pid,
        name=name,
        sku=name.upper(),
        price=Money.of(price),
        inventory=StockLevel(quantity=quantity),
        status=kwargs.pop("status", ProductStatus.ACTIVE),
        **kwargs,
    )


def _setup(
    products: list[Product] | None = None,
    order_numbers=None,
) -> tuple[CreateOrderHandler, FakeOrderRepository, FakeProductRepository]:
    """Build handler with fake repos, optionally pre-loaded with products."""
    if products is None:
        products = [
            _product("1", "Widget", "30.00"),
            _product("2", "Gadget", "30.00"),
            _product("3", "CheapItem", "5.00"),
        ]
    order_repo = FakeOrderRepository()
    product_repo = FakeProductRepository(products)
    kwargs = {"clock": lambda: NOW}
    if order_numbers is not None:
        kwargs["order_numbers"] = order_numbers
    handler = CreateOrderHandler(order_repo, product_repo, **kwargs)
    return handler, order_repo, product_repo


def _cart(*items: CartItemSpec, **kwargs) -> CartSnapshot:
    defaults = dict(
        user_id="u1",
        items=list(items),
        shipping_address=ADDRESS,
        payment_method="CARD",
        shipping_method="standard",
    )
    defaults.update(kwargs)
    return CartSnapshot(**defaults)


class TestCreateOrderHappyPath:

    def test_creates_order_with_correct_total(self):
        handler, _, _ = _setup()
        dto = handler.handle(_cart(
            CartItemSpec("1", 2),
            CartItemSpec("2", 1),
            tax="8", shipping_cost="10", discount="5",
        ))
        assert dto.subtotal == "$90.00"
        assert dto.total == "$103.00"
        assert dto.status == "PENDING"
        assert dto.payment_status == "PENDING"
        assert dto.user_id == "u1"
        assert len(dto.items) == 2

    def test_reserves_stock(self):
        handler, _, product_repo = _setup()
        handler.handle(_cart(CartItemSpec("1", 3)))
        assert product_repo.get_by_id("1").inventory.quantity == 97

    def test_assigns_order_id_and_number(self):
        handler, _, _ = _setup()
        dto = handler.handle(_cart(CartItemSpec("1", 1)))
        assert dto.id == 1
        assert re.fullmatch(r"ORD-[0-9A-Z]+-[0-9A-Z]{6}", dto.order_number)

    def test_persists_order(self):
        handler, order_repo, _ = _setup()
        dto = handler.handle(_cart(CartItemSpec("1", 1)))
        saved = order_repo.get_by_id(dto.id)
        assert saved is not None
        assert saved.order_number == dto.order_number
        assert saved.created_at == NOW

    def test_sequential_ids(self):
        handler, _, _ = _setup()
        dto1 = handler.handle(_cart(CartItemSpec("1", 1)))
        dto2 = handler.handle(_cart(CartItemSpec("2", 1), user_id="u2"))
        assert dto2.id == dto1.id + 1
        assert dto2.order_number != dto1.order_number

    def test_tax_rate(self):
        handler, _, _ = _setup()
        dto = handler.handle(_cart(CartItemSpec("3", 3), tax_rate="0.08"))
        assert dto.tax == "$1.20"
        assert dto.total == "$16.20"

    def test_price_snapshot_survives_price_change(self):
        handler, order_repo, product_repo = _setup()
        dto = handler.handle(_cart(CartItemSpec("1", 1)))
        product = product_repo.get_by_id("1")
        product.update_price(Money.of("99.00"))
        product_repo.save(product)
        assert order_repo.get_by_id(dto.id).items[0].unit_price == Money.of("30.00")

    def test_variant_line(self):
        shirt = _product("1", "Shirt", "20.00")
        shirt.variants.append(ProductVariant(
            id="v1", name="Large", sku="SHIRT-L", price=Money.of("22.00"), inventory=StockLevel(quantity=4)
        ))
        handler, _, product_repo = _setup([shirt])
        dto = handler.handle(_cart(CartItemSpec("1", 2, variant_id="v1")))
        assert dto.items[0].name == "Shirt (Large)"
        assert dto.items[0].sku == "SHIRT-L"
        assert dto.total == "$44.00"
        stored = product_repo.get_by_id("1")
        assert stored.stock_for("v1").quantity == 2
        assert stored.inventory.quantity == 100


class TestCreateOrderValidation:

    def test_unknown_product(self):
        handler, _, _ = _setup()
        with pytest.raises(EntityNotFoundError, match="Product not found"):
            handler.handle(_cart(CartItemSpec("999", 1)))

    def test_inactive_product(self):
        handler, _, _ = _setup([_product("1", "Old", "5.00", status=ProductStatus.ARCHIVED)])
        with pytest.raises(ValidationError, match="ARCHIVED"):
            handler.handle(_cart(CartItemSpec("1", 1)))

    def test_inactive_variant(self):
        shirt = _product("1", "Shirt", "20.00")
        shirt.variants.append(ProductVariant(
            id="v1", name="Small", sku="SHIRT-S", price=Money.of("20.00"), status=VariantStatus.INACTIVE
        ))
        handler, _, _ = _setup([shirt])
        with pytest.raises(ValidationError, match="not available"):
            handler.handle(_cart(CartItemSpec("1", 1, variant_id="v1")))

    def test_zero_quantity(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="must be positive"):
            handler.handle(_cart(CartItemSpec("1", 0)))

    def test_empty_cart(self):
        handler, order_repo, _ = _setup()
        with pytest.raises(ValidationError, match="at least one item"):
            handler.handle(_cart())
        assert order_repo.count() == 0

    def test_unknown_payment_method(self):
        handler, _, _ = _setup()
        with pytest.raises(ValidationError, match="payment method"):
            handler.handle(_cart(CartItemSpec("1", 1), payment_method="BARTER"))

    def test_excessive_discount_reserves_nothing(self):
        handler, order_repo, product_repo = _setup()
        with pytest.raises(InvalidMoneyValueError):
            handler.handle(_cart(CartItemSpec("3", 1), discount="100"))
        assert product_repo.get_by_id("3").inventory.quantity == 100
        assert order_repo.count() == 0


class TestCreateOrderRollback:

    def test_insufficient_stock_restores_every_line(self):
        products = [
            _product("1", "Widget", "10.00", quantity=5),
            _product("2", "Gadget", "10.00", quantity=5),
            _product("3", "Rare", "10.00", quantity=1),
        ]
        handler, order_repo, product_repo = _setup(products)
        with pytest.raises(InsufficientStockError):
            handler.handle(_cart(CartItemSpec("1", 2), CartItemSpec("2", 3), CartItemSpec("3", 2)))
        assert [product_repo.get_by_id(pid).inventory.quantity for pid in "123"] == [5, 5, 1]
        assert order_repo.count() == 0

    def test_order_number_collision_retried(self):
        numbers = iter(["ORD-A-000001", "ORD-A-000001", "ORD-A-000002"])
        handler, order_repo, _ = _setup(order_numbers=lambda: next(numbers))
        handler.handle(_cart(CartItemSpec("1", 1)))
        dto = handler.handle(_cart(CartItemSpec("1", 1)))
        assert dto.order_number == "ORD-A-000002"
        assert order_repo.add_attempts == 3

    def test_gives_up_after_three_collisions_and_releases_stock(self):
        handler, order_repo, product_repo = _setup(order_numbers=lambda: "ORD-SAME-000000")
        handler.handle(_cart(CartItemSpec("1", 1)))
        with pytest.raises(IdGenerationFailedError):
            handler.handle(_cart(CartItemSpec("1", 4)))
        assert order_repo.count() == 1
        assert order_repo.add_attempts == 4
        assert product_repo.get_by_id("1").inventory.quantity == 99
