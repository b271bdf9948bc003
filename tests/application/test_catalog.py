"""Integration tests for catalog and inventory management use cases."""

import pytest

from commerce.application.add_product import AddProductHandler
from commerce.application.set_inventory import SetInventoryHandler
from commerce.application.show_inventory import ShowInventoryHandler
from commerce.application.update_product import UpdateProductHandler
from commerce.domain.exceptions import EntityNotFoundError, InvalidQuantityError, ValidationError
from commerce.domain.model.inventory import StockLevel
from commerce.domain.model.product import ProductStatus, ProductVariant
from commerce.domain.model.value_objects import Money
from commerce.domain.service.inventory_ledger import InventoryLedger
from tests.fakes import FakeProductRepository


@pytest.fixture
def repo():
    return FakeProductRepository()


class _ReservingOnRead(FakeProductRepository):
    """Runs one reservation right after the next product read."""

    def __init__(self) -> None:
        super().__init__()
        self.pending_reservation: int | None = None

    def get_by_id(self, product_id):
        product = super().get_by_id(product_id)
        if self.pending_reservation is not None:
            quantity, self.pending_reservation = self.pending_reservation, None
            InventoryLedger(self).reserve(product_id, quantity)
        return product


class _InsertingOnSlugCheck(FakeProductRepository):
    """Runs one competing insert while a new product is being prepared."""

    def __init__(self) -> None:
        super().__init__()
        self.competing_add = None

    def slug_exists(self, slug):
        if self.competing_add is not None:
            add, self.competing_add = self.competing_add, None
            add()
        return super().slug_exists(slug)


class TestAddProduct:

    def test_adds_active_product(self, repo):
        product = AddProductHandler(repo).handle(name="Blue Widget", sku="bw-1", price="15.00", quantity=5)
        assert product.id == "1"
        assert product.sku == "BW-1"
        assert product.slug == "blue-widget"
        assert product.status == ProductStatus.ACTIVE
        assert repo.get_by_id("1").inventory.quantity == 5

    def test_ids_increment(self, repo):
        handler = AddProductHandler(repo)
        handler.handle(name="A", sku="A", price="1")
        assert handler.handle(name="B", sku="B", price="1").id == "2"

    def test_competing_insert_keeps_both_products(self):
        repo = _InsertingOnSlugCheck()
        handler = AddProductHandler(repo)
        repo.competing_add = lambda: handler.handle(name="B", sku="B1", price="1")
        added = handler.handle(name="A", sku="A1", price="1")
        assert added.id == "2"
        assert sorted((p.id, p.sku) for p in repo.list_all()) == [("1", "B1"), ("2", "A1")]

    def test_zero_price_accepted(self, repo):
        assert AddProductHandler(repo).handle(name="Freebie", sku="F", price="0").price == Money.zero()

    def test_same_name_gets_unique_slug(self, repo):
        handler = AddProductHandler(repo)
        handler.handle(name="Blue Widget", sku="BW-1", price="15.00")
        assert handler.handle(name="Blue Widget", sku="BW-2", price="15.00").slug == "blue-widget-1"

    def test_duplicate_sku_rejected(self, repo):
        handler = AddProductHandler(repo)
        handler.handle(name="Widget", sku="W", price="1")
        with pytest.raises(ValidationError, match="already exists"):
            handler.handle(name="Other", sku="w", price="1")

    def test_blank_name_rejected(self, repo):
        with pytest.raises(ValidationError, match="name is required"):
            AddProductHandler(repo).handle(name=" ", sku="X", price="1")

    def test_unknown_status_rejected(self, repo):
        with pytest.raises(ValidationError, match="Unknown product status"):
            AddProductHandler(repo).handle(name="X", sku="X", price="1", status="LIMBO")

    def test_negative_stock_rejected(self, repo):
        with pytest.raises(InvalidQuantityError):
            AddProductHandler(repo).handle(name="X", sku="X", price="1", quantity=-1)


class TestUpdateProduct:

    def test_updates_price(self, repo):
        AddProductHandler(repo).handle(name="Widget", sku="W", price="10.00")
        UpdateProductHandler(repo).handle("1", "12.50")
        assert repo.get_by_id("1").price == Money.of("12.50")

    def test_unknown_product(self, repo):
        with pytest.raises(EntityNotFoundError):
            UpdateProductHandler(repo).handle("42", "1.00")

    def test_update_to_zero(self, repo):
        AddProductHandler(repo).handle(name="Widget", sku="W", price="10.00")
        UpdateProductHandler(repo).handle("1", "0")
        assert repo.get_by_id("1").price == Money.zero()

    def test_reservation_during_update_is_kept(self):
        repo = _ReservingOnRead()
        AddProductHandler(repo).handle(name="Widget", sku="W", price="10.00", quantity=5)
        repo.pending_reservation = 3
        updated = UpdateProductHandler(repo).handle("1", "12.50")
        assert updated.inventory.quantity == 2
        product = repo.get_by_id("1")
        assert product.price == Money.of("12.50")
        assert product.inventory.quantity == 2


class TestInventory:

    @pytest.fixture
    def stocked(self, repo):
        AddProductHandler(repo).handle(name="Shirt", sku="SHIRT", price="20.00", quantity=50)
        shirt = repo.get_by_id("1")
        shirt.variants.append(ProductVariant(
            id="v1", name="Large", sku="SHIRT-L", price=Money.of("22.00"), inventory=StockLevel(quantity=3)
        ))
        repo.save(shirt)
        return repo

    def test_set_product_level(self, stocked):
        level = SetInventoryHandler(stocked).handle("shirt", 8)
        assert level.quantity == 8
        assert stocked.get_by_id("1").inventory.quantity == 8

    def test_set_variant_level_by_sku(self, stocked):
        SetInventoryHandler(stocked).handle("SHIRT-L", 30)
        product = stocked.get_by_id("1")
        assert product.stock_for("v1").quantity == 30
        assert product.inventory.quantity == 50

    def test_unknown_sku(self, stocked):
        with pytest.raises(EntityNotFoundError, match="NOPE"):
            SetInventoryHandler(stocked).handle("nope", 1)

    def test_show_lists_products_and_variants(self, stocked):
        lines = ShowInventoryHandler(stocked).handle()
        assert [(line.sku, line.available, line.low_stock) for line in lines] == [
            ("SHIRT", 50, False),
            ("SHIRT-L", 3, True),
        ]
        assert lines[1].name == "Shirt (Large)"

    def test_show_low_stock_only(self, stocked):
        assert [line.sku for line in ShowInventoryHandler(stocked).handle(low_stock_only=True)] == ["SHIRT-L"]
