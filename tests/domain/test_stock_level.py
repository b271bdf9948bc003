"""Unit tests for the StockLevel value."""

import pytest

from commerce.domain.exceptions import InsufficientStockError, InvalidQuantityError
from commerce.domain.model.inventory import StockLevel


class TestStockLevelCreation:

    def test_defaults(self):
        stock = StockLevel()
        assert stock.track_quantity is True
        assert stock.quantity == 0
        assert stock.low_stock_threshold == 10
        assert stock.allow_backorder is False

    def test_negative_quantity_rejected_without_backorder(self):
        with pytest.raises(InvalidQuantityError):
            StockLevel(quantity=-1)

    def test_negative_quantity_allowed_with_backorder(self):
        assert StockLevel(quantity=-2, allow_backorder=True).quantity == -2

    def test_negative_threshold_rejected(self):
        with pytest.raises(InvalidQuantityError):
            StockLevel(low_stock_threshold=-1)


class TestStockLevelFlags:

    def test_in_stock(self):
        assert StockLevel(quantity=1).is_in_stock
        assert not StockLevel(quantity=0).is_in_stock

    def test_untracked_is_always_in_stock(self):
        assert StockLevel(track_quantity=False, quantity=0).is_in_stock

    def test_low_stock_at_threshold(self):
        assert StockLevel(quantity=10, low_stock_threshold=10).is_low_stock
        assert not StockLevel(quantity=11, low_stock_threshold=10).is_low_stock

    def test_untracked_is_never_low(self):
        assert not StockLevel(track_quantity=False, quantity=0).is_low_stock


class TestTakeAndPutBack:

    def test_take_decrements(self):
        stock = StockLevel(quantity=5)
        stock.take(3)
        assert stock.quantity == 2

    def test_take_exact_amount_leaves_zero(self):
        stock = StockLevel(quantity=3)
        stock.take(3)
        assert stock.quantity == 0

    def test_take_more_than_available_rejected(self):
        stock = StockLevel(quantity=2)
        with pytest.raises(InsufficientStockError, match="need 3, have 2"):
            stock.take(3)
        assert stock.quantity == 2

    def test_backorder_goes_negative(self):
        stock = StockLevel(quantity=1, allow_backorder=True)
        stock.take(3)
        assert stock.quantity == -2

    def test_untracked_never_changes(self):
        stock = StockLevel(track_quantity=False, quantity=0)
        stock.take(100)
        stock.put_back(5)
        assert stock.quantity == 0

    @pytest.mark.parametrize("bad", [0, -1])
    def test_non_positive_quantities_rejected(self, bad):
        with pytest.raises(InvalidQuantityError):
            StockLevel(quantity=5).take(bad)
        with pytest.raises(InvalidQuantityError):
            StockLevel(quantity=5).put_back(bad)

    def test_put_back_increments(self):
        stock = StockLevel(quantity=2)
        stock.put_back(3)
        assert stock.quantity == 5

    def test_set_quantity(self):
        stock = StockLevel(quantity=2)
        stock.set_quantity(40)
        assert stock.quantity == 40

    def test_set_negative_quantity_rejected(self):
        with pytest.raises(InvalidQuantityError):
            StockLevel().set_quantity(-1)

    @pytest.mark.parametrize("bad", [True, False, 2.0, "3"])
    def test_set_non_integer_quantity_rejected(self, bad):
        with pytest.raises(InvalidQuantityError):
            StockLevel().set_quantity(bad)
