import pytest

from bookcart.exceptions import InvalidQuantity, OutOfStock, StockExceeded
from bookcart.services.stock_service import check_add, check_update


class TestCheckAdd:
    def test_fresh_line(self):
        assert check_add(1, stock=3, in_cart=0, quantity=2) == 2

    def test_bumps_existing_quantity(self):
        assert check_add(1, stock=3, in_cart=1, quantity=2) == 3

    def test_out_of_stock(self):
        with pytest.raises(OutOfStock):
            check_add(1, stock=0, in_cart=0, quantity=1)

    def test_missing_stock_counts_as_none(self):
        with pytest.raises(OutOfStock):
            check_add(1, stock=None, in_cart=0, quantity=1)

    def test_exceeded_reports_limit_and_held_quantity(self):
        with pytest.raises(StockExceeded) as exc:
            check_add(7, stock=1, in_cart=1, quantity=1)
        assert exc.value.available == 1
        assert exc.value.in_cart == 1
        assert "Only 1 items available" in str(exc.value)

    @pytest.mark.parametrize("quantity", [0, -2])
    def test_rejects_non_positive_quantity(self, quantity):
        with pytest.raises(InvalidQuantity):
            check_add(1, stock=5, in_cart=0, quantity=quantity)


class TestCheckUpdate:
    def test_within_stock(self):
        assert check_update(1, stock=4, quantity=4) == 4

    def test_above_stock(self):
        with pytest.raises(StockExceeded) as exc:
            check_update(1, stock=4, quantity=5)
        assert exc.value.available == 4

    def test_zero_is_rejected_not_removed(self):
        with pytest.raises(InvalidQuantity):
            check_update(1, stock=4, quantity=0)
