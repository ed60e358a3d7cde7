"""Unit tests for the Product aggregate."""

import pytest

from retail_sales.domain.exceptions import InsufficientStock, ValidationError
from retail_sales.domain.model.product import Product
from retail_sales.domain.model.value_objects import Money


def _product(stock: int = 10, active: bool = True) -> Product:
    return Product(
        id="1", name="Widget", price=Money.of("15.00"),
        stock_quantity=stock, is_active=active,
    )


class TestProductStock:

    def test_add_stock(self):
        p = _product(stock=10)
        p.add_stock(5)
        assert p.stock_quantity == 15

    def test_remove_stock(self):
        p = _product(stock=10)
        p.remove_stock(4)
        assert p.stock_quantity == 6

    def test_remove_more_than_available_rejected(self):
        p = _product(stock=3)
        with pytest.raises(InsufficientStock, match="need 4, have 3"):
            p.remove_stock(4)
        assert p.stock_quantity == 3

    @pytest.mark.parametrize("qty", [0, -2])
    def test_non_positive_adjustments_rejected(self, qty):
        p = _product()
        with pytest.raises(ValidationError, match="must be positive"):
            p.add_stock(qty)
        with pytest.raises(ValidationError, match="must be positive"):
            p.remove_stock(qty)


class TestProductAvailability:

    def test_available_when_active_and_in_stock(self):
        assert _product(stock=1).is_available_for_sale

    def test_unavailable_when_out_of_stock(self):
        assert not _product(stock=0).is_available_for_sale

    def test_unavailable_when_inactive(self):
        assert not _product(active=False).is_available_for_sale
