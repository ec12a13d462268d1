"""Unit tests for the Product aggregate and its stock counters."""

import pytest

from backoffice.domain.exceptions import OutOfStockError, ValidationError
from backoffice.domain.model.product import Product, VariantOption
from tests.fakes import make_product


class TestProductInvariants:

    def test_quantity_mirrors_stock_on_creation(self):
        p = Product(id="p1", name="Shirt", stock=7, quantity=99)
        assert p.quantity == 7

    def test_negative_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            Product(id="p1", name="Shirt", stock=-1)

    def test_negative_option_stock_rejected(self):
        with pytest.raises(ValidationError, match="cannot be negative"):
            make_product(variants={"Color": {"Red": -2}})

    def test_low_stock(self):
        assert make_product(stock=5, min_stock=5).is_low_stock
        assert not make_product(stock=6, min_stock=5).is_low_stock
        assert not make_product(stock=0, min_stock=5).is_low_stock
        assert make_product(stock=0).is_out_of_stock

    def test_total_variant_stock(self):
        p = make_product(variants={"Color": {"Red": 2, "Blue": 3}})
        assert p.total_variant_stock == 5


class TestUpdateStock:

    def test_set(self):
        p = make_product(stock=10)
        p.update_stock(4, "set")
        assert p.stock == 4
        assert p.quantity == 4
        assert {"stock", "quantity"} <= p.modified_fields

    def test_add(self):
        p = make_product(stock=10)
        p.update_stock(5, "add")
        assert p.stock == p.quantity == 15

    def test_subtract_floors_at_zero(self):
        p = make_product(stock=3)
        p.update_stock(10, "subtract")
        assert p.stock == p.quantity == 0

    def test_negative_amount_rejected(self):
        with pytest.raises(ValidationError):
            make_product().update_stock(-1, "add")

    def test_unknown_operation_rejected(self):
        with pytest.raises(ValidationError, match="Unknown stock operation"):
            make_product().update_stock(1, "multiply")


class TestReduceStock:

    def test_flat_reduction(self):
        p = make_product(stock=10)
        p.reduce_stock(3)
        assert p.stock == p.quantity == 7
        assert p.quantities_sold == 3
        assert p.modified_fields == {"stock", "quantity", "quantities_sold"}

    def test_variant_reduction_touches_option_and_flat_stock(self):
        p = make_product(stock=20, variants={"Color": {"Red": 5}, "Size": {"M": 4}})
        p.reduce_stock(2, {"Color": "Red", "Size": "M"})

        assert p.find_reference("Color").find_option("Red").stocks == 3
        assert p.find_reference("Size").find_option("M").stocks == 2
        assert p.stock == 18
        assert "references" in p.modified_fields

    def test_variant_reduction_is_all_or_nothing(self):
        """Size=M lacks stock, so Color=Red must not be touched either."""
        p = make_product(stock=20, variants={"Color": {"Red": 5}, "Size": {"M": 1}})

        with pytest.raises(OutOfStockError, match="Size=M has 1 available"):
            p.reduce_stock(2, {"Color": "Red", "Size": "M"})

        assert p.find_reference("Color").find_option("Red").stocks == 5
        assert p.stock == 20
        assert p.modified_fields == set()

    def test_missing_option_rejected(self):
        p = make_product(variants={"Color": {"Red": 5}})
        with pytest.raises(OutOfStockError, match="Color=Green does not exist"):
            p.reduce_stock(1, {"Color": "Green"})

    def test_undeclared_axis_rejected(self):
        p = make_product(variants={"Color": {"Red": 5}})
        with pytest.raises(ValidationError, match="no variant axis 'Size'"):
            p.reduce_stock(1, {"Size": "M"})


class TestRestoreStock:

    def test_round_trip(self):
        p = make_product(stock=10, variants={"Color": {"Red": 4}})
        p.reduce_stock(3, {"Color": "Red"})
        missing = p.restore_stock(3, {"Color": "Red"})

        assert missing == []
        assert p.stock == p.quantity == 10
        assert p.find_reference("Color").find_option("Red").stocks == 4
        assert p.quantities_sold == 0

    def test_missing_option_reported_and_flat_stock_restored(self):
        p = make_product(stock=10, variants={"Color": {"Red": 4}})
        missing = p.restore_stock(2, {"Color": "Green", "Size": "M"})

        assert missing == ["Color=Green", "Size=M"]
        assert p.stock == 12

    def test_quantities_sold_never_negative(self):
        p = make_product(stock=10)
        p.restore_stock(5)
        assert p.quantities_sold == 0


class TestAddReference:

    def test_adds_axis(self):
        p = make_product()
        p.add_reference("Color", [VariantOption("Red", "Red", 3)])
        assert p.find_reference("Color").find_option("Red").stocks == 3
        assert "references" in p.modified_fields

    def test_duplicate_axis_rejected(self):
        p = make_product(variants={"Color": {"Red": 1}})
        with pytest.raises(ValidationError, match="already exists"):
            p.add_reference("Color", [VariantOption("Blue", "Blue", 1)])
