"""Tests for the catalog use cases: add product, stock and variants, listings."""

import pytest

from backoffice.application.add_product import AddProductHandler
from backoffice.application.add_variant import AddVariantHandler
from backoffice.application.list_products import ListProductsHandler
from backoffice.application.set_stock import SetStockHandler
from backoffice.domain.exceptions import (
    DuplicateKeyError,
    ProductNotFoundError,
    ValidationError,
)
from tests.fakes import FakeDatabase, make_product


class TestAddProduct:

    def test_adds_product(self):
        db = FakeDatabase()
        product = AddProductHandler(db.uow).handle("Mug", "15000", stock=8, sku="MUG-1")

        stored = db.products[product.id]
        assert stored.name == "Mug"
        assert stored.stock == stored.quantity == 8
        assert stored.base_price == stored.sale_price

    def test_name_required(self):
        with pytest.raises(ValidationError, match="name is required"):
            AddProductHandler(FakeDatabase().uow).handle(" ", "100")

    def test_duplicate_sku(self):
        db = FakeDatabase([make_product("p1")])
        with pytest.raises(DuplicateKeyError):
            AddProductHandler(db.uow).handle("Other", "100", sku="SKU-p1")
        assert len(db.products) == 1


class TestSetStock:

    @pytest.mark.parametrize(
        "operation, amount, expected",
        [("set", 3, 3), ("add", 3, 13), ("subtract", 3, 7), ("subtract", 30, 0)],
    )
    def test_operations(self, operation, amount, expected):
        db = FakeDatabase([make_product("p1", stock=10)])
        SetStockHandler(db.uow).handle("p1", amount, operation)
        assert db.products["p1"].stock == db.products["p1"].quantity == expected

    def test_by_sku(self):
        db = FakeDatabase([make_product("p1", stock=10)])
        SetStockHandler(db.uow).handle("SKU-p1", 4)
        assert db.products["p1"].stock == 4

    def test_missing_product(self):
        with pytest.raises(ProductNotFoundError):
            SetStockHandler(FakeDatabase().uow).handle("p9", 1)


class TestAddVariant:

    def test_adds_axis(self):
        db = FakeDatabase([make_product("p1")])
        AddVariantHandler(db.uow).handle("p1", "Size", {"S": 2, "M": 3})

        ref = db.products["p1"].find_reference("Size")
        assert [(o.value, o.stocks) for o in ref.options] == [("S", 2), ("M", 3)]

    def test_options_required(self):
        db = FakeDatabase([make_product("p1")])
        with pytest.raises(ValidationError, match="At least one"):
            AddVariantHandler(db.uow).handle("p1", "Size", {})


class TestListProducts:

    def test_sorted_by_name_with_variants(self):
        db = FakeDatabase([
            make_product("p1", "shirt", variants={"Color": {"Red": 1}}),
            make_product("p2", "Cap"),
        ])
        rows = ListProductsHandler(db.uow).handle()
        assert [r.name for r in rows] == ["Cap", "shirt"]
        assert rows[1].variants == "Color: Red(1)"
