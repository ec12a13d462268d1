"""JSON-document implementation of ProductRepository.

Updates write only the fields recorded in ``Product.modified_fields``, so
two flows touching different fields of the same product never overwrite
each other's data.
"""

from __future__ import annotations

from backoffice.domain.exceptions import DuplicateKeyError
from backoffice.domain.model.identifiers import generate_sku
from backoffice.domain.model.product import Product, VariantOption, VariantReference
from backoffice.domain.repository.product_repository import ProductRepository
from backoffice.infrastructure.persistence.serialization import (
    money_from_raw,
    money_to_raw,
)

COLLECTION = "products"


class JsonProductRepository(ProductRepository):

    def __init__(self, session) -> None:
        self._session = session

    # --- ProductRepository interface ------------------------------------------

    def get_by_id(self, product_id: str) -> Product | None:
        raw = self._find("id", product_id)
        return self._to_domain(raw) if raw is not None else None

    def get_by_sku(self, sku: str) -> Product | None:
        raw = self._find("sku", sku)
        return self._to_domain(raw) if raw is not None else None

    def list_all(self) -> list[Product]:
        return [self._to_domain(raw) for raw in self._docs()]

    def save(self, product: Product) -> None:
        if not product.sku:
            product.sku = generate_sku()
            product.mark_modified("sku")
        owner = self._find("sku", product.sku)
        if owner is not None and owner["id"] != product.id:
            raise DuplicateKeyError(f"SKU {product.sku} is already in use")

        full = self._to_raw(product)
        existing = self._find("id", product.id)
        if existing is None:
            self._docs().append(full)
        else:
            for name in product.modified_fields:
                existing[name] = full[name]
        self._session.mark_dirty(COLLECTION)
        product.clear_modified()

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(product: Product) -> dict:
        return {
            "id": product.id,
            "name": product.name,
            "sku": product.sku,
            "sale_price": money_to_raw(product.sale_price),
            "base_price": money_to_raw(product.base_price),
            "stock": product.stock,
            "quantity": product.quantity,
            "min_stock": product.min_stock,
            "quantities_sold": product.quantities_sold,
            "references": [
                {
                    "name": ref.name,
                    "options": [
                        {"label": o.label, "value": o.value, "stocks": o.stocks}
                        for o in ref.options
                    ],
                }
                for ref in product.references
            ],
            "is_active": product.is_active,
            "is_active_in_catalog": product.is_active_in_catalog,
        }

    @staticmethod
    def _to_domain(raw: dict) -> Product:
        return Product(
            id=raw["id"],
            name=raw["name"],
            sku=raw.get("sku", ""),
            sale_price=money_from_raw(raw.get("sale_price")),
            base_price=money_from_raw(raw.get("base_price")),
            stock=raw.get("stock", 0),
            min_stock=raw.get("min_stock", 5),
            quantities_sold=raw.get("quantities_sold", 0),
            references=[
                VariantReference(
                    name=ref["name"],
                    options=[VariantOption(**o) for o in ref.get("options", [])],
                )
                for ref in raw.get("references", [])
            ],
            is_active=raw.get("is_active", True),
            is_active_in_catalog=raw.get("is_active_in_catalog", False),
        )

    # --- Session helpers ------------------------------------------------------

    def _docs(self) -> list[dict]:
        return self._session.documents(COLLECTION)

    def _find(self, key: str, value: str) -> dict | None:
        for raw in self._docs():
            if raw.get(key) == value:
                return raw
        return None
