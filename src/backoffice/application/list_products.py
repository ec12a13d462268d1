"""Application service: List Products use case (query)."""

from __future__ import annotations

from dataclasses import dataclass

from backoffice.domain.model.product import Product
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory


@dataclass(frozen=True)
class ProductLineDTO:
    id: str
    sku: str
    name: str
    sale_price: str
    stock: int
    min_stock: int
    variants: str = ""


def product_to_dto(product: Product) -> ProductLineDTO:
    return ProductLineDTO(
        id=product.id,
        sku=product.sku,
        name=product.name,
        sale_price=str(product.sale_price),
        stock=product.stock,
        min_stock=product.min_stock,
        variants="; ".join(
            f"{ref.name}: " + ", ".join(f"{o.value}({o.stocks})" for o in ref.options)
            for ref in product.references
        ),
    )


class ListProductsHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self) -> list[ProductLineDTO]:
        with self._uow_factory() as uow:
            products = uow.products.list_all()
        return [product_to_dto(p) for p in sorted(products, key=lambda p: p.name.lower())]
