"""Application service: Add Product use case."""

from __future__ import annotations

import logging

from backoffice.application.errors import database_errors
from backoffice.domain.exceptions import ValidationError
from backoffice.domain.model.identifiers import new_id
from backoffice.domain.model.product import DEFAULT_MIN_STOCK, Product
from backoffice.domain.model.value_objects import Money
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class AddProductHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(
        self,
        name: str,
        sale_price: str,
        base_price: str | None = None,
        stock: int = 0,
        min_stock: int = DEFAULT_MIN_STOCK,
        sku: str = "",
    ) -> Product:
        """Add a new product to the catalog; the SKU is generated when blank."""
        if not name or not name.strip():
            raise ValidationError("Product name is required")

        product = Product(
            id=new_id(),
            name=name.strip(),
            sku=sku.strip(),
            sale_price=Money.of(sale_price),
            base_price=Money.of(base_price or sale_price),
            stock=stock,
            min_stock=min_stock,
        )
        with database_errors("Could not add the product"):
            with self._uow_factory() as uow:
                uow.products.save(product)
                uow.commit()

        logger.info("Added product %s (%s)", product.name, product.sku)
        return product
