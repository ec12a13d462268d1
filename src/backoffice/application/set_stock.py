"""Application service: Set Stock use case (catalog-side adjustment)."""

from __future__ import annotations

import logging

from backoffice.application.errors import database_errors
from backoffice.domain.exceptions import ProductNotFoundError
from backoffice.domain.model.product import Product, StockOperation
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory

logger = logging.getLogger(__name__)


class SetStockHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, product_id: str, amount: int, operation: StockOperation = "set") -> Product:
        with database_errors("Could not update the stock"):
            with self._uow_factory() as uow:
                product = uow.products.get_by_id(product_id) or uow.products.get_by_sku(product_id)
                if product is None:
                    raise ProductNotFoundError(f"Product not found: '{product_id}'")
                product.update_stock(amount, operation)
                uow.products.save(product)
                uow.commit()

        logger.info("Stock of %s is now %d (%s %d)", product.sku, product.stock, operation, amount)
        return product
