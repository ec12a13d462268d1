"""Domain service: Stock Reservation.

Coordinates stock movements across Product aggregates for the lines of an
order.  Both order kinds use it:

* POS orders validate and commit at creation time;
* online orders validate at creation time and commit when confirmed.

Availability checking and committing are separate steps.  Callers run them
back-to-back inside one unit of work, so a failure in either step rolls
back every product touched so far.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from typing import Iterable

from backoffice.domain.exceptions import (
    OutOfStockError,
    ProductInactiveError,
    ProductNotFoundError,
)
from backoffice.domain.model.order import OrderLineItem
from backoffice.domain.model.product import Product
from backoffice.domain.repository.product_repository import ProductRepository

logger = logging.getLogger(__name__)


class StockReservationService:

    def __init__(self, product_repo: ProductRepository) -> None:
        self._product_repo = product_repo

    def validate_availability(self, items: Iterable[OrderLineItem]) -> None:
        """Check that every line can be served, without mutating anything.

        Lines for the same product (or the same variant option) are summed,
        so two lines of 3 against a stock of 5 fail.  Flat stock is checked
        for variant lines too: it is the aggregate ceiling.
        """
        products: dict[str, Product] = {}
        flat_demand: dict[str, int] = defaultdict(int)
        option_demand: dict[tuple[str, str], int] = defaultdict(int)

        for line in items:
            product = products.get(line.product_id)
            if product is None:
                product = self._load(line)
                if not product.is_active:
                    raise ProductInactiveError(f"Product {line.product_name} is not active")
                products[line.product_id] = product

            qty = line.quantity.value
            selections = line.selections
            if selections:
                for key, option in product.resolve_options(selections):
                    option_demand[(line.product_id, key)] += qty
                    needed = option_demand[(line.product_id, key)]
                    if option is None or option.stocks < needed:
                        available = option.stocks if option is not None else 0
                        raise OutOfStockError(
                            f"Insufficient stock for {line.product_name} with the "
                            f"selected options ({key}). Available: {available}, "
                            f"requested: {needed}"
                        )

            flat_demand[line.product_id] += qty
            needed = flat_demand[line.product_id]
            if product.stock < needed:
                raise OutOfStockError(
                    f"Insufficient stock for {line.product_name}. "
                    f"Available: {product.stock}, requested: {needed}"
                )

    def commit_reduction(self, items: Iterable[OrderLineItem]) -> None:
        """Take each line's quantity out of flat and variant stock.

        Each product is re-read so earlier lines for the same product are
        taken into account.  A line whose selected options cannot all cover
        the quantity raises OutOfStockError before any of them changes.
        """
        for line in items:
            product = self._load(line)
            product.reduce_stock(line.quantity.value, line.selections or None)
            self._product_repo.save(product)
            logger.debug(
                "Reduced %s x%d (stock now %d)",
                product.sku or product.id,
                line.quantity.value,
                product.stock,
            )

    def restore_quantity(self, items: Iterable[OrderLineItem]) -> None:
        """Put each line's quantity back (cancellations and returns)."""
        for line in items:
            product = self._product_repo.get_by_id(line.product_id)
            if product is None:
                logger.warning(
                    "Skipping stock restore for missing product %s (%s)",
                    line.product_id,
                    line.product_name,
                )
                continue
            missing = product.restore_stock(line.quantity.value, line.selections or None)
            if missing:
                logger.warning(
                    "Variant options %s of %s no longer exist; restored flat stock only",
                    ", ".join(missing),
                    product.name,
                )
            self._product_repo.save(product)

    # --- Internal helpers -----------------------------------------------------

    def _load(self, line: OrderLineItem) -> Product:
        product = self._product_repo.get_by_id(line.product_id)
        if product is None:
            raise ProductNotFoundError(f"Product {line.product_name} not found")
        return product
