"""Application service: Add Variant use case.

Declares a new variant axis (e.g. "Color") on a product together with
its options and their per-option stock.
"""

from __future__ import annotations

from backoffice.application.errors import database_errors
from backoffice.domain.exceptions import ProductNotFoundError, ValidationError
from backoffice.domain.model.product import Product, VariantOption
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory


class AddVariantHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, product_id: str, axis: str, options: dict[str, int]) -> Product:
        """*options* maps option value to its stock; labels default to the value."""
        if not axis or not axis.strip():
            raise ValidationError("Variant axis name is required")
        if not options:
            raise ValidationError("At least one variant option is required")

        with database_errors("Could not add the variant"):
            with self._uow_factory() as uow:
                product = uow.products.get_by_id(product_id) or uow.products.get_by_sku(product_id)
                if product is None:
                    raise ProductNotFoundError(f"Product not found: '{product_id}'")
                product.add_reference(
                    axis.strip(),
                    [VariantOption(label=value, value=value, stocks=qty) for value, qty in options.items()],
                )
                uow.products.save(product)
                uow.commit()
        return product
