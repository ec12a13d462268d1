"""Turns requested lines into order line items with a product snapshot."""

from __future__ import annotations

from backoffice.application.dto import OrderItemSpec
from backoffice.domain.exceptions import ProductNotFoundError
from backoffice.domain.model.order import OrderLineItem
from backoffice.domain.model.value_objects import Money, Quantity, SelectedVariant
from backoffice.domain.repository.product_repository import ProductRepository


def build_line_items(
    product_repo: ProductRepository, specs: list[OrderItemSpec]
) -> list[OrderLineItem]:
    lines: list[OrderLineItem] = []
    for spec in specs:
        product = product_repo.get_by_id(spec.product_id) or product_repo.get_by_sku(spec.product_id)
        if product is None:
            raise ProductNotFoundError(f"Product not found: '{spec.product_id}'")

        price = Money.of(spec.unit_price) if spec.unit_price is not None else product.sale_price
        lines.append(
            OrderLineItem(
                product_id=product.id,
                product_name=product.name,
                sku=product.sku,
                quantity=Quantity(spec.quantity),
                unit_price=price,  # <-- price snapshot
                selected_variant=(
                    SelectedVariant(selections=dict(spec.selections))
                    if spec.selections
                    else None
                ),
                base_price=product.base_price,
            )
        )
    return lines
