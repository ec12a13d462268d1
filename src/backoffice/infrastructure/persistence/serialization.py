"""Shared JSON converters for value objects and embedded documents."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from backoffice.domain.model.order import OrderLineItem, ReturnInfo
from backoffice.domain.model.value_objects import (
    DEFAULT_CURRENCY,
    Money,
    Quantity,
    SelectedVariant,
)


def money_to_raw(money: Money) -> dict:
    return {"amount": str(money.amount), "currency": money.currency}


def money_from_raw(raw: dict | None) -> Money:
    if not raw:
        return Money.zero()
    return Money(Decimal(raw["amount"]), raw.get("currency", DEFAULT_CURRENCY))


def dt_to_raw(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def dt_from_raw(raw: str | None) -> datetime | None:
    return datetime.fromisoformat(raw) if raw else None


def line_item_to_raw(item: OrderLineItem) -> dict:
    variant = item.selected_variant
    return {
        "product_id": item.product_id,
        "product_name": item.product_name,
        "sku": item.sku,
        "quantity": item.quantity.value,
        "unit_price": money_to_raw(item.unit_price),
        "base_price": money_to_raw(item.base_price) if item.base_price else None,
        "image": item.image,
        "category": item.category,
        "selected_variant": (
            {
                "selections": dict(variant.selections),
                "reference_name": variant.reference_name,
                "option_label": variant.option_label,
                "option_value": variant.option_value,
            }
            if variant is not None
            else None
        ),
    }


def line_item_from_raw(raw: dict) -> OrderLineItem:
    variant = raw.get("selected_variant")
    return OrderLineItem(
        product_id=raw["product_id"],
        product_name=raw["product_name"],
        sku=raw.get("sku", ""),
        quantity=Quantity(raw["quantity"]),
        unit_price=money_from_raw(raw["unit_price"]),
        base_price=money_from_raw(raw["base_price"]) if raw.get("base_price") else None,
        image=raw.get("image", ""),
        category=raw.get("category", ""),
        selected_variant=SelectedVariant(**variant) if variant else None,
    )


def return_info_to_raw(info: ReturnInfo | None) -> dict | None:
    if info is None:
        return None
    return {
        "reason": info.reason,
        "notes": info.notes,
        "refund_requested": info.refund_requested,
        "refund_processed": info.refund_processed,
        "refund_amount": money_to_raw(info.refund_amount),
        "exchange_product_id": info.exchange_product_id,
        "processed_by": info.processed_by,
        "processed_at": dt_to_raw(info.processed_at),
    }


def return_info_from_raw(raw: dict | None) -> ReturnInfo | None:
    if not raw:
        return None
    return ReturnInfo(
        reason=raw["reason"],
        notes=raw.get("notes", ""),
        refund_requested=raw.get("refund_requested", False),
        refund_processed=raw.get("refund_processed", False),
        refund_amount=money_from_raw(raw.get("refund_amount")),
        exchange_product_id=raw.get("exchange_product_id"),
        processed_by=raw.get("processed_by"),
        processed_at=dt_from_raw(raw.get("processed_at")),  # type: ignore[arg-type]
    )
