"""JSON-document implementation of OnlineOrderRepository."""

from __future__ import annotations

from backoffice.domain.exceptions import DuplicateKeyError
from backoffice.domain.model.identifiers import new_id
from backoffice.domain.model.online_order import (
    OnlineCustomer,
    OnlineOrder,
    OnlineOrderStatus,
    StatusHistoryEntry,
)
from backoffice.domain.model.order import PaymentStatus
from backoffice.domain.repository.online_order_repository import (
    OnlineOrderRepository,
)
from backoffice.infrastructure.persistence.serialization import (
    dt_from_raw,
    dt_to_raw,
    line_item_from_raw,
    line_item_to_raw,
    money_from_raw,
    money_to_raw,
    return_info_from_raw,
    return_info_to_raw,
)

COLLECTION = "online_orders"


class JsonOnlineOrderRepository(OnlineOrderRepository):

    def __init__(self, session) -> None:
        self._session = session

    def get_by_id(self, order_id: str) -> OnlineOrder | None:
        raw = self._find("id", order_id)
        return self._to_domain(raw) if raw is not None else None

    def get_by_order_number(self, order_number: str) -> OnlineOrder | None:
        raw = self._find("order_number", order_number)
        return self._to_domain(raw) if raw is not None else None

    def list_all(self) -> list[OnlineOrder]:
        return [self._to_domain(raw) for raw in self._docs()]

    def save(self, order: OnlineOrder) -> None:
        owner = self._find("order_number", order.order_number)
        if owner is not None and owner["id"] != order.id:
            raise DuplicateKeyError(f"Order number {order.order_number} already exists")

        if order.id is None:
            order.id = new_id()

        docs = self._docs()
        for i, raw in enumerate(docs):
            if raw["id"] == order.id:
                order.order_number = raw["order_number"]
                docs[i] = self._to_raw(order)
                break
        else:
            docs.append(self._to_raw(order))
        self._session.mark_dirty(COLLECTION)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: OnlineOrder) -> dict:
        return {
            "id": order.id,
            "order_number": order.order_number,
            "customer": vars(order.customer).copy(),
            "items": [line_item_to_raw(item) for item in order.items],
            "discount_amount": money_to_raw(order.discount_amount),
            "shipping_cost": money_to_raw(order.shipping_cost),
            "status": order.status.value,
            "delivery_type": order.delivery_type,
            "payment_method": order.payment_method,
            "payment_status": order.payment_status.value,
            "notes": order.notes,
            "internal_notes": order.internal_notes,
            "rejection_reason": order.rejection_reason,
            "return_info": return_info_to_raw(order.return_info),
            "email_sent": order.email_sent,
            "confirmation_email_sent": order.confirmation_email_sent,
            "status_history": [
                {
                    "status": entry.status.value,
                    "updated_by": entry.updated_by,
                    "notes": entry.notes,
                    "timestamp": dt_to_raw(entry.timestamp),
                }
                for entry in order.status_history
            ],
            "updated_by": order.updated_by,
            "created_at": dt_to_raw(order.created_at),
            "updated_at": dt_to_raw(order.updated_at),
        }

    @staticmethod
    def _to_domain(raw: dict) -> OnlineOrder:
        return OnlineOrder(
            id=raw["id"],
            order_number=raw["order_number"],
            customer=OnlineCustomer(**raw["customer"]),
            items=[line_item_from_raw(i) for i in raw["items"]],
            discount_amount=money_from_raw(raw.get("discount_amount")),
            shipping_cost=money_from_raw(raw.get("shipping_cost")),
            status=OnlineOrderStatus(raw["status"]),
            delivery_type=raw["delivery_type"],
            payment_method=raw["payment_method"],
            payment_status=PaymentStatus(raw.get("payment_status", "pending")),
            notes=raw.get("notes", ""),
            internal_notes=raw.get("internal_notes", ""),
            rejection_reason=raw.get("rejection_reason", ""),
            return_info=return_info_from_raw(raw.get("return_info")),
            email_sent=raw.get("email_sent", False),
            confirmation_email_sent=raw.get("confirmation_email_sent", False),
            status_history=[
                StatusHistoryEntry(
                    status=OnlineOrderStatus(entry["status"]),
                    updated_by=entry["updated_by"],
                    notes=entry["notes"],
                    timestamp=dt_from_raw(entry["timestamp"]),  # type: ignore[arg-type]
                )
                for entry in raw.get("status_history", [])
            ],
            updated_by=raw.get("updated_by"),
            created_at=dt_from_raw(raw["created_at"]),  # type: ignore[arg-type]
            updated_at=dt_from_raw(raw["updated_at"]),  # type: ignore[arg-type]
        )

    def _docs(self) -> list[dict]:
        return self._session.documents(COLLECTION)

    def _find(self, key: str, value: str) -> dict | None:
        for raw in self._docs():
            if raw.get(key) == value:
                return raw
        return None
