"""Abstract repository for OnlineOrder aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.online_order import OnlineOrder


class OnlineOrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: str) -> OnlineOrder | None:
        """Return an online order by its ID, or None if not found."""

    @abstractmethod
    def get_by_order_number(self, order_number: str) -> OnlineOrder | None:
        """Return an online order by its order number, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[OnlineOrder]:
        """Return every online order."""

    @abstractmethod
    def save(self, order: OnlineOrder) -> None:
        """Persist a new or updated online order; assigns ``order.id`` when new."""
