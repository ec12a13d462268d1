"""Outbound notification port used after an online order is placed."""

from __future__ import annotations

from abc import ABC, abstractmethod

from backoffice.domain.model.online_order import OnlineOrder


class EmailNotifier(ABC):

    @abstractmethod
    def send_order_confirmation(self, order: OnlineOrder) -> None:
        """Tell the shopper their order was received. May raise on delivery failure."""
