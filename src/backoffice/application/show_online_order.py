"""Application service: Show Online Order use case (query)."""

from __future__ import annotations

from backoffice.application.dto import OrderDTO, online_order_to_dto
from backoffice.domain.exceptions import EntityNotFoundError
from backoffice.domain.repository.unit_of_work import UnitOfWorkFactory


class ShowOnlineOrderHandler:

    def __init__(self, uow_factory: UnitOfWorkFactory) -> None:
        self._uow_factory = uow_factory

    def handle(self, order_id: str) -> OrderDTO:
        with self._uow_factory() as uow:
            order = (
                uow.online_orders.get_by_id(order_id)
                or uow.online_orders.get_by_order_number(order_id)
            )
        if order is None:
            raise EntityNotFoundError(f"Online order {order_id} not found")
        return online_order_to_dto(order)
