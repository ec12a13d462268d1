"""Status change policies for order aggregates.

Two policies exist:

* ``AllowListPolicy``: any legal status may be set from any status.  POS
  orders use it by default so staff can correct a status by hand.
* ``TransitionGraphPolicy``: only the edges of a fixed graph are legal.
  Online orders always use it; POS orders can opt in through configuration.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Mapping

from backoffice.domain.exceptions import InvalidStatusTransitionError


class StatusPolicy(ABC):

    @abstractmethod
    def allowed_from(self, current: Enum) -> list[Enum]:
        """Statuses reachable from *current* in one step."""

    def check(self, current: Enum, target: Enum) -> None:
        allowed = self.allowed_from(current)
        if target not in allowed:
            names = ", ".join(s.value for s in allowed) or "none"
            raise InvalidStatusTransitionError(
                f"Cannot change status from '{current.value}' to '{target.value}'. "
                f"Allowed statuses: {names}"
            )


class AllowListPolicy(StatusPolicy):

    def __init__(self, legal: Iterable[Enum]) -> None:
        self._legal = list(legal)

    def allowed_from(self, current: Enum) -> list[Enum]:
        return list(self._legal)


class TransitionGraphPolicy(StatusPolicy):

    def __init__(self, graph: Mapping[Enum, Iterable[Enum]]) -> None:
        self._graph = {k: list(v) for k, v in graph.items()}

    def allowed_from(self, current: Enum) -> list[Enum]:
        return list(self._graph.get(current, []))
