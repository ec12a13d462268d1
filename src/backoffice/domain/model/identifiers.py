"""Identity helpers: entity ids, order numbers and SKUs."""

from __future__ import annotations

import re
import threading
import time
import uuid
from datetime import datetime
from typing import Callable

_ID_PATTERN = re.compile(r"^[0-9a-f]{32}$")


def new_id() -> str:
    return uuid.uuid4().hex


def is_valid_id(value: str | None) -> bool:
    return bool(value) and _ID_PATTERN.match(value) is not None


def valid_id_or_none(value: str | None) -> str | None:
    """Return *value* when it is a well-formed entity id, otherwise None."""
    return value if is_valid_id(value) else None


class OrderNumberGenerator:
    """Builds ``<PREFIX>-YYMMDD-<6 digits>`` order numbers.

    The six digits are the tail of the current epoch milliseconds.  Two
    numbers issued within the same millisecond (or with a frozen clock)
    would collide, so the suffix is bumped past the last one issued for
    the same day.
    """

    def __init__(
        self,
        prefix: str,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._prefix = prefix
        self._clock = clock
        self._lock = threading.Lock()
        self._last: tuple[str, int] | None = None

    def next(self) -> str:
        now = self._clock()
        day = now.strftime("%y%m%d")
        suffix = int(now.timestamp() * 1000) % 1_000_000
        with self._lock:
            if self._last is not None and self._last[0] == day and suffix <= self._last[1]:
                suffix = (self._last[1] + 1) % 1_000_000
            self._last = (day, suffix)
        return f"{self._prefix}-{day}-{suffix:06d}"


def generate_sku() -> str:
    return f"PRD-{int(time.time() * 1000) % 1_000_000:06d}"
