"""Customer aggregate: identity, contact data and purchase statistics."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum

from backoffice.domain.exceptions import ValidationError

DOCUMENT_TYPES = ("CC", "TI", "CE", "PA", "NIT")


class CustomerStatus(Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
    BLOCKED = "blocked"


@dataclass
class Address:
    street: str
    city: str
    state: str = ""
    zip_code: str = ""
    country: str = ""
    neighborhood: str = ""
    type: str = "home"
    is_primary: bool = False
    notes: str = ""


@dataclass
class PurchaseStats:
    total_orders: int = 0
    total_spent: Decimal = Decimal("0")
    first_order_date: datetime | None = None
    last_order_date: datetime | None = None
    average_order_value: Decimal = Decimal("0")


@dataclass
class Customer:
    id: str
    identifier: str
    first_name: str
    last_name: str
    phone: str
    email: str = ""
    document_type: str = "CC"
    document_number: str = ""
    addresses: list[Address] = field(default_factory=list)
    purchase_stats: PurchaseStats = field(default_factory=PurchaseStats)
    status: CustomerStatus = CustomerStatus.ACTIVE
    notes: str = ""

    def __post_init__(self) -> None:
        if not self.first_name or not self.first_name.strip():
            raise ValidationError("Customer first name is required")
        if not self.phone or not self.phone.strip():
            raise ValidationError("Customer phone is required")
        if self.document_type not in DOCUMENT_TYPES:
            raise ValidationError(f"Invalid document type: {self.document_type}")
        if not self.identifier:
            self.identifier = self.phone

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    @property
    def primary_address(self) -> Address | None:
        for address in self.addresses:
            if address.is_primary:
                return address
        return self.addresses[0] if self.addresses else None

    def has_address(self, street: str, city: str) -> bool:
        return any(a.street == street and a.city == city for a in self.addresses)

    def add_address(self, address: Address) -> None:
        """Append an address; the first one, or an explicit primary, wins primary."""
        if not self.addresses:
            address.is_primary = True
        if address.is_primary:
            for existing in self.addresses:
                existing.is_primary = False
        self.addresses.append(address)

    def update_purchase_stats(self, order_total: Decimal, at: datetime | None = None) -> None:
        at = at or datetime.now(timezone.utc)
        stats = self.purchase_stats
        stats.total_orders += 1
        stats.total_spent += order_total
        stats.last_order_date = at
        if stats.first_order_date is None:
            stats.first_order_date = at
        stats.average_order_value = stats.total_spent / max(1, stats.total_orders)
