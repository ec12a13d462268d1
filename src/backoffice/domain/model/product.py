"""Product aggregate.

Products live independently of orders.  Besides catalog data they own the
stock counters every order flow draws from:

* flat stock (``stock``, mirrored into ``quantity``), and
* per-variant stock: each ``VariantReference`` is an axis such as "Color"
  whose options carry their own ``stocks`` counter.

Flat stock is the aggregate ceiling: a variant line consumes both the
selected options and the flat counter.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from backoffice.domain.exceptions import OutOfStockError, ValidationError
from backoffice.domain.model.value_objects import Money

StockOperation = Literal["set", "add", "subtract"]

DEFAULT_MIN_STOCK = 5


@dataclass
class VariantOption:
    label: str
    value: str
    stocks: int = 0


@dataclass
class VariantReference:
    """One variant axis (e.g. "Color") and its options."""

    name: str
    options: list[VariantOption] = field(default_factory=list)

    def find_option(self, value: str) -> VariantOption | None:
        for option in self.options:
            if option.value == value:
                return option
        return None


@dataclass
class Product:
    """A product in the catalog and its stock counters.

    Mutations go through the methods below so that ``quantity`` keeps
    mirroring ``stock`` and so that every changed field is recorded in
    ``modified_fields``.  Repositories persist exactly those fields on
    update.
    """

    id: str
    name: str
    sku: str = ""
    sale_price: Money = field(default_factory=Money.zero)
    base_price: Money = field(default_factory=Money.zero)
    stock: int = 0
    quantity: int = 0
    min_stock: int = DEFAULT_MIN_STOCK
    quantities_sold: int = 0
    references: list[VariantReference] = field(default_factory=list)
    is_active: bool = True
    is_active_in_catalog: bool = False
    modified_fields: set[str] = field(default_factory=set, repr=False, compare=False)

    def __post_init__(self) -> None:
        if self.stock < 0:
            raise ValidationError("Product stock cannot be negative")
        if self.min_stock < 0:
            raise ValidationError("Minimum stock cannot be negative")
        for ref in self.references:
            for option in ref.options:
                if option.stocks < 0:
                    raise ValidationError(
                        f"Stock for {ref.name}={option.value} cannot be negative"
                    )
        self.quantity = self.stock

    # --- Derived state --------------------------------------------------------

    @property
    def is_low_stock(self) -> bool:
        return 0 < self.stock <= self.min_stock

    @property
    def is_out_of_stock(self) -> bool:
        return self.stock <= 0

    @property
    def total_variant_stock(self) -> int:
        if not self.references:
            return self.stock
        return sum(o.stocks for ref in self.references for o in ref.options)

    # --- Change tracking ------------------------------------------------------

    def mark_modified(self, *names: str) -> None:
        self.modified_fields.update(names)

    def clear_modified(self) -> None:
        self.modified_fields.clear()

    # --- Variant lookup -------------------------------------------------------

    def find_reference(self, name: str) -> VariantReference | None:
        for ref in self.references:
            if ref.name == name:
                return ref
        return None

    def resolve_options(self, selections: dict[str, str]) -> list[tuple[str, VariantOption | None]]:
        """Map each selected axis to the matching option (None if no such value).

        Raises ValidationError if an axis is not declared on this product.
        """
        resolved: list[tuple[str, VariantOption | None]] = []
        for axis, value in selections.items():
            ref = self.find_reference(axis)
            if ref is None:
                raise ValidationError(
                    f"Product {self.name} has no variant axis '{axis}'"
                )
            resolved.append((f"{axis}={value}", ref.find_option(value)))
        return resolved

    def variant_shortfall(self, selections: dict[str, str], quantity: int) -> str | None:
        """Describe the first selected option that cannot cover *quantity*."""
        for key, option in self.resolve_options(selections):
            if option is None:
                return f"{key} does not exist"
            if option.stocks < quantity:
                return f"{key} has {option.stocks} available"
        return None

    # --- Stock movements ------------------------------------------------------

    def update_stock(self, amount: int, operation: StockOperation = "set") -> None:
        """Catalog-side stock adjustment."""
        if amount < 0:
            raise ValidationError("Stock adjustment must not be negative")
        if operation == "add":
            self._set_stock(self.stock + amount)
        elif operation == "subtract":
            self._set_stock(self.stock - amount)
        elif operation == "set":
            self._set_stock(amount)
        else:
            raise ValidationError(f"Unknown stock operation: {operation!r}")

    def reduce_stock(self, quantity: int, selections: dict[str, str] | None = None) -> None:
        """Take *quantity* units out of stock for a sale.

        Every selected option is checked before any of them is touched, so a
        line either reduces all of its options or none.
        """
        if selections:
            shortfall = self.variant_shortfall(selections, quantity)
            if shortfall is not None:
                raise OutOfStockError(
                    f"Insufficient stock for {self.name} ({shortfall}, "
                    f"requested {quantity})"
                )
            for _, option in self.resolve_options(selections):
                option.stocks = max(0, option.stocks - quantity)
            self.mark_modified("references")

        self._set_stock(self.stock - quantity)
        self.quantities_sold += quantity
        self.mark_modified("quantities_sold")

    def restore_stock(self, quantity: int, selections: dict[str, str] | None = None) -> list[str]:
        """Put *quantity* units back; returns the selected options that no longer exist."""
        missing: list[str] = []
        if selections:
            for axis, value in selections.items():
                ref = self.find_reference(axis)
                option = ref.find_option(value) if ref is not None else None
                if option is None:
                    missing.append(f"{axis}={value}")
                    continue
                option.stocks += quantity
            self.mark_modified("references")

        self._set_stock(self.stock + quantity)
        self.quantities_sold = max(0, self.quantities_sold - quantity)
        self.mark_modified("quantities_sold")
        return missing

    def add_reference(self, name: str, options: list[VariantOption]) -> None:
        if self.find_reference(name) is not None:
            raise ValidationError(f"Variant axis '{name}' already exists on {self.name}")
        if any(o.stocks < 0 for o in options):
            raise ValidationError("Variant stock cannot be negative")
        self.references.append(VariantReference(name=name, options=list(options)))
        self.mark_modified("references")

    def _set_stock(self, value: int) -> None:
        self.stock = max(0, value)
        self.quantity = self.stock
        self.mark_modified("stock", "quantity")
