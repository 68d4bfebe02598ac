"""Data models for structured receipt extraction."""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any


@dataclass(frozen=True)
class LineItem:
    """A single purchased item on a receipt."""

    name: str
    quantity: Decimal
    unit_price: Decimal
    # Line total as printed; validated against quantity * unit_price, never recomputed.
    line_total: Decimal

    def to_wire(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "quantity": float(self.quantity),
            "unitPrice": float(self.unit_price),
            "lineTotal": float(self.line_total),
        }


@dataclass(frozen=True)
class Receipt:
    """Structured receipt decoded from one extraction call.

    ``store_name`` and ``date`` are None when the extraction reported null.
    ``items`` keeps extraction order, which is also the export order.
    """

    store_name: str | None
    date: str | None
    items: tuple[LineItem, ...] = field(default_factory=tuple)
    subtotal: Decimal = Decimal("0")
    tax: Decimal = Decimal("0")
    total: Decimal = Decimal("0")

    def to_wire(self) -> dict[str, Any]:
        """Return the receipt using the extraction contract's field names."""
        return {
            "storeName": self.store_name,
            "date": self.date,
            "items": [item.to_wire() for item in self.items],
            "subtotal": float(self.subtotal),
            "tax": float(self.tax),
            "total": float(self.total),
        }


@dataclass(frozen=True)
class ValidationOutcome:
    """Advisory result of checking a receipt's arithmetic."""

    is_valid: bool
    warnings: tuple[str, ...] = ()

    def to_wire(self) -> dict[str, Any]:
        return {"isValid": self.is_valid, "warnings": list(self.warnings)}
