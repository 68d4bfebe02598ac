"""Advisory arithmetic checks for decoded receipts.

Warnings never block export. Checks run in a fixed order: items present,
then per item (quantity, line total, price cross-check), then subtotal and total.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal

from receiptflow.domain.receipt import Receipt, ValidationOutcome

# Margins that absorb OCR digit noise and rounding.
ITEM_TOLERANCE = Decimal("0.02")
SUBTOTAL_TOLERANCE = Decimal("0.10")
TOTAL_TOLERANCE = Decimal("0.02")

NO_ITEMS_WARNING = "No items found in receipt"


@dataclass(frozen=True)
class Tolerances:
    """Numeric margins used by validate_receipt."""

    item: Decimal = ITEM_TOLERANCE
    subtotal: Decimal = SUBTOTAL_TOLERANCE
    total: Decimal = TOTAL_TOLERANCE


DEFAULT_TOLERANCES = Tolerances()


def _fmt(value: Decimal) -> str:
    return f"{value:.2f}"


def validate_receipt(receipt: Receipt, tolerances: Tolerances = DEFAULT_TOLERANCES) -> ValidationOutcome:
    """
    Check a receipt's arithmetic self-consistency.

    Args:
        receipt: Decoded receipt
        tolerances: Override for the default numeric margins

    Returns:
        ValidationOutcome; is_valid is True only when no warning was raised
    """
    if not receipt.items:
        # Totals cannot be reconciled without items; report only the missing items.
        return ValidationOutcome(is_valid=False, warnings=(NO_ITEMS_WARNING,))

    warnings: list[str] = []

    for number, item in enumerate(receipt.items, 1):
        if item.quantity <= 0:
            warnings.append(f"Item {number}: Invalid quantity ({_fmt(item.quantity)})")
        if item.line_total < 0:
            warnings.append(f"Item {number}: Invalid line total ({_fmt(item.line_total)})")
        # Unit price 0 means it was not printed; nothing to cross-check.
        if item.unit_price > 0:
            expected = item.quantity * item.unit_price
            if abs(expected - item.line_total) > tolerances.item:
                warnings.append(
                    f"Item {number}: Price mismatch (expected: {_fmt(expected)}, got: {_fmt(item.line_total)})"
                )

    computed_subtotal = sum((item.line_total for item in receipt.items), Decimal("0"))
    if abs(computed_subtotal - receipt.subtotal) > tolerances.subtotal:
        warnings.append(
            f"Subtotal mismatch (calculated: {_fmt(computed_subtotal)}, stated: {_fmt(receipt.subtotal)})"
        )

    expected_total = receipt.subtotal + receipt.tax
    if abs(expected_total - receipt.total) > tolerances.total:
        warnings.append(f"Total mismatch (expected: {_fmt(expected_total)}, stated: {_fmt(receipt.total)})")

    return ValidationOutcome(is_valid=not warnings, warnings=tuple(warnings))
