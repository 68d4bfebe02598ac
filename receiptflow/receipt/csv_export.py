"""Format Receipt data as CSV rows."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal

from receiptflow.domain.receipt import Receipt

CSV_HEADER = (
    "Store",
    "Date",
    "Item Name",
    "Quantity",
    "Unit Price",
    "Line Total",
    "Receipt Subtotal",
    "Tax",
    "Total",
)

UNKNOWN_STORE = "Unknown"
UNKNOWN_DATE = "N/A"

CENT = Decimal("0.01")


def escape_csv_field(value: str) -> str:
    """Quote a text field if it contains a comma, a double quote, or a newline."""
    if "," in value or '"' in value or "\n" in value:
        escaped = value.replace('"', '""')
        return f'"{escaped}"'
    return value


def format_amount(value: Decimal | float | int) -> str:
    """Render a number with exactly two decimals and a '.' separator.

    Half-cent values round away from zero, so 2.345 renders as 2.35.
    """
    # Format spec mini-language is locale-independent unless 'n' is used.
    return f"{Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP):f}"


def _receipt_rows(receipt: Receipt) -> list[str]:
    store = escape_csv_field(receipt.store_name if receipt.store_name is not None else UNKNOWN_STORE)
    date_str = receipt.date if receipt.date is not None else UNKNOWN_DATE
    totals = [format_amount(receipt.subtotal), format_amount(receipt.tax), format_amount(receipt.total)]

    rows = []
    for item in receipt.items:
        fields = [
            store,
            date_str,
            escape_csv_field(item.name),
            format_amount(item.quantity),
            format_amount(item.unit_price),
            format_amount(item.line_total),
            *totals,
        ]
        rows.append(",".join(fields))
    return rows


def export_receipts_csv(receipts: Iterable[Receipt]) -> str:
    """
    Flatten receipts into CSV text under a single shared header.

    One row per line item; receipt-level columns repeat on every row of
    that receipt. Receipts without items contribute no rows.
    """
    lines = [",".join(CSV_HEADER)]
    for receipt in receipts:
        lines.extend(_receipt_rows(receipt))
    return "\n".join(lines) + "\n"


def export_receipt_csv(receipt: Receipt) -> str:
    """Export a single receipt."""
    return export_receipts_csv([receipt])


def generate_export_filename(now: datetime | None = None) -> str:
    """Return a sortable export filename, e.g. receipt_2025-12-02_143045.csv."""
    if now is None:
        now = datetime.now()
    return f"receipt_{now.strftime('%Y-%m-%d_%H%M%S')}.csv"
