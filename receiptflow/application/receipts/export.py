"""Receipt CSV export workflow."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING

from receiptflow.receipt.csv_export import export_receipts_csv, generate_export_filename
from receiptflow.runtime.receipt_export import save_csv

if TYPE_CHECKING:
    from receiptflow.domain.receipt import Receipt


@dataclass(frozen=True)
class ReceiptExportRequest:
    """Inputs for exporting receipts to a CSV file."""

    receipts: tuple[Receipt, ...]
    output_dir: Path | None = None
    filename: str | None = None
    now: datetime | None = None


@dataclass(frozen=True)
class ReceiptExportResult:
    """Outcome from the export workflow."""

    path: Path
    csv_text: str
    row_count: int


def run_receipt_export(request: ReceiptExportRequest) -> ReceiptExportResult:
    """Flatten receipts to CSV text and write it to disk."""
    csv_text = export_receipts_csv(request.receipts)
    filename = request.filename or generate_export_filename(request.now)
    path = save_csv(csv_text, filename, request.output_dir)
    return ReceiptExportResult(
        path=path,
        csv_text=csv_text,
        row_count=sum(len(receipt.items) for receipt in request.receipts),
    )
