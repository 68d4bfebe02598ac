"""Tests for CSV persistence."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from receiptflow.application.receipts.export import ReceiptExportRequest, run_receipt_export
from receiptflow.domain.receipt import LineItem, Receipt
from receiptflow.runtime.receipt_export import save_csv


def test_save_csv_writes_utf8(tmp_path: Path) -> None:
    path = save_csv("Store\nCafé Müller\n", "receipt_2025-12-02_143045.csv", tmp_path)

    assert path == tmp_path / "receipt_2025-12-02_143045.csv"
    assert path.read_bytes() == "Store\nCafé Müller\n".encode("utf-8")


def test_save_csv_never_overwrites(tmp_path: Path) -> None:
    first = save_csv("a\n", "receipt.csv", tmp_path)
    second = save_csv("b\n", "receipt.csv", tmp_path)
    third = save_csv("c\n", "receipt.csv", tmp_path)

    assert [p.name for p in (first, second, third)] == ["receipt.csv", "receipt_1.csv", "receipt_2.csv"]
    assert first.read_text() == "a\n"


def test_save_csv_defaults_to_project_exports(isolated_project_root: Path) -> None:
    path = save_csv("x\n", "out.csv")

    assert path == isolated_project_root.resolve() / "exports" / "out.csv"


def test_export_workflow_names_file_from_timestamp(tmp_path: Path) -> None:
    receipt = Receipt(
        store_name="Whole Foods",
        date="2025-12-02",
        items=(LineItem("Organic Bananas", Decimal("1"), Decimal("2.49"), Decimal("2.49")),),
        subtotal=Decimal("2.49"),
        tax=Decimal("0"),
        total=Decimal("2.49"),
    )

    result = run_receipt_export(
        ReceiptExportRequest(receipts=(receipt, receipt), output_dir=tmp_path, now=datetime(2025, 12, 2, 14, 30, 45))
    )

    assert result.path.name == "receipt_2025-12-02_143045.csv"
    assert result.row_count == 2
    assert result.path.read_text(encoding="utf-8") == result.csv_text
