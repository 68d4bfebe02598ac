"""Receipt workflows."""

from receiptflow.application.receipts.export import ReceiptExportRequest, ReceiptExportResult, run_receipt_export
from receiptflow.application.receipts.extract import (
    ReceiptExtractRequest,
    ReceiptExtractResult,
    RetryPolicy,
    run_receipt_extract,
)

__all__ = [
    "ReceiptExtractRequest",
    "ReceiptExtractResult",
    "RetryPolicy",
    "run_receipt_extract",
    "ReceiptExportRequest",
    "ReceiptExportResult",
    "run_receipt_export",
]
