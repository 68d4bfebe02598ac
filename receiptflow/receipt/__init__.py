"""Pure receipt extraction stages: compose, decode, validate, export."""

from receiptflow.receipt.composer import ExtractionRequest, build_receipt_schema, build_request_body, compose_request
from receiptflow.receipt.csv_export import export_receipt_csv, export_receipts_csv, generate_export_filename
from receiptflow.receipt.decoder import decode_envelope, decode_receipt_content, decode_receipt_payload
from receiptflow.receipt.validator import DEFAULT_TOLERANCES, Tolerances, validate_receipt

__all__ = [
    "ExtractionRequest",
    "build_receipt_schema",
    "build_request_body",
    "compose_request",
    "decode_envelope",
    "decode_receipt_content",
    "decode_receipt_payload",
    "validate_receipt",
    "Tolerances",
    "DEFAULT_TOLERANCES",
    "export_receipts_csv",
    "export_receipt_csv",
    "generate_export_filename",
]
