"""Receipt command handlers used by the unified CLI."""

import argparse
import json
import os
import sys
from pathlib import Path

from receiptflow.domain.errors import MalformedPayloadError, MissingCredentialError
from receiptflow.domain.receipt import Receipt, ValidationOutcome
from receiptflow.runtime import get_logger, load_settings

logger = get_logger(__name__)

CREDENTIAL_ENV_VAR = "OPENAI_API_KEY"


def cmd_serve(args: argparse.Namespace) -> None:
    """Start the FastAPI server for extraction requests."""
    import uvicorn

    from receiptflow.runtime import receipt_server as server

    print(f"Starting receipt server on {args.host}:{args.port}")
    print(f"Endpoints: http://{args.host}:{args.port}/extract | /export | /health")
    print("Press Ctrl+C to stop")

    uvicorn.run(server.app, host=args.host, port=args.port)


def _read_text(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _print_receipt(receipt: Receipt, validation: ValidationOutcome) -> None:
    print("\n" + "=" * 60)
    print("EXTRACTED RECEIPT")
    print("=" * 60)
    print(f"Store: {receipt.store_name or 'Unknown'}")
    print(f"Date: {receipt.date or 'N/A'}")
    print(f"\nItems ({len(receipt.items)}):")
    for i, item in enumerate(receipt.items, 1):
        qty_str = f" x{item.quantity.normalize()}" if item.quantity != 1 else ""
        print(f"  {i}. {item.name}{qty_str} - ${item.line_total:.2f}")
    print(f"\nSubtotal: ${receipt.subtotal:.2f}")
    print(f"Tax: ${receipt.tax:.2f}")
    print(f"Total: ${receipt.total:.2f}")
    print("=" * 60)

    if validation.is_valid:
        print("Validation: OK")
    else:
        print(f"Validation warnings ({len(validation.warnings)}):")
        for warning in validation.warnings:
            print(f"  - {warning}")


def cmd_extract(args: argparse.Namespace) -> None:
    """Extract a structured receipt from OCR text, optionally saving a CSV."""
    from receiptflow.application.receipts.export import ReceiptExportRequest, run_receipt_export
    from receiptflow.application.receipts.extract import ReceiptExtractRequest, RetryPolicy, run_receipt_extract
    from receiptflow.runtime.extraction_client import create_provider

    try:
        raw_text = _read_text(args.text_file)
    except FileNotFoundError:
        print(f"Error: text file not found: {args.text_file}")
        sys.exit(1)
    except UnicodeDecodeError as e:
        print(f"Error: text file is not valid UTF-8: {args.text_file} ({e.reason})")
        sys.exit(1)

    try:
        settings = load_settings(args.config)
    except ValueError as e:
        print(f"Error: invalid extraction settings: {e}")
        sys.exit(1)

    try:
        provider = create_provider(settings, os.environ.get(CREDENTIAL_ENV_VAR, ""))
    except MissingCredentialError:
        print(f"Error: set {CREDENTIAL_ENV_VAR} to use receipt extraction.")
        sys.exit(1)

    result = run_receipt_extract(
        ReceiptExtractRequest(
            raw_text=raw_text,
            provider=provider,
            retry_policy=RetryPolicy(max_attempts=args.retries + 1),
            tolerances=settings.tolerances,
        )
    )

    if result.status != "extracted":
        print(f"Extraction failed ({result.status}): {result.error}")
        sys.exit(1)

    receipt = result.receipt
    validation = result.validation
    if receipt is None or validation is None:
        print("Extraction failed: missing receipt output.")
        sys.exit(1)

    if args.json:
        print(json.dumps({"receipt": receipt.to_wire(), "validation": validation.to_wire()}, indent=2))
    else:
        _print_receipt(receipt, validation)

    if args.csv is not None:
        export_result = run_receipt_export(ReceiptExportRequest(receipts=(receipt,), output_dir=Path(args.csv)))
        print(f"\nSaved CSV to: {export_result.path}")


def load_receipts_json(path: Path) -> list[Receipt]:
    """Load a JSON file holding one wire-shaped receipt or an array of them."""
    from receiptflow.receipt.decoder import decode_receipt_payload

    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = [data]
    if not isinstance(data, list):
        raise MalformedPayloadError(f"{path} must hold a receipt object or an array of receipts")
    return [decode_receipt_payload(raw) for raw in data]


def cmd_export(args: argparse.Namespace) -> None:
    """Export receipts from a JSON file to CSV."""
    from receiptflow.application.receipts.export import ReceiptExportRequest, run_receipt_export

    source = Path(args.receipts_json)
    if not source.exists():
        print(f"Error: receipts file not found: {source}")
        sys.exit(1)

    try:
        receipts = load_receipts_json(source)
    except (json.JSONDecodeError, UnicodeDecodeError, MalformedPayloadError) as e:
        logger.error("Cannot read receipts from %s: %s", source, e)
        print(f"Error: invalid receipts file: {e}")
        sys.exit(1)

    output_dir = Path(args.output_dir) if args.output_dir else None
    result = run_receipt_export(ReceiptExportRequest(receipts=tuple(receipts), output_dir=output_dir))
    print(f"Exported {len(receipts)} receipt(s), {result.row_count} row(s) to: {result.path}")
