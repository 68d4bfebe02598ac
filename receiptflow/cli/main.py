#!/usr/bin/env python3

import argparse
from collections.abc import Callable, Sequence


def _coerce_exit_code(code: object) -> int:
    if code is None:
        return 0
    if isinstance(code, int):
        return code
    return 1


def _run_command(command: Callable[[argparse.Namespace], None], args: argparse.Namespace) -> int:
    """
    Normalize command handlers that call sys.exit().

    This keeps process termination centralized in this module's entrypoint.
    """
    try:
        command(args)
    except SystemExit as exc:
        return _coerce_exit_code(exc.code)
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="Receipt extraction CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  extract <text_file|->      Extract a structured receipt from OCR text
  export <receipts.json>     Export decoded receipts to CSV
  serve [--port]             Start the extraction HTTP server

Environment:
  OPENAI_API_KEY             Credential for the extraction service
  RECEIPTFLOW_LOG_LEVEL      DEBUG, INFO, WARNING or ERROR
""",
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    extract_parser = subparsers.add_parser("extract", help="Extract a structured receipt from OCR text")
    extract_parser.add_argument("text_file", help="Path to OCR text file, or - for stdin")
    extract_parser.add_argument("--json", action="store_true", help="Print the receipt as JSON")
    extract_parser.add_argument("--csv", metavar="OUT_DIR", default=None, help="Also save a CSV export to OUT_DIR")
    extract_parser.add_argument(
        "--retries",
        type=int,
        default=0,
        help="Retries for transport failures and 429/5xx responses (default: 0)",
    )
    extract_parser.add_argument("--config", default=None, help="Path to extraction settings TOML")

    export_parser = subparsers.add_parser("export", help="Export decoded receipts to CSV")
    export_parser.add_argument("receipts_json", help="JSON file with one receipt or an array of receipts")
    export_parser.add_argument("--output-dir", default=None, help="Directory for the CSV (default: exports/)")

    serve_parser = subparsers.add_parser("serve", help="Start the extraction HTTP server")
    serve_parser.add_argument("--host", default="127.0.0.1", help="Host to bind to (default: 127.0.0.1)")
    serve_parser.add_argument("--port", type=int, default=8080, help="Port to bind to (default: 8080)")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    if args.command == "extract":
        if args.retries < 0:
            print("--retries must not be negative")
            return 1
        from receiptflow.cli.receipt import cmd_extract

        return _run_command(cmd_extract, args)
    elif args.command == "export":
        from receiptflow.cli.receipt import cmd_export

        return _run_command(cmd_export, args)
    elif args.command == "serve":
        from receiptflow.cli.receipt import cmd_serve

        return _run_command(cmd_serve, args)

    return 1


if __name__ == "__main__":
    raise SystemExit(main())
