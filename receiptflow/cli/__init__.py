"""Unified command-line interface for receiptflow.

Usage:
    receiptflow extract <text_file|->
    receiptflow extract <text_file> --json --csv exports/
    receiptflow export <receipts.json> [--output-dir DIR]
    receiptflow serve [--port]
"""
