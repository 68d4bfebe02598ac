"""Smoke tests for basic module wiring."""

from __future__ import annotations


def test_imports() -> None:
    import receiptflow
    import receiptflow.application.receipts
    import receiptflow.cli.main
    import receiptflow.receipt
    import receiptflow.runtime
    import receiptflow.runtime.receipt_server

    assert receiptflow is not None
    assert receiptflow.application.receipts is not None
    assert receiptflow.cli.main is not None
    assert receiptflow.receipt is not None
    assert receiptflow.runtime is not None
    assert receiptflow.runtime.receipt_server.app is not None
