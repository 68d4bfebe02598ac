"""Core domain models for receiptflow.

Usage:
    from receiptflow.domain import LineItem, Receipt, ValidationOutcome
"""

from receiptflow.domain.receipt import LineItem, Receipt, ValidationOutcome

__all__ = [
    "LineItem",
    "Receipt",
    "ValidationOutcome",
]
