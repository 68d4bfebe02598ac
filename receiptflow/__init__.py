"""
receiptflow

Structured receipt extraction from OCR text: a schema-constrained request to
a text-understanding service, strict decoding, advisory arithmetic
validation, and deterministic CSV export.
"""

__version__ = "0.1.0"

from receiptflow.domain.receipt import LineItem, Receipt, ValidationOutcome

__all__ = ["LineItem", "Receipt", "ValidationOutcome"]
