"""Decode extraction service replies into Receipt values.

A reply that does not match the contract is a hard failure: nothing is
defaulted, repaired or retried here.
"""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

from receiptflow.domain.errors import MalformedPayloadError
from receiptflow.domain.receipt import LineItem, Receipt

from .composer import LINE_ITEM_FIELDS, RECEIPT_FIELDS


def extract_message_content(envelope: Any) -> str:
    """Return the first choice's message content from a chat-completions envelope."""
    if not isinstance(envelope, dict):
        raise MalformedPayloadError("no content")

    choices = envelope.get("choices")
    if not isinstance(choices, list) or not choices:
        raise MalformedPayloadError("no content")

    first = choices[0]
    message = first.get("message") if isinstance(first, dict) else None
    if not isinstance(message, dict):
        raise MalformedPayloadError("no content")

    content = message.get("content")
    if isinstance(content, str) and content:
        return content

    refusal = message.get("refusal")
    if isinstance(refusal, str) and refusal:
        raise MalformedPayloadError(f"no content (model refused: {refusal})")
    raise MalformedPayloadError("no content")


def decode_envelope(envelope: Any) -> Receipt:
    """Decode a raw success envelope into a Receipt."""
    return decode_receipt_content(extract_message_content(envelope))


def decode_receipt_content(content: str) -> Receipt:
    """Parse the model's JSON content string into a Receipt."""
    try:
        payload = json.loads(content, parse_float=Decimal)
    except json.JSONDecodeError as e:
        raise MalformedPayloadError(f"content is not valid JSON: {e.msg}", content=content) from e

    try:
        return decode_receipt_payload(payload)
    except MalformedPayloadError as e:
        raise MalformedPayloadError(e.detail, content=content) from e


def decode_receipt_payload(payload: Any) -> Receipt:
    """Convert an already-parsed wire payload into a Receipt."""
    _check_fields(payload, RECEIPT_FIELDS, "receipt")

    raw_items = payload["items"]
    if not isinstance(raw_items, list):
        raise MalformedPayloadError(f"receipt.items must be an array, got {_type_name(raw_items)}")

    items = tuple(_decode_item(raw, index) for index, raw in enumerate(raw_items))
    return Receipt(
        store_name=_optional_string(payload["storeName"], "storeName"),
        date=_optional_string(payload["date"], "date"),
        items=items,
        subtotal=_number(payload["subtotal"], "subtotal"),
        tax=_number(payload["tax"], "tax"),
        total=_number(payload["total"], "total"),
    )


def _decode_item(raw: Any, index: int) -> LineItem:
    where = f"items[{index}]"
    _check_fields(raw, LINE_ITEM_FIELDS, where)

    name = raw["name"]
    if not isinstance(name, str):
        raise MalformedPayloadError(f"{where}.name must be a string, got {_type_name(name)}")

    return LineItem(
        name=name,
        quantity=_number(raw["quantity"], f"{where}.quantity"),
        unit_price=_number(raw["unitPrice"], f"{where}.unitPrice"),
        line_total=_number(raw["lineTotal"], f"{where}.lineTotal"),
    )


def _check_fields(raw: Any, expected: tuple[str, ...], where: str) -> None:
    if not isinstance(raw, dict):
        raise MalformedPayloadError(f"{where} must be an object, got {_type_name(raw)}")

    missing = [name for name in expected if name not in raw]
    if missing:
        raise MalformedPayloadError(f"{where} is missing fields: {', '.join(missing)}")

    unknown = sorted(set(raw) - set(expected))
    if unknown:
        raise MalformedPayloadError(f"{where} has undeclared fields: {', '.join(unknown)}")


def _number(value: Any, where: str) -> Decimal:
    # bool is an int subclass but never a valid amount.
    if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
        raise MalformedPayloadError(f"{where} must be a number, got {_type_name(value)}")
    number = Decimal(repr(value)) if isinstance(value, float) else Decimal(value)
    if not number.is_finite():
        raise MalformedPayloadError(f"{where} must be a finite number")
    return number


def _optional_string(value: Any, where: str) -> str | None:
    if value is None or isinstance(value, str):
        return value
    raise MalformedPayloadError(f"{where} must be a string or null, got {_type_name(value)}")


def _type_name(value: Any) -> str:
    if value is None:
        return "null"
    return type(value).__name__
