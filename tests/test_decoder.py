"""Tests for decoding service envelopes into receipts."""

from __future__ import annotations

import json
from decimal import Decimal
from typing import Any

import pytest

from receiptflow.domain.errors import MalformedPayloadError
from receiptflow.receipt.decoder import decode_envelope, decode_receipt_content, decode_receipt_payload


def _envelope(content: Any) -> dict[str, Any]:
    return {"id": "chatcmpl-1", "choices": [{"index": 0, "message": {"role": "assistant", "content": content}}]}


def _payload(**overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "storeName": "Whole Foods",
        "date": "2025-12-02",
        "items": [
            {"name": "Organic Bananas", "quantity": 1, "unitPrice": 2.49, "lineTotal": 2.49},
            {"name": "Milk Whole Gal", "quantity": 2, "unitPrice": 3.99, "lineTotal": 7.98},
        ],
        "subtotal": 10.47,
        "tax": 0.73,
        "total": 11.20,
    }
    payload.update(overrides)
    return payload


def test_decode_envelope_builds_receipt() -> None:
    receipt = decode_envelope(_envelope(json.dumps(_payload())))

    assert receipt.store_name == "Whole Foods"
    assert receipt.date == "2025-12-02"
    assert [item.name for item in receipt.items] == ["Organic Bananas", "Milk Whole Gal"]
    assert receipt.items[1].quantity == Decimal("2")
    assert receipt.items[1].unit_price == Decimal("3.99")
    assert receipt.subtotal == Decimal("10.47")
    assert receipt.total == Decimal("11.2")


def test_null_store_and_date_map_to_none() -> None:
    receipt = decode_receipt_content(json.dumps(_payload(storeName=None, date=None)))

    assert receipt.store_name is None
    assert receipt.date is None


def test_empty_item_list_is_valid_output() -> None:
    receipt = decode_receipt_content(json.dumps(_payload(items=[], subtotal=0, tax=0, total=0)))

    assert receipt.items == ()


def test_invalid_json_content_is_malformed() -> None:
    with pytest.raises(MalformedPayloadError) as excinfo:
        decode_envelope(_envelope("{not json"))

    assert excinfo.value.content == "{not json"
    assert "{not json" in str(excinfo.value)


@pytest.mark.parametrize(
    "envelope",
    [
        {},
        {"choices": []},
        {"choices": [{"message": {}}]},
        _envelope(None),
        _envelope(""),
        "not an envelope",
    ],
)
def test_missing_content_is_malformed(envelope: Any) -> None:
    with pytest.raises(MalformedPayloadError) as excinfo:
        decode_envelope(envelope)

    assert excinfo.value.detail == "no content"


def test_refusal_is_reported_as_no_content() -> None:
    envelope = {"choices": [{"message": {"content": None, "refusal": "I can't help with that."}}]}

    with pytest.raises(MalformedPayloadError, match="no content"):
        decode_envelope(envelope)


def test_missing_field_is_malformed() -> None:
    payload = _payload()
    del payload["tax"]

    with pytest.raises(MalformedPayloadError, match="missing fields: tax"):
        decode_receipt_content(json.dumps(payload))


def test_undeclared_field_is_malformed() -> None:
    with pytest.raises(MalformedPayloadError, match="undeclared fields: currency"):
        decode_receipt_payload(_payload(currency="USD"))


def test_undeclared_item_field_is_malformed() -> None:
    items = [{"name": "Eggs", "quantity": 1, "unitPrice": 4.0, "lineTotal": 4.0, "sku": "123"}]

    with pytest.raises(MalformedPayloadError, match=r"items\[0\] has undeclared fields: sku"):
        decode_receipt_payload(_payload(items=items))


@pytest.mark.parametrize(
    "overrides",
    [
        {"total": "11.20"},
        {"total": True},
        {"total": None},
        {"storeName": 42},
        {"items": {"name": "Eggs"}},
        {"items": [{"name": None, "quantity": 1, "unitPrice": 1, "lineTotal": 1}]},
    ],
)
def test_wrong_types_are_not_coerced(overrides: dict[str, Any]) -> None:
    with pytest.raises(MalformedPayloadError):
        decode_receipt_payload(_payload(**overrides))


def test_non_object_payload_is_malformed() -> None:
    with pytest.raises(MalformedPayloadError, match="receipt must be an object"):
        decode_receipt_content("[1, 2, 3]")


def test_content_snippet_is_truncated_in_message() -> None:
    content = "x" * 1000

    with pytest.raises(MalformedPayloadError) as excinfo:
        decode_receipt_content(content)

    assert excinfo.value.content == content
    assert len(str(excinfo.value)) < 400
