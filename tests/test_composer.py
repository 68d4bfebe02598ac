"""Tests for the strict schema builder and request composition."""

from __future__ import annotations

from typing import Any

import pytest

from receiptflow.receipt.composer import (
    EXTRACTION_INSTRUCTIONS,
    LINE_ITEM_FIELDS,
    RECEIPT_FIELDS,
    build_receipt_schema,
    build_request_body,
    compose_request,
)
from receiptflow.receipt.schema import NullableNode, NumberNode, StringNode, object_node


def _object_schemas(schema: dict[str, Any]) -> list[dict[str, Any]]:
    found: list[dict[str, Any]] = []
    stack = [schema]
    while stack:
        node = stack.pop()
        if node.get("type") == "object":
            found.append(node)
            stack.extend(node["properties"].values())
        if isinstance(node.get("items"), dict):
            stack.append(node["items"])
        stack.extend(node.get("anyOf", []))
    return found


def test_receipt_schema_top_level_and_item_fields() -> None:
    schema = build_receipt_schema()

    assert tuple(schema["properties"]) == RECEIPT_FIELDS
    assert tuple(schema["required"]) == RECEIPT_FIELDS

    item_schema = schema["properties"]["items"]["items"]
    assert tuple(item_schema["properties"]) == LINE_ITEM_FIELDS
    assert tuple(item_schema["required"]) == LINE_ITEM_FIELDS
    assert item_schema["additionalProperties"] is False


def test_every_object_requires_all_properties_and_forbids_extras() -> None:
    objects = _object_schemas(build_receipt_schema())

    assert len(objects) == 2
    for obj in objects:
        assert set(obj["properties"]) == set(obj["required"])
        assert obj["additionalProperties"] is False


def test_nullable_fields_are_required_unions_with_null() -> None:
    schema = build_receipt_schema()

    for name in ("storeName", "date"):
        assert name in schema["required"]
        assert schema["properties"][name]["anyOf"] == [{"type": "string"}, {"type": "null"}]


def test_schema_node_invariants_enforced_at_construction() -> None:
    with pytest.raises(ValueError):
        NullableNode(NullableNode(StringNode()))
    with pytest.raises(ValueError):
        object_node(("a", NumberNode()), ("a", StringNode()))


def test_compose_request_accepts_empty_text() -> None:
    request = compose_request("")

    assert request.raw_text == ""
    assert request.user_prompt.startswith("Parse this receipt")
    assert request.schema == build_receipt_schema()


def test_instructions_carry_extraction_rules() -> None:
    for fragment in ('"2x"', '"2 @"', '"QTY 2"', "use 1", "YYYY-MM-DD", "top of receipt", "subtotal, tax, total"):
        assert fragment in EXTRACTION_INSTRUCTIONS


def test_compose_request_is_pure() -> None:
    assert compose_request("MILK 3.99") == compose_request("MILK 3.99")


def test_request_body_wire_shape() -> None:
    request = compose_request("WHOLE FOODS\nBANANAS 2.49")
    body = build_request_body(request, model="gpt-4o-mini", temperature=0.1, max_tokens=2000)

    assert body["model"] == "gpt-4o-mini"
    assert body["temperature"] == 0.1
    assert body["max_tokens"] == 2000
    assert [m["role"] for m in body["messages"]] == ["system", "user"]
    assert body["messages"][1]["content"].endswith("WHOLE FOODS\nBANANAS 2.49")

    response_format = body["response_format"]
    assert response_format["type"] == "json_schema"
    assert response_format["json_schema"]["name"] == "receipt_parser"
    assert response_format["json_schema"]["strict"] is True
    assert response_format["json_schema"]["schema"] == request.schema


def test_request_body_refuses_non_strict_schema() -> None:
    with pytest.raises(ValueError, match="strict_schema"):
        build_request_body(compose_request("x"), model="m", temperature=0.1, max_tokens=10, strict_schema=False)
