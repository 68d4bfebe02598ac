"""Compose the schema-constrained extraction request for raw receipt text."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from .schema import ArrayNode, NullableNode, NumberNode, StringNode, object_node

RECEIPT_FIELDS = ("storeName", "date", "items", "subtotal", "tax", "total")
LINE_ITEM_FIELDS = ("name", "quantity", "unitPrice", "lineTotal")

SCHEMA_NAME = "receipt_parser"

EXTRACTION_INSTRUCTIONS = """\
You are a specialized receipt parser. Extract purchased items and totals from OCR text.

EXTRACTION RULES:
1. Extract each line item with name, quantity, unit price, and line total
2. If quantity is not explicitly stated, use 1
3. Look for quantity patterns like: "2x", "2 @", "QTY 2"
4. Calculate unitPrice from lineTotal and quantity if not explicitly shown
5. Ignore non-item lines like subtotal, tax, total (extract those into the subtotal, tax and total fields)
6. Extract store name if present (usually at top of receipt)
7. Extract date in YYYY-MM-DD format if present

IMPORTANT:
- Return ONLY valid JSON matching the provided schema
- All prices must be positive numbers with proper decimal format
- If a field cannot be determined, use null for strings or 0 for required numbers"""

USER_PROMPT_PREFIX = "Parse this receipt and extract all items:\n\n"


LINE_ITEM_NODE = object_node(
    ("name", StringNode("Item name or description")),
    ("quantity", NumberNode("Quantity purchased (default 1 if not specified)")),
    ("unitPrice", NumberNode("Price per unit")),
    ("lineTotal", NumberNode("Total for this line (quantity x unitPrice)")),
)

RECEIPT_NODE = object_node(
    ("storeName", NullableNode(StringNode(), description="Name of the store or vendor")),
    ("date", NullableNode(StringNode(), description="Receipt date in YYYY-MM-DD format")),
    ("items", ArrayNode(LINE_ITEM_NODE, description="List of purchased items")),
    ("subtotal", NumberNode("Subtotal before tax")),
    ("tax", NumberNode("Tax amount")),
    ("total", NumberNode("Total amount paid")),
)


def build_receipt_schema() -> dict[str, Any]:
    """Return the strict JSON schema for a receipt payload."""
    return RECEIPT_NODE.to_json()


@dataclass(frozen=True)
class ExtractionRequest:
    """Everything a provider needs to ask for one structured receipt."""

    schema: dict[str, Any]
    instructions: str
    user_prompt: str
    raw_text: str
    schema_name: str = SCHEMA_NAME


def compose_request(raw_text: str) -> ExtractionRequest:
    """Build the extraction request for raw OCR text.

    Empty text is allowed; the model is then expected to return no items.
    """
    return ExtractionRequest(
        schema=build_receipt_schema(),
        instructions=EXTRACTION_INSTRUCTIONS,
        user_prompt=f"{USER_PROMPT_PREFIX}{raw_text}",
        raw_text=raw_text,
    )


def build_request_body(
    request: ExtractionRequest,
    *,
    model: str,
    temperature: float,
    max_tokens: int,
    strict_schema: bool = True,
) -> dict[str, Any]:
    """Build the chat-completions wire body for an extraction request.

    Raises:
        ValueError: if strict_schema is disabled; unconstrained output cannot be decoded.
    """
    if not strict_schema:
        raise ValueError("strict_schema must be enabled for receipt extraction")

    return {
        "model": model,
        "messages": [
            {"role": "system", "content": request.instructions},
            {"role": "user", "content": request.user_prompt},
        ],
        "temperature": temperature,
        "max_tokens": max_tokens,
        "response_format": {
            "type": "json_schema",
            "json_schema": {
                "name": request.schema_name,
                "strict": True,
                "schema": request.schema,
            },
        },
    }

