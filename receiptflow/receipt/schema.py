"""Builder for strict JSON Schema output contracts.

Only a closed set of node kinds exists. Object nodes always list every
property as required and forbid additional properties; a field that may be
null is expressed by wrapping its node in ``NullableNode`` rather than by
leaving it out of ``required``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class StringNode:
    description: str | None = None

    def to_json(self) -> dict[str, Any]:
        return _with_description({"type": "string"}, self.description)


@dataclass(frozen=True)
class NumberNode:
    description: str | None = None

    def to_json(self) -> dict[str, Any]:
        return _with_description({"type": "number"}, self.description)


@dataclass(frozen=True)
class ArrayNode:
    items: SchemaNode
    description: str | None = None

    def to_json(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "array"}
        schema = _with_description(schema, self.description)
        schema["items"] = self.items.to_json()
        return schema


@dataclass(frozen=True)
class NullableNode:
    """Union of a concrete node and JSON null."""

    inner: SchemaNode
    description: str | None = None

    def __post_init__(self) -> None:
        if isinstance(self.inner, NullableNode):
            raise ValueError("NullableNode cannot wrap another NullableNode")

    def to_json(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"anyOf": [self.inner.to_json(), {"type": "null"}]}
        return _with_description(schema, self.description)


@dataclass(frozen=True)
class ObjectNode:
    """Object whose properties are all required, in declaration order."""

    properties: tuple[tuple[str, SchemaNode], ...] = field(default_factory=tuple)
    description: str | None = None

    def __post_init__(self) -> None:
        names = [name for name, _ in self.properties]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate property names in object schema: {names}")

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(name for name, _ in self.properties)

    def to_json(self) -> dict[str, Any]:
        schema: dict[str, Any] = {"type": "object"}
        schema = _with_description(schema, self.description)
        schema["properties"] = {name: node.to_json() for name, node in self.properties}
        schema["required"] = list(self.field_names)
        schema["additionalProperties"] = False
        return schema


SchemaNode = StringNode | NumberNode | ArrayNode | NullableNode | ObjectNode


def _with_description(schema: dict[str, Any], description: str | None) -> dict[str, Any]:
    if description:
        schema["description"] = description
    return schema


def object_node(*properties: tuple[str, SchemaNode], description: str | None = None) -> ObjectNode:
    """Shorthand for ``ObjectNode(properties=(...))``."""
    return ObjectNode(properties=tuple(properties), description=description)
