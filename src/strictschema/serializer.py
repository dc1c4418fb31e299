"""Rendering of schema trees to ordered maps and canonical JSON text.

Key order is part of the output contract: the consuming API reads properties
in field declaration order, so nothing here sorts keys.
"""

import json
import math
from typing import Any

from strictschema.errors import SerializationError
from strictschema.nodes import (
    ArrayNode,
    BooleanNode,
    EnumStringNode,
    IntegerNode,
    NumberNode,
    ObjectNode,
    OpaqueObjectNode,
    SchemaNode,
    StringNode,
)

DEFAULT_INDENT = 2


def to_map(node: SchemaNode) -> dict[str, Any]:
    """Render ``node`` as a bare JSON-Schema map (no envelope)."""
    match node:
        case ObjectNode():
            result: dict[str, Any] = {
                "type": "object",
                "properties": {name: to_map(child) for name, child in node.properties},
                "required": list(node.required),
                "additionalProperties": False,
            }
        case ArrayNode():
            result = {"type": "array", "items": to_map(node.items)}
        case EnumStringNode():
            result = {"type": "string", "enum": list(node.values)}
        case OpaqueObjectNode():
            result = {"type": "object"}
        case StringNode():
            result = {"type": "string"}
            _put(result, "description", node.description)
            _put(result, "minLength", node.min_length)
            _put(result, "maxLength", node.max_length)
            _put(result, "pattern", node.pattern)
            _put(result, "format", node.format)
            _put(result, "example", node.example)
            return result
        case IntegerNode() | NumberNode():
            result = {"type": "integer" if isinstance(node, IntegerNode) else "number"}
            _put(result, "description", node.description)
            _put(result, "minimum", _finite(node.minimum, "minimum"))
            _put(result, "maximum", _finite(node.maximum, "maximum"))
            _put(result, "example", node.example)
            return result
        case BooleanNode():
            result = {"type": "boolean"}
            _put(result, "description", node.description)
            _put(result, "example", node.example)
            return result
        case _:
            raise SerializationError(
                f"Cannot serialize schema node of type {type(node).__name__}"
            )

    _put(result, "description", node.description)
    return result


def to_envelope(node: SchemaNode, name: str, strict: bool) -> dict[str, Any]:
    """Wrap ``node`` in the ``{"name", "strict", "schema"}`` request envelope."""
    return {"name": name, "strict": strict, "schema": to_map(node)}


def to_canonical_json(
    node: SchemaNode,
    name: str,
    strict: bool,
    *,
    indent: int | None = DEFAULT_INDENT,
) -> str:
    """Render the enveloped schema as deterministic JSON text.

    Args:
        node: Derived schema tree.
        name: Top-level schema name.
        strict: Value of the envelope's ``strict`` flag.
        indent: Indentation width; ``None`` gives compact single-line output.

    Raises:
        SerializationError: if any value cannot be represented in JSON.
    """
    envelope = to_envelope(node, name, strict)
    return dumps(envelope, indent=indent)


def dumps(data: Any, *, indent: int | None = DEFAULT_INDENT) -> str:
    """``json.dumps`` with insertion-ordered keys and no NaN/Infinity literals."""
    separators = (",", ": ") if indent is not None else (",", ":")
    try:
        return json.dumps(
            data,
            indent=indent,
            separators=separators,
            ensure_ascii=False,
            allow_nan=False,
            sort_keys=False,
        )
    except (TypeError, ValueError) as e:
        raise SerializationError(f"Schema is not representable as JSON: {e}") from e


def _put(target: dict[str, Any], key: str, value: Any) -> None:
    if value is not None and value != "":
        target[key] = value


def _finite(value: int | float | None, key: str) -> int | float | None:
    if isinstance(value, float) and not math.isfinite(value):
        raise SerializationError(f"'{key}' must be a finite number, got {value}")
    return value
