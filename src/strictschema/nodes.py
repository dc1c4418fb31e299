"""Schema node tree produced by the derivation engine.

Each node class is one variant of the derived JSON-Schema tree. Nodes are
plain immutable values; :mod:`strictschema.serializer` turns them into ordered
maps and canonical JSON text.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class StringNode:
    description: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    format: str | None = None
    example: str | None = None


@dataclass(frozen=True)
class IntegerNode:
    description: str | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    example: str | None = None


@dataclass(frozen=True)
class NumberNode:
    description: str | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    example: str | None = None


@dataclass(frozen=True)
class BooleanNode:
    description: str | None = None
    example: str | None = None


@dataclass(frozen=True)
class ArrayNode:
    items: SchemaNode
    description: str | None = None


@dataclass(frozen=True)
class ObjectNode:
    """A closed object schema (``additionalProperties`` is always false)."""

    properties: tuple[tuple[str, SchemaNode], ...] = ()
    required: tuple[str, ...] = ()
    description: str | None = None

    @property
    def property_names(self) -> list[str]:
        return [name for name, _ in self.properties]

    def get_property(self, name: str) -> SchemaNode:
        """Return the node of property ``name``."""
        for prop_name, node in self.properties:
            if prop_name == name:
                return node
        raise KeyError(name)


@dataclass(frozen=True)
class EnumStringNode:
    values: tuple[str, ...]
    description: str | None = None


@dataclass(frozen=True)
class OpaqueObjectNode:
    """Bare ``{"type": "object"}`` marker for types without a derivable schema."""

    description: str | None = None


SchemaNode = (
    StringNode
    | IntegerNode
    | NumberNode
    | BooleanNode
    | ArrayNode
    | ObjectNode
    | EnumStringNode
    | OpaqueObjectNode
)

LeafNode = StringNode | IntegerNode | NumberNode | BooleanNode
