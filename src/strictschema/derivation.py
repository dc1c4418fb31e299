"""Schema derivation engine.

Turns an :class:`~strictschema.descriptors.ObjectDescriptor` into a closed
object schema tree that satisfies the structured-output strictness rules:

- properties keep field declaration order
- optional types are never required, whatever the explicit flag says
- nested shapes are embedded in full rather than as ``{"type": "object"}``
- strict descriptors must require every field
"""

import logging
from collections import Counter
from dataclasses import replace

from strictschema.descriptors import (
    STRING_KINDS,
    EnumDescriptor,
    FieldConstraints,
    FieldDescriptor,
    FieldType,
    ObjectDescriptor,
    TypeKind,
)
from strictschema.errors import SchemaDefinitionError
from strictschema.nodes import (
    ArrayNode,
    BooleanNode,
    EnumStringNode,
    IntegerNode,
    LeafNode,
    NumberNode,
    ObjectNode,
    OpaqueObjectNode,
    SchemaNode,
    StringNode,
)

logger = logging.getLogger(__name__)

# String-backed kinds with an intrinsic format
_INTRINSIC_FORMATS: dict[TypeKind, str] = {
    TypeKind.DATE_TIME: "date-time",
    TypeKind.UUID: "uuid",
    TypeKind.URI: "uri",
}


def derive(descriptor: ObjectDescriptor) -> ObjectNode:
    """Derive the object schema of ``descriptor``.

    Raises:
        SchemaDefinitionError: duplicate field names, or a strict descriptor
            with fields that are not required.
    """
    _check_unique_fields(descriptor)
    if descriptor.strict:
        _check_strict(descriptor)

    properties: list[tuple[str, SchemaNode]] = []
    required: list[str] = []
    for field in descriptor.fields:
        properties.append((field.name, _derive_field(field)))
        if field.is_required:
            required.append(field.name)

    logger.debug(
        f"Derived schema '{descriptor.schema_name}' with {len(properties)} properties "
        f"({len(required)} required)"
    )
    return ObjectNode(
        properties=tuple(properties),
        required=tuple(required),
        description=descriptor.description or None,
    )


def derive_enum(descriptor: EnumDescriptor) -> EnumStringNode:
    """Derive the constrained string schema of an enumerated type."""
    label = descriptor.type_name or "enum"
    if not descriptor.values:
        raise SchemaDefinitionError(f"Enum '{label}' must declare at least one value")

    duplicates = [value for value, count in Counter(descriptor.values).items() if count > 1]
    if duplicates:
        raise SchemaDefinitionError(
            f"Enum '{label}' declares duplicate values: {', '.join(duplicates)}",
            fields=duplicates,
        )

    return EnumStringNode(values=descriptor.values, description=descriptor.description or None)


def _check_unique_fields(descriptor: ObjectDescriptor) -> None:
    counts = Counter(descriptor.field_names())
    duplicates = [name for name, count in counts.items() if count > 1]
    if duplicates:
        raise SchemaDefinitionError(
            f"Schema '{descriptor.schema_name}' declares duplicate fields: "
            f"{', '.join(duplicates)}",
            fields=duplicates,
        )


def _check_strict(descriptor: ObjectDescriptor) -> None:
    non_required = [f.name for f in descriptor.fields if not f.is_required]
    if non_required:
        field_names = ", ".join(non_required)
        raise SchemaDefinitionError(
            f"Schema '{descriptor.schema_name}': required parameters list must include all "
            f"properties when strict is true. Non-required fields: {field_names}. "
            "Make these fields non-optional and required, or set strict to false.",
            fields=non_required,
        )


def _derive_field(field: FieldDescriptor) -> SchemaNode:
    node = _derive_type(field.type, field.constraints)

    description = field.constraints.description
    if not description:
        return node
    if field.type.kind == TypeKind.OBJECT:
        # The embedded shape carries its own description, if any.
        logger.debug(f"Dropping description of nested object field '{field.name}'")
        return node
    return replace(node, description=description)


def _derive_type(field_type: FieldType, constraints: FieldConstraints) -> SchemaNode:
    match field_type.kind:
        case TypeKind.ARRAY:
            assert field_type.items is not None
            return ArrayNode(items=_derive_type(field_type.items, constraints))
        case TypeKind.OBJECT:
            if field_type.object_ref is None:
                logger.debug(
                    f"Type '{field_type.type_name}' has no derivable schema, "
                    "using a bare object"
                )
                return OpaqueObjectNode()
            return derive(field_type.object_ref)
        case TypeKind.ENUM:
            assert field_type.enum_ref is not None
            return derive_enum(field_type.enum_ref)
        case _:
            return _derive_leaf(field_type.kind, constraints)


def _derive_leaf(kind: TypeKind, constraints: FieldConstraints) -> LeafNode:
    """Build a primitive node, keeping only the constraints that match its kind."""
    if kind in STRING_KINDS:
        return StringNode(
            min_length=constraints.min_length,
            max_length=constraints.max_length,
            pattern=constraints.pattern,
            format=_INTRINSIC_FORMATS.get(kind, constraints.format),
            example=constraints.example,
        )
    if kind == TypeKind.INTEGER:
        return IntegerNode(
            minimum=constraints.minimum,
            maximum=constraints.maximum,
            example=constraints.example,
        )
    if kind == TypeKind.NUMBER:
        return NumberNode(
            minimum=constraints.minimum,
            maximum=constraints.maximum,
            example=constraints.example,
        )
    if kind == TypeKind.BOOLEAN:
        return BooleanNode(example=constraints.example)
    raise SchemaDefinitionError(f"Unsupported type kind: {kind}")
