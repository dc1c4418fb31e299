"""Type descriptor model: the declared shape of objects, fields and enums.

Descriptors are immutable. They are built once per declared shape, either by
the pydantic adapter in :mod:`strictschema.adapters` or by hand with the
builder helpers below, and are consumed by both the derivation engine and the
decode engine.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import StrEnum


class TypeKind(StrEnum):
    """Semantic type of a field or array element."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE_TIME = "date-time"
    UUID = "uuid"
    URI = "uri"
    OBJECT = "object"
    ARRAY = "array"
    ENUM = "enum"


# Kinds rendered as JSON strings; string constraints apply to these.
STRING_KINDS = frozenset({TypeKind.STRING, TypeKind.DATE_TIME, TypeKind.UUID, TypeKind.URI})
NUMERIC_KINDS = frozenset({TypeKind.INTEGER, TypeKind.NUMBER})
PRIMITIVE_KINDS = STRING_KINDS | NUMERIC_KINDS | {TypeKind.BOOLEAN}


@dataclass(frozen=True)
class FieldType:
    """A semantic type, optionally wrapped in ``optional(...)``."""

    kind: TypeKind
    optional: bool = False
    items: FieldType | None = None
    object_ref: ObjectDescriptor | None = None
    enum_ref: EnumDescriptor | None = None
    type_name: str | None = None

    def __post_init__(self) -> None:
        if self.kind == TypeKind.ARRAY and self.items is None:
            raise ValueError("array type requires an element type")
        if self.kind != TypeKind.ARRAY and self.items is not None:
            raise ValueError(f"{self.kind} type cannot have an element type")
        if self.kind == TypeKind.ENUM and self.enum_ref is None:
            raise ValueError("enum type requires an enum descriptor")
        if self.object_ref is not None and self.kind != TypeKind.OBJECT:
            raise ValueError(f"{self.kind} type cannot reference an object descriptor")

    def unwrapped(self) -> FieldType:
        """Return this type with the optional modifier removed."""
        return replace(self, optional=False) if self.optional else self

    @property
    def is_primitive(self) -> bool:
        return self.kind in PRIMITIVE_KINDS

    def describe(self) -> str:
        """Human readable type name, used in error messages."""
        match self.kind:
            case TypeKind.ARRAY:
                assert self.items is not None
                text = f"array of {self.items.describe()}"
            case TypeKind.OBJECT:
                text = "object"
            case TypeKind.ENUM:
                assert self.enum_ref is not None
                text = f"one of {list(self.enum_ref.values)}"
            case TypeKind.DATE_TIME:
                text = "ISO-8601 date-time string"
            case TypeKind.UUID:
                text = "UUID string"
            case TypeKind.URI:
                text = "URI string"
            case _:
                text = self.kind.value
        return f"{text} or null" if self.optional else text


@dataclass(frozen=True)
class FieldConstraints:
    """Validation and metadata bundle attached to one field.

    ``required`` is the explicit flag; an optional type always wins over it.
    """

    description: str | None = None
    min_length: int | None = None
    max_length: int | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    pattern: str | None = None
    format: str | None = None
    example: str | None = None
    required: bool = True


@dataclass(frozen=True)
class FieldDescriptor:
    """One declared field of an object shape."""

    name: str
    type: FieldType
    constraints: FieldConstraints = field(default_factory=FieldConstraints)

    @property
    def is_required(self) -> bool:
        """True when the field belongs to the schema's ``required`` list."""
        return self.constraints.required and not self.type.optional


@dataclass(frozen=True)
class ObjectDescriptor:
    """A named object shape with ordered fields."""

    schema_name: str
    fields: tuple[FieldDescriptor, ...] = ()
    strict: bool = True
    description: str | None = None
    type_name: str | None = None

    def __post_init__(self) -> None:
        # Accept any iterable of fields but store an immutable tuple.
        object.__setattr__(self, "fields", tuple(self.fields))

    def field_names(self) -> list[str]:
        return [f.name for f in self.fields]

    def get_field(self, name: str) -> FieldDescriptor | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None


@dataclass(frozen=True)
class EnumDescriptor:
    """An enumerated choice type: one string value per declared case."""

    values: tuple[str, ...]
    type_name: str | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "values", tuple(self.values))


# Builder helpers


def string() -> FieldType:
    return FieldType(TypeKind.STRING)


def integer() -> FieldType:
    return FieldType(TypeKind.INTEGER)


def number() -> FieldType:
    return FieldType(TypeKind.NUMBER)


def boolean() -> FieldType:
    return FieldType(TypeKind.BOOLEAN)


def date_time() -> FieldType:
    return FieldType(TypeKind.DATE_TIME)


def uuid() -> FieldType:
    return FieldType(TypeKind.UUID)


def uri() -> FieldType:
    return FieldType(TypeKind.URI)


def array_of(items: FieldType) -> FieldType:
    """Array whose elements have type ``items``."""
    return FieldType(TypeKind.ARRAY, items=items)


def object_ref(descriptor: ObjectDescriptor) -> FieldType:
    """Reference to a nested shape whose schema is embedded in full."""
    return FieldType(
        TypeKind.OBJECT,
        object_ref=descriptor,
        type_name=descriptor.type_name or descriptor.schema_name,
    )


def opaque_object(type_name: str | None = None) -> FieldType:
    """Reference to a named type that provides no derivable schema."""
    return FieldType(TypeKind.OBJECT, type_name=type_name)


def enum_ref(descriptor: EnumDescriptor) -> FieldType:
    return FieldType(TypeKind.ENUM, enum_ref=descriptor, type_name=descriptor.type_name)


def optional(inner: FieldType) -> FieldType:
    """Mark ``inner`` as optional; optional fields are never required."""
    return replace(inner, optional=True)


def make_field(name: str, field_type: FieldType, **constraints: object) -> FieldDescriptor:
    """Build a :class:`FieldDescriptor`, passing keyword constraints through.

    Example: ``make_field("age", integer(), minimum=0, description="Age in years")``
    """
    bundle = FieldConstraints(**constraints)  # type: ignore[arg-type]
    return FieldDescriptor(name, field_type, bundle)
