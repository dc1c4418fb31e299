"""Pydantic adapter: builds descriptors by reflecting on model classes.

Fields are declared as ordinary pydantic model fields. Schema metadata goes in
an ``Annotated`` :class:`SchemaField` marker (or in ``Field(description=...)``)::

    @schema_object(name="person", strict=False)
    class Person(BaseModel):
        name: Annotated[str, SchemaField(description="Full name of the person")]
        age: Annotated[int, SchemaField(minimum=0, maximum=150)]
        email: Annotated[str | None, SchemaField(description="Email address")] = None

    generate_schema_string(Person)
    create(Person, '{"name": "Ada", "age": 36}')
"""

from __future__ import annotations

import logging
import types
from dataclasses import dataclass, replace
from datetime import date, datetime, time, timedelta
from decimal import Decimal
from enum import Enum
from typing import TYPE_CHECKING, Annotated, Any, Literal, TypeVar, Union, get_args, get_origin
from uuid import UUID

import annotated_types
from pydantic import AnyUrl, BaseModel, ValidationError

from strictschema import descriptors as d
from strictschema.decoder import decode, encode
from strictschema.derivation import derive, derive_enum
from strictschema.descriptors import (
    EnumDescriptor,
    FieldConstraints,
    FieldDescriptor,
    FieldType,
    ObjectDescriptor,
    TypeKind,
)
from strictschema.errors import DecodingError, DecodingErrorKind, SchemaDefinitionError
from strictschema.registry import DescriptorRegistry, default_registry
from strictschema.serializer import DEFAULT_INDENT, to_canonical_json, to_envelope, to_map

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)
EnumT = TypeVar("EnumT", bound=Enum)

# Class attributes set by the decorators
_NAME_ATTR = "__strictschema_name__"
_STRICT_ATTR = "__strictschema_strict__"
_DESCRIPTION_ATTR = "__strictschema_description__"
_ENUM_DESCRIPTION_ATTR = "__strictschema_enum_description__"

_SCALAR_TYPES: dict[Any, Callable[[], FieldType]] = {
    str: d.string,
    int: d.integer,
    float: d.number,
    Decimal: d.number,
    bool: d.boolean,
    datetime: d.date_time,
    UUID: d.uuid,
}

# Types with no lossless JSON schema mapping
_UNSUPPORTED_TYPES = (date, time, timedelta, bytes)
_BARE_CONTAINERS = (list, set, frozenset, tuple)


@dataclass(frozen=True)
class SchemaField:
    """Schema metadata for one model field, used as ``Annotated`` metadata.

    ``required`` is the explicit required flag. An optional type
    (``str | None``) is never required, whatever this flag says.
    String constraints only apply to string fields and numeric constraints
    only to ``int``/``float`` fields; the others are ignored.

    Pydantic ``Field(ge=..., le=..., min_length=..., max_length=...,
    pattern=...)`` constraints fill in whatever this marker leaves unset.
    Types without a JSON schema mapping (``date``, ``time``, ``timedelta``,
    ``bytes``, bare ``list``/``set``/``tuple``, other generics) raise
    :class:`SchemaDefinitionError` instead of degrading to a bare object.
    """

    description: str | None = None
    required: bool = True
    min_length: int | None = None
    max_length: int | None = None
    minimum: int | float | None = None
    maximum: int | float | None = None
    pattern: str | None = None
    format: str | None = None
    example: str | None = None

    def to_constraints(self, fallback_description: str | None = None) -> FieldConstraints:
        return FieldConstraints(
            description=self.description or fallback_description,
            min_length=self.min_length,
            max_length=self.max_length,
            minimum=self.minimum,
            maximum=self.maximum,
            pattern=self.pattern,
            format=self.format,
            example=self.example,
            required=self.required,
        )


def describe_model(
    model: type[BaseModel],
    *,
    name: str | None = None,
    strict: bool | None = None,
) -> ObjectDescriptor:
    """Build the :class:`ObjectDescriptor` of a pydantic model class.

    The schema name defaults to the name given to ``@schema_object`` or the
    lowercased class name; ``strict`` defaults to the decorator setting or
    ``True``. Nested models that were not decorated inherit ``strict`` from
    the model that embeds them.

    Raises:
        SchemaDefinitionError: for self-referencing models or field types
            that cannot be mapped to a schema.
    """
    return _describe(model, name=name, strict=strict, inherited_strict=True, stack=())


def describe_enum(enum_cls: type[Enum]) -> EnumDescriptor:
    """Build the :class:`EnumDescriptor` of an ``Enum`` with string values."""
    values: list[str] = []
    for member in enum_cls:
        if not isinstance(member.value, str):
            raise SchemaDefinitionError(
                f"Enum '{enum_cls.__name__}' must have string values, "
                f"got {member.name}={member.value!r}"
            )
        values.append(member.value)
    return EnumDescriptor(
        values=tuple(values),
        type_name=enum_cls.__name__,
        description=getattr(enum_cls, _ENUM_DESCRIPTION_ATTR, None),
    )


def schema_object(
    cls: type[ModelT] | None = None,
    *,
    name: str | None = None,
    strict: bool = True,
    description: str | None = None,
    registry: DescriptorRegistry | None = None,
) -> Any:
    """Class decorator declaring a pydantic model as a structured-output schema.

    The schema is derived immediately, so an invalid declaration (for example
    an optional field in a strict schema) fails when the class is defined.
    The descriptor is then registered in ``registry`` (the default registry
    unless given).

    Usable bare (``@schema_object``) or with arguments
    (``@schema_object(name="person", strict=False)``).
    """

    def wrap(model: type[ModelT]) -> type[ModelT]:
        if not (isinstance(model, type) and issubclass(model, BaseModel)):
            raise SchemaDefinitionError("schema_object can only be applied to pydantic models")
        setattr(model, _NAME_ATTR, name or model.__name__.lower())
        setattr(model, _STRICT_ATTR, strict)
        setattr(model, _DESCRIPTION_ATTR, description)

        descriptor = describe_model(model)
        derive(descriptor)
        (registry if registry is not None else default_registry).register(
            descriptor, source=model
        )
        logger.debug(f"Registered schema '{descriptor.schema_name}' for {model.__name__}")
        return model

    return wrap if cls is None else wrap(cls)


def schema_enum(
    cls: type[EnumT] | None = None,
    *,
    description: str | None = None,
) -> Any:
    """Class decorator declaring an ``Enum`` as a constrained string schema.

    Validates the enum eagerly (non-empty, string values, no duplicates).
    """

    def wrap(enum_cls: type[EnumT]) -> type[EnumT]:
        if not (isinstance(enum_cls, type) and issubclass(enum_cls, Enum)):
            raise SchemaDefinitionError("schema_enum can only be applied to Enum classes")
        setattr(enum_cls, _ENUM_DESCRIPTION_ATTR, description)
        derive_enum(describe_enum(enum_cls))
        return enum_cls

    return wrap if cls is None else wrap(cls)


def generate_schema(model: type[BaseModel]) -> dict[str, Any]:
    """Return the ``{"name", "strict", "schema"}`` envelope for ``model``."""
    descriptor = describe_model(model)
    return to_envelope(derive(descriptor), descriptor.schema_name, descriptor.strict)


def generate_schema_string(model: type[BaseModel], *, indent: int | None = DEFAULT_INDENT) -> str:
    """Return the canonical JSON text of ``model``'s schema envelope."""
    descriptor = describe_model(model)
    return to_canonical_json(
        derive(descriptor), descriptor.schema_name, descriptor.strict, indent=indent
    )


def generate_enum_schema(enum_cls: type[Enum]) -> dict[str, Any]:
    """Return ``{"type": "string", "enum": [...]}`` for ``enum_cls``."""
    return to_map(derive_enum(describe_enum(enum_cls)))


def create(model: type[ModelT], data: str | bytes) -> ModelT:
    """Decode a JSON document into an instance of ``model``.

    Raises:
        DecodingError: if the document does not match the model's schema.
    """
    descriptor = describe_model(model)
    values = _drop_absent(decode(data, descriptor), descriptor)
    try:
        return model.model_validate(values)
    except ValidationError as e:
        raise _from_validation_error(e) from e


def dump_json(instance: BaseModel, *, indent: int | None = None) -> str:
    """Render a model instance as JSON accepted by :func:`create`."""
    descriptor = describe_model(type(instance))
    return encode(instance.model_dump(by_alias=True), descriptor, indent=indent)


def _describe(
    model: type[BaseModel],
    *,
    name: str | None,
    strict: bool | None,
    inherited_strict: bool,
    stack: tuple[type, ...],
) -> ObjectDescriptor:
    if model in stack:
        chain = " -> ".join(t.__name__ for t in (*stack, model))
        raise SchemaDefinitionError(f"Recursive model references are not supported: {chain}")
    stack = (*stack, model)

    decorated_strict: bool | None = model.__dict__.get(_STRICT_ATTR)
    if strict is None:
        strict = decorated_strict if decorated_strict is not None else inherited_strict

    fields: list[FieldDescriptor] = []
    for field_name, info in model.model_fields.items():
        marker = next((m for m in info.metadata if isinstance(m, SchemaField)), None)
        constraints = (
            marker.to_constraints(info.description)
            if marker is not None
            else FieldConstraints(description=info.description)
        )
        try:
            field_type = _field_type(info.annotation, strict=strict, stack=stack)
        except SchemaDefinitionError as e:
            raise SchemaDefinitionError(
                f"{model.__name__}.{field_name}: {e.message}", fields=[field_name]
            ) from e
        if field_type.kind != TypeKind.ARRAY:
            constraints = _with_native_constraints(constraints, info.metadata)
        fields.append(FieldDescriptor(info.alias or field_name, field_type, constraints))

    return ObjectDescriptor(
        schema_name=name or model.__dict__.get(_NAME_ATTR) or model.__name__.lower(),
        fields=tuple(fields),
        strict=strict,
        description=model.__dict__.get(_DESCRIPTION_ATTR),
        type_name=model.__name__,
    )


def _field_type(annotation: Any, *, strict: bool, stack: tuple[type, ...]) -> FieldType:
    """Map a Python type annotation to a :class:`FieldType`."""
    origin = get_origin(annotation)
    args = get_args(annotation)

    if origin is Annotated:
        return _field_type(args[0], strict=strict, stack=stack)

    if origin is Union or origin is types.UnionType:
        members = [a for a in args if a is not type(None)]
        if len(members) != 1:
            raise SchemaDefinitionError(f"Unsupported union type {annotation}")
        inner = _field_type(members[0], strict=strict, stack=stack)
        return d.optional(inner) if len(members) < len(args) else inner

    if origin is Literal:
        if not args or not all(isinstance(a, str) for a in args):
            raise SchemaDefinitionError(f"Only string literals are supported, got {annotation}")
        return d.enum_ref(EnumDescriptor(values=tuple(args)))

    if origin in (list, set, frozenset) or (origin is tuple and len(args) == 2 and args[1] is ...):
        return d.array_of(_field_type(args[0], strict=strict, stack=stack))

    if origin is dict or annotation is dict:
        return d.opaque_object("dict")

    if annotation in _BARE_CONTAINERS:
        raise SchemaDefinitionError(f"Array type {annotation.__name__} needs an element type")

    if origin is not None or annotation in _UNSUPPORTED_TYPES:
        raise SchemaDefinitionError(f"Cannot derive a schema for type {annotation!r}")

    if annotation in _SCALAR_TYPES:
        return _SCALAR_TYPES[annotation]()

    if isinstance(annotation, type):
        if issubclass(annotation, Enum):
            return d.enum_ref(describe_enum(annotation))
        if issubclass(annotation, AnyUrl):
            return d.uri()
        if issubclass(annotation, BaseModel):
            nested = _describe(
                annotation, name=None, strict=None, inherited_strict=strict, stack=stack
            )
            return d.object_ref(nested)
        # Named type without a derivable schema
        return d.opaque_object(annotation.__name__)

    raise SchemaDefinitionError(f"Cannot derive a schema for type {annotation!r}")


def _with_native_constraints(
    constraints: FieldConstraints, metadata: list[Any]
) -> FieldConstraints:
    """Fill constraints left unset by ``SchemaField`` from pydantic ``Field`` metadata.

    ``ge``/``le`` become minimum/maximum, ``min_length``/``max_length`` and
    ``pattern`` carry over. Exclusive bounds (``gt``/``lt``) have no schema
    counterpart and are left to pydantic validation.
    """
    native: dict[str, Any] = {}
    for item in metadata:
        match item:
            case SchemaField():
                continue
            case annotated_types.Ge(ge=value):
                native["minimum"] = value
            case annotated_types.Le(le=value):
                native["maximum"] = value
            case annotated_types.MinLen(min_length=value):
                native["min_length"] = value
            case annotated_types.MaxLen(max_length=value):
                native["max_length"] = value
            case _ if isinstance(getattr(item, "pattern", None), str):
                native["pattern"] = item.pattern

    updates = {key: value for key, value in native.items() if getattr(constraints, key) is None}
    return replace(constraints, **updates) if updates else constraints


def _drop_absent(values: dict[str, Any], descriptor: ObjectDescriptor) -> dict[str, Any]:
    """Remove absent values of non-optional fields so pydantic defaults apply."""
    result: dict[str, Any] = {}
    for field in descriptor.fields:
        value = values.get(field.name)
        if value is None and not field.type.optional:
            continue
        result[field.name] = _drop_absent_value(value, field.type)
    return result


def _drop_absent_value(value: Any, field_type: FieldType) -> Any:
    if value is None:
        return None
    if field_type.kind == TypeKind.OBJECT and field_type.object_ref is not None:
        return _drop_absent(value, field_type.object_ref)
    if field_type.kind == TypeKind.ARRAY and field_type.items is not None:
        return [_drop_absent_value(item, field_type.items) for item in value]
    return value


def _from_validation_error(error: ValidationError) -> DecodingError:
    first = error.errors()[0]
    path = ""
    for part in first["loc"]:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path = f"{path}.{part}" if path else str(part)
    if first["type"] == "missing":
        return DecodingError(DecodingErrorKind.MISSING_FIELD, path)
    return DecodingError(DecodingErrorKind.TYPE_MISMATCH, path, detail=first["msg"])
