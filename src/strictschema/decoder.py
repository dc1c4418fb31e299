"""Decode engine: JSON documents to typed values, and back.

Decoding is structural only. Validation constraints such as ``minLength`` or
``pattern`` are hints for the producing model and are not re-checked here; a
document is accepted when every value has the right JSON kind, every required
field is present and no undeclared key appears (mirroring
``additionalProperties: false`` in the derived schema).
"""

import json
import logging
import math
import re
from collections.abc import Mapping
from datetime import datetime
from enum import Enum
from typing import Any
from uuid import UUID

from strictschema.descriptors import FieldType, ObjectDescriptor, TypeKind
from strictschema.errors import DecodingError, DecodingErrorKind, SerializationError
from strictschema.serializer import dumps

logger = logging.getLogger(__name__)

# A date-time must carry a time component, not just a calendar date.
_TIME_COMPONENT = re.compile(r"\d[Tt ]\d")


def decode(data: str | bytes, descriptor: ObjectDescriptor) -> dict[str, Any]:
    """Decode a JSON document into a dict shaped by ``descriptor``.

    The result holds every declared field in declaration order. Fields that
    are absent (or null) and not required map to ``None``. Date-time fields
    become :class:`~datetime.datetime`, UUID fields :class:`~uuid.UUID`,
    number fields ``float`` and nested shapes nested dicts.

    Raises:
        DecodingError: malformed input, a missing required field, an unknown
            field or a value of the wrong kind. No partial value is returned.
    """
    document = _parse(data)
    result = _decode_object(document, descriptor)
    logger.debug(f"Decoded document for schema '{descriptor.schema_name}'")
    return result


def encode(
    value: Mapping[str, Any],
    descriptor: ObjectDescriptor,
    *,
    indent: int | None = None,
) -> str:
    """Render a decoded value back to JSON text.

    This is the inverse of :func:`decode`: ``decode(encode(v, d), d) == v``
    for any ``v`` that conforms to ``d``. Non-required fields holding ``None``
    are omitted.

    Raises:
        SerializationError: if a required field has no value or a value
            cannot be represented in JSON.
    """
    return dumps(_encode_object(value, descriptor), indent=indent)


def _parse(data: str | bytes) -> Any:
    if isinstance(data, bytes | bytearray):
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodingError(
                DecodingErrorKind.MALFORMED_INPUT, detail=f"invalid UTF-8: {e.reason}"
            ) from e
    else:
        text = data

    try:
        return json.loads(text, parse_constant=_reject_constant)
    except ValueError as e:
        raise DecodingError(DecodingErrorKind.MALFORMED_INPUT, detail=str(e)) from e


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _decode_object(document: Any, descriptor: ObjectDescriptor) -> dict[str, Any]:
    if not isinstance(document, dict):
        raise DecodingError(
            DecodingErrorKind.TYPE_MISMATCH,
            expected="object",
            actual=_json_kind(document),
        )

    result: dict[str, Any] = {}
    for field in descriptor.fields:
        raw = document.get(field.name)
        if raw is None:
            if not field.is_required:
                result[field.name] = None
                continue
            if field.name not in document:
                raise DecodingError(DecodingErrorKind.MISSING_FIELD, field.name)
            raise DecodingError(
                DecodingErrorKind.TYPE_MISMATCH,
                field.name,
                expected=field.type.describe(),
                actual="null",
            )
        try:
            result[field.name] = _decode_value(raw, field.type)
        except DecodingError as e:
            raise e.with_prefix(field.name) from None

    known = set(descriptor.field_names())
    for key in document:
        if key not in known:
            raise DecodingError(DecodingErrorKind.UNKNOWN_FIELD, key)

    return result


def _decode_value(raw: Any, field_type: FieldType) -> Any:
    if raw is None:
        if field_type.optional:
            return None
        raise _mismatch(field_type, raw)

    match field_type.kind:
        case TypeKind.STRING | TypeKind.URI:
            if isinstance(raw, str):
                return raw
        case TypeKind.DATE_TIME:
            if isinstance(raw, str):
                return _parse_datetime(raw, field_type)
        case TypeKind.UUID:
            if isinstance(raw, str):
                try:
                    return UUID(raw)
                except ValueError:
                    raise _mismatch(field_type, raw, detail=f"invalid UUID '{raw}'") from None
        case TypeKind.INTEGER:
            if isinstance(raw, int) and not isinstance(raw, bool):
                return raw
        case TypeKind.NUMBER:
            if isinstance(raw, int | float) and not isinstance(raw, bool):
                return _to_float(raw, field_type)
        case TypeKind.BOOLEAN:
            if isinstance(raw, bool):
                return raw
        case TypeKind.ENUM:
            assert field_type.enum_ref is not None
            if isinstance(raw, str) and raw in field_type.enum_ref.values:
                return raw
            if isinstance(raw, str):
                raise _mismatch(field_type, raw, detail=f"unexpected value '{raw}'")
        case TypeKind.ARRAY:
            if isinstance(raw, list):
                return _decode_array(raw, field_type)
        case TypeKind.OBJECT:
            if isinstance(raw, dict):
                if field_type.object_ref is None:
                    return dict(raw)
                return _decode_object(raw, field_type.object_ref)

    raise _mismatch(field_type, raw)


def _decode_array(raw: list[Any], field_type: FieldType) -> list[Any]:
    assert field_type.items is not None
    items: list[Any] = []
    for index, element in enumerate(raw):
        try:
            items.append(_decode_value(element, field_type.items))
        except DecodingError as e:
            raise e.with_prefix(f"[{index}]") from None
    return items


def _to_float(raw: int | float, field_type: FieldType) -> float:
    # The result must be finite to survive encode().
    try:
        value = float(raw)
    except OverflowError:
        raise _mismatch(field_type, raw, detail="number out of range") from None
    if not math.isfinite(value):
        raise _mismatch(field_type, raw, detail="number out of range")
    return value


def _parse_datetime(text: str, field_type: FieldType) -> datetime:
    if not _TIME_COMPONENT.search(text):
        raise _mismatch(field_type, text, detail=f"'{text}' has no time component")
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        raise _mismatch(field_type, text, detail=f"invalid ISO-8601 date-time '{text}'") from None


def _mismatch(field_type: FieldType, raw: Any, *, detail: str | None = None) -> DecodingError:
    return DecodingError(
        DecodingErrorKind.TYPE_MISMATCH,
        expected=field_type.describe(),
        actual=_json_kind(raw),
        detail=detail,
    )


def _json_kind(value: Any) -> str:
    match value:
        case None:
            return "null"
        case bool():
            return "boolean"
        case int():
            return "integer"
        case float():
            return "number"
        case str():
            return "string"
        case list():
            return "array"
        case dict():
            return "object"
        case _:
            return type(value).__name__


def _encode_object(value: Mapping[str, Any], descriptor: ObjectDescriptor) -> dict[str, Any]:
    out: dict[str, Any] = {}
    for field in descriptor.fields:
        item = value.get(field.name)
        if item is None:
            if field.is_required:
                raise SerializationError(
                    f"Required field '{field.name}' of '{descriptor.schema_name}' has no value"
                )
            continue
        out[field.name] = _encode_value(item, field.type)
    return out


def _encode_value(item: Any, field_type: FieldType) -> Any:
    if item is None:
        return None

    match field_type.kind:
        case TypeKind.ARRAY:
            assert field_type.items is not None
            return [_encode_value(element, field_type.items) for element in item]
        case TypeKind.OBJECT:
            if field_type.object_ref is None:
                return dict(item)
            return _encode_object(item, field_type.object_ref)
        case TypeKind.DATE_TIME:
            return item.isoformat() if isinstance(item, datetime) else str(item)
        case TypeKind.UUID | TypeKind.URI:
            return str(item)
        case TypeKind.ENUM:
            return item.value if isinstance(item, Enum) else item
        case TypeKind.NUMBER:
            return float(item)
        case _:
            return item
