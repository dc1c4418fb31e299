"""strictschema: structured-output JSON schemas from declared data shapes."""

from strictschema.adapters import (
    SchemaField,
    create,
    describe_enum,
    describe_model,
    dump_json,
    generate_enum_schema,
    generate_schema,
    generate_schema_string,
    schema_enum,
    schema_object,
)
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
from strictschema.errors import (
    DecodingError,
    DecodingErrorKind,
    SchemaDefinitionError,
    SerializationError,
    StrictSchemaError,
)
from strictschema.registry import DescriptorRegistry, default_registry
from strictschema.serializer import to_canonical_json, to_envelope, to_map

__version__ = "0.1.0"

__all__ = [
    "DecodingError",
    "DecodingErrorKind",
    "DescriptorRegistry",
    "EnumDescriptor",
    "FieldConstraints",
    "FieldDescriptor",
    "FieldType",
    "ObjectDescriptor",
    "SchemaDefinitionError",
    "SchemaField",
    "SerializationError",
    "StrictSchemaError",
    "TypeKind",
    "create",
    "decode",
    "default_registry",
    "derive",
    "derive_enum",
    "describe_enum",
    "describe_model",
    "dump_json",
    "encode",
    "generate_enum_schema",
    "generate_schema",
    "generate_schema_string",
    "schema_enum",
    "schema_object",
    "to_canonical_json",
    "to_envelope",
    "to_map",
]
