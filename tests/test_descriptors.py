"""Tests for the type descriptor model."""

import pytest

from strictschema.descriptors import (
    EnumDescriptor,
    FieldType,
    ObjectDescriptor,
    TypeKind,
    array_of,
    date_time,
    enum_ref,
    integer,
    make_field,
    object_ref,
    opaque_object,
    optional,
    string,
)


class TestFieldType:
    """Tests for FieldType and the builder helpers."""

    def test_optional_wraps_any_type(self) -> None:
        """Test optional keeps the kind and sets the modifier."""
        wrapped = optional(array_of(string()))
        assert wrapped.kind == TypeKind.ARRAY
        assert wrapped.optional is True
        assert wrapped.unwrapped() == array_of(string())

    def test_array_requires_items(self) -> None:
        """Test an array without an element type is rejected."""
        with pytest.raises(ValueError, match="element type"):
            FieldType(TypeKind.ARRAY)

    def test_enum_requires_descriptor(self) -> None:
        """Test an enum kind without values is rejected."""
        with pytest.raises(ValueError, match="enum descriptor"):
            FieldType(TypeKind.ENUM)

    def test_object_ref_type_name(self) -> None:
        """Test object references take the shape's type name."""
        shape = ObjectDescriptor(schema_name="work", type_name="Work")
        assert object_ref(shape).type_name == "Work"
        assert object_ref(ObjectDescriptor(schema_name="work")).type_name == "work"
        assert opaque_object("Money").object_ref is None

    @pytest.mark.parametrize(
        ("field_type", "text"),
        [
            (integer(), "integer"),
            (optional(string()), "string or null"),
            (array_of(date_time()), "array of ISO-8601 date-time string"),
            (enum_ref(EnumDescriptor(values=("a", "b"))), "one of ['a', 'b']"),
        ],
    )
    def test_describe(self, field_type: FieldType, text: str) -> None:
        """Test human readable type names used in error messages."""
        assert field_type.describe() == text


class TestDescriptors:
    """Tests for field and object descriptors."""

    def test_optional_never_required(self) -> None:
        """Test the optional modifier wins over an explicit required flag."""
        field = make_field("email", optional(string()), required=True)
        assert field.is_required is False

    def test_explicit_not_required(self) -> None:
        """Test required=False on a non-optional type."""
        assert make_field("tag", string(), required=False).is_required is False

    def test_make_field_constraints(self) -> None:
        """Test keyword constraints are passed through."""
        field = make_field("age", integer(), minimum=0, description="Age in years")
        assert field.constraints.minimum == 0
        assert field.constraints.description == "Age in years"
        assert field.is_required is True

    def test_make_field_unknown_constraint(self) -> None:
        """Test unknown constraint names are rejected."""
        with pytest.raises(TypeError):
            make_field("age", integer(), minimum_value=0)

    def test_fields_stored_as_tuple(self) -> None:
        """Test object descriptors keep fields immutable and in order."""
        descriptor = ObjectDescriptor(
            schema_name="t", fields=[make_field("b", string()), make_field("a", string())]
        )
        assert isinstance(descriptor.fields, tuple)
        assert descriptor.field_names() == ["b", "a"]
        assert descriptor.get_field("a") is descriptor.fields[1]
        assert descriptor.get_field("missing") is None

    def test_strict_by_default(self) -> None:
        """Test object descriptors are strict unless told otherwise."""
        assert ObjectDescriptor(schema_name="t").strict is True
