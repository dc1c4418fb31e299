"""Pytest fixtures for strictschema tests."""

import pytest

from strictschema.descriptors import (
    EnumDescriptor,
    ObjectDescriptor,
    array_of,
    date_time,
    enum_ref,
    integer,
    make_field,
    object_ref,
    optional,
    string,
)


@pytest.fixture
def person() -> ObjectDescriptor:
    """Person shape with an optional email, non-strict."""
    return ObjectDescriptor(
        schema_name="person",
        strict=False,
        fields=(
            make_field("name", string(), description="Full name of the person"),
            make_field("age", integer(), description="Age in years"),
            make_field("email", optional(string()), description="Email address"),
        ),
    )


@pytest.fixture
def skill() -> ObjectDescriptor:
    return ObjectDescriptor(
        schema_name="skill",
        fields=(
            make_field("name", string()),
            make_field("level", integer(), minimum=1, maximum=10),
        ),
    )


@pytest.fixture
def priority() -> EnumDescriptor:
    return EnumDescriptor(values=("low", "medium", "high"), type_name="Priority")


@pytest.fixture
def profile(skill: ObjectDescriptor, priority: EnumDescriptor) -> ObjectDescriptor:
    """Shape with nested object, array-of-object, enum and date-time fields."""
    work = ObjectDescriptor(
        schema_name="work",
        fields=(
            make_field("title", string()),
            make_field("company", string()),
        ),
    )
    return ObjectDescriptor(
        schema_name="profile",
        fields=(
            make_field("name", string()),
            make_field("work", object_ref(work), description="Current position"),
            make_field("skills", array_of(object_ref(skill))),
            make_field("priority", enum_ref(priority)),
            make_field("updated_at", date_time()),
        ),
    )
