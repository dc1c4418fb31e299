"""Module whose import fails: a strict schema declares an optional field."""

from pydantic import BaseModel

from strictschema import DescriptorRegistry, schema_object


@schema_object(registry=DescriptorRegistry())
class Contact(BaseModel):
    name: str
    nickname: str | None = None
