"""Request payload models for structured-output APIs.

These models only shape the JSON body that carries a derived schema; sending
it is left to whatever HTTP client the caller uses.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from strictschema.derivation import derive
from strictschema.descriptors import ObjectDescriptor
from strictschema.serializer import to_map


class ChatRequestMessage(BaseModel):
    """A chat message in a request."""

    role: Literal["system", "developer", "user", "assistant"] = Field(
        ..., description="Author of the message"
    )
    content: str = Field(..., description="Message text")


class JSONSchemaFormat(BaseModel):
    """Named JSON schema, as nested in a chat-completions ``response_format``."""

    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., description="Schema name")
    schema_: dict[str, Any] = Field(..., alias="schema", description="Bare JSON schema")
    strict: bool = Field(True, description="Whether the API enforces the schema strictly")


class TextFormat(BaseModel):
    """``text.format`` block of a responses-API request."""

    model_config = ConfigDict(populate_by_name=True)

    type: Literal["json_schema"] = "json_schema"
    name: str = Field(..., description="Schema name")
    schema_: dict[str, Any] = Field(..., alias="schema", description="Bare JSON schema")
    strict: bool = Field(True, description="Whether the API enforces the schema strictly")


class TextConfig(BaseModel):
    """Text configuration for a responses-API request."""

    format: TextFormat


class ResponsesRequest(BaseModel):
    """Responses-API request body."""

    model: str = Field(..., description="Model identifier")
    input: list[ChatRequestMessage] = Field(default_factory=list, description="Input messages")
    text: TextConfig


class ResponseFormat(BaseModel):
    """``response_format`` block of a chat-completions request."""

    type: Literal["json_schema"] = "json_schema"
    json_schema: JSONSchemaFormat


class ChatCompletionsRequest(BaseModel):
    """Chat-completions request body."""

    model: str = Field(..., description="Model identifier")
    messages: list[ChatRequestMessage] = Field(default_factory=list, description="Messages")
    response_format: ResponseFormat


def build_json_schema_format(descriptor: ObjectDescriptor) -> JSONSchemaFormat:
    return JSONSchemaFormat(
        name=descriptor.schema_name,
        schema=to_map(derive(descriptor)),
        strict=descriptor.strict,
    )


def build_text_config(descriptor: ObjectDescriptor) -> TextConfig:
    return TextConfig(
        format=TextFormat(
            name=descriptor.schema_name,
            schema=to_map(derive(descriptor)),
            strict=descriptor.strict,
        )
    )


def build_response_format(descriptor: ObjectDescriptor) -> ResponseFormat:
    return ResponseFormat(json_schema=build_json_schema_format(descriptor))


def build_responses_request(
    descriptor: ObjectDescriptor,
    model: str,
    messages: list[ChatRequestMessage],
) -> ResponsesRequest:
    """Build a responses-API request that asks for output matching ``descriptor``."""
    return ResponsesRequest(model=model, input=messages, text=build_text_config(descriptor))


def build_chat_request(
    descriptor: ObjectDescriptor,
    model: str,
    messages: list[ChatRequestMessage],
) -> ChatCompletionsRequest:
    """Build a chat-completions request that asks for output matching ``descriptor``."""
    return ChatCompletionsRequest(
        model=model,
        messages=messages,
        response_format=build_response_format(descriptor),
    )


def to_payload(request: BaseModel) -> dict[str, Any]:
    """Dump a request model to the JSON-ready dict the API expects."""
    return request.model_dump(mode="json", by_alias=True)
