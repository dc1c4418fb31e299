"""Error types raised by schema derivation, serialization and decoding."""

from __future__ import annotations

from collections.abc import Iterable
from enum import StrEnum


class StrictSchemaError(Exception):
    """Base class for all strictschema errors."""


class SchemaDefinitionError(StrictSchemaError):
    """A descriptor violates a derivation rule.

    Raised while deriving a schema (or while the adapter builds a descriptor),
    never while decoding. It points at a static authoring mistake, so callers
    are expected to fix the declaration rather than retry.
    """

    def __init__(self, message: str, fields: Iterable[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.fields = tuple(fields)


class SerializationError(StrictSchemaError):
    """A derived schema tree cannot be rendered as JSON."""


class DecodingErrorKind(StrEnum):
    """Categories of decoding failures."""

    MALFORMED_INPUT = "malformed_input"
    MISSING_FIELD = "missing_field"
    TYPE_MISMATCH = "type_mismatch"
    UNKNOWN_FIELD = "unknown_field"


class DecodingError(StrictSchemaError):
    """A JSON document does not match the target descriptor.

    ``path`` is the dotted/indexed location of the offending value
    (``work.title``, ``skills[2].level``); it is empty for document-level
    failures such as malformed input.
    """

    def __init__(
        self,
        kind: DecodingErrorKind,
        path: str = "",
        *,
        expected: str | None = None,
        actual: str | None = None,
        detail: str | None = None,
    ) -> None:
        self.kind = kind
        self.path = path
        self.expected = expected
        self.actual = actual
        self.detail = detail
        super().__init__(self._render())

    @property
    def field(self) -> str:
        """Alias for ``path``."""
        return self.path

    def with_prefix(self, prefix: str) -> DecodingError:
        """Return a copy of this error with ``prefix`` prepended to its path."""
        if not prefix:
            return self
        if not self.path:
            path = prefix
        elif self.path.startswith("["):
            path = f"{prefix}{self.path}"
        else:
            path = f"{prefix}.{self.path}"
        return DecodingError(
            self.kind,
            path,
            expected=self.expected,
            actual=self.actual,
            detail=self.detail,
        )

    def _render(self) -> str:
        location = self.path or "<root>"
        match self.kind:
            case DecodingErrorKind.MALFORMED_INPUT:
                message = "Malformed input"
            case DecodingErrorKind.MISSING_FIELD:
                message = f"Missing required field '{location}'"
            case DecodingErrorKind.UNKNOWN_FIELD:
                message = f"Unknown field '{location}'"
            case _:
                message = f"Type mismatch at '{location}'"
                if self.expected is not None:
                    message += f": expected {self.expected}"
                    if self.actual is not None:
                        message += f", got {self.actual}"
        if self.detail:
            message += f" ({self.detail})"
        return message

    def __repr__(self) -> str:
        return f"DecodingError(kind={self.kind.value!r}, path={self.path!r})"
