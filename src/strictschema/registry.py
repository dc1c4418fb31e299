"""Explicit registry of object descriptors, keyed by schema name."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

from strictschema.derivation import derive
from strictschema.descriptors import ObjectDescriptor
from strictschema.serializer import to_envelope

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistryEntry:
    """A registered descriptor and the class it was built from, if any."""

    descriptor: ObjectDescriptor
    source: type | None = None


class DescriptorRegistry:
    """Name → descriptor table populated at import time by ``@schema_object``."""

    def __init__(self) -> None:
        self._entries: dict[str, RegistryEntry] = {}

    def register(self, descriptor: ObjectDescriptor, *, source: type | None = None) -> None:
        """Register ``descriptor`` under its schema name, replacing any previous entry."""
        name = descriptor.schema_name
        previous = self._entries.get(name)
        if previous is not None and previous.source is not source:
            logger.warning(f"Schema '{name}' is already registered, replacing it")
        self._entries[name] = RegistryEntry(descriptor, source)

    def get(self, name: str) -> ObjectDescriptor:
        """Return the descriptor registered as ``name``.

        Raises:
            KeyError: if no schema with that name is registered.
        """
        try:
            return self._entries[name].descriptor
        except KeyError:
            available = ", ".join(self.names()) or "none"
            raise KeyError(f"Schema '{name}' is not registered (available: {available})") from None

    def source(self, name: str) -> type | None:
        """Return the class a registered schema was built from."""
        return self._entries[name].source if name in self._entries else None

    def names(self) -> list[str]:
        return sorted(self._entries)

    def envelopes(self) -> dict[str, dict[str, Any]]:
        """Derive every registered schema, returned as request envelopes."""
        result: dict[str, dict[str, Any]] = {}
        for name in self.names():
            descriptor = self._entries[name].descriptor
            result[name] = to_envelope(derive(descriptor), name, descriptor.strict)
        return result

    def clear(self) -> None:
        self._entries.clear()

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ObjectDescriptor]:
        return (self._entries[name].descriptor for name in self.names())


default_registry = DescriptorRegistry()
