"""Serialization port definition (interface)."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar

__all__ = ["SerializationPort"]

T = TypeVar("T")


class SerializationPort(Protocol):
    """Interface for converting between wire text and in-memory values.

    Decoding is exposed twice: once addressed by a static type, once by a
    runtime type descriptor, so callers that only hold a descriptor at
    runtime can still resolve a response.
    """

    def serialize(self, value: Any, /) -> str:
        """Encode a value to wire text."""
        ...

    def deserialize(self, text: str, response_type: type[T], /) -> T:
        """Decode wire text into a statically known type.

        Raises:
            ValueError: If the text cannot be mapped into the type.
            TypeError: If the type itself cannot be decoded into.
        """
        ...

    def deserialize_dynamic(self, text: str, type_descriptor: Any, /) -> Any:
        """Decode wire text into a type supplied at runtime.

        Raises:
            ValueError: If the text cannot be mapped into the type.
            TypeError: If the descriptor is not a decodable type.
        """
        ...
