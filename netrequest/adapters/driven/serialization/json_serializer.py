"""JSON serialization backed by pydantic type adapters."""

from typing import Any, TypeVar

from pydantic import PydanticUserError, TypeAdapter

from netrequest.ports.serialization import SerializationPort

__all__ = ["JsonSerializer", "default_serializer"]

T = TypeVar("T")


class JsonSerializer(SerializationPort):
    """Encode and decode JSON for any type pydantic can validate.

    Works for pydantic models, dataclasses, TypedDicts and plain typing
    forms such as `list[int]`. Adapters are cached per hashable type.
    """

    def __init__(self) -> None:
        self._adapters: dict[Any, TypeAdapter[Any]] = {}

    def serialize(self, value: Any) -> str:
        """Encode a value to JSON text.

        Args:
            value: Any value pydantic can dump.

        Returns:
            Compact JSON text.
        """
        return self._adapter(type(value)).dump_json(value).decode("utf-8")

    def deserialize(self, text: str, response_type: type[T]) -> T:
        """Decode JSON text into `response_type`.

        Raises:
            pydantic.ValidationError: If the text does not fit the type.
            TypeError: If pydantic cannot build a schema for the type.
        """
        return self._validate(text, response_type)

    def deserialize_dynamic(self, text: str, type_descriptor: Any) -> Any:
        """Decode JSON text into a type known only at runtime."""
        return self._validate(text, type_descriptor)

    def _validate(self, text: str, type_descriptor: Any) -> Any:
        try:
            return self._adapter(type_descriptor).validate_json(text)
        except PydanticUserError as e:
            # Schema generation and undefined-annotation errors are not TypeErrors
            raise TypeError(f"Cannot decode into {type_descriptor!r}: {e.code}") from e

    def _adapter(self, type_descriptor: Any) -> TypeAdapter[Any]:
        try:
            adapter = self._adapters.get(type_descriptor)
        except TypeError:
            # Unhashable descriptor, e.g. Annotated with list metadata
            return TypeAdapter(type_descriptor)
        if adapter is None:
            adapter = TypeAdapter(type_descriptor)
            self._adapters[type_descriptor] = adapter
        return adapter


default_serializer = JsonSerializer()
