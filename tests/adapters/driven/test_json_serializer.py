"""Tests for the pydantic JSON serializer."""

from dataclasses import dataclass

import pytest
from pydantic import BaseModel, ValidationError

from netrequest.adapters.driven.serialization.json_serializer import JsonSerializer

__all__ = []


class User(BaseModel):
    id: int
    name: str


@dataclass
class Point:
    x: int
    y: int


def test_deserialize_model() -> None:
    """deserialize() should build pydantic models."""
    user = JsonSerializer().deserialize('{"id": 1, "name": "Ada"}', User)

    assert user == User(id=1, name="Ada")


def test_deserialize_dataclass() -> None:
    """deserialize() should handle stdlib dataclasses."""
    assert JsonSerializer().deserialize('{"x": 1, "y": 2}', Point) == Point(1, 2)


def test_deserialize_dynamic_typing_forms() -> None:
    """deserialize_dynamic() should accept runtime typing forms."""
    serializer = JsonSerializer()

    assert serializer.deserialize_dynamic("[1, 2, 3]", list[int]) == [1, 2, 3]
    assert serializer.deserialize_dynamic('{"a": [1]}', dict[str, list[int]]) == {"a": [1]}


def test_deserialize_raises_validation_error() -> None:
    """Mismatched JSON should raise pydantic's ValidationError."""
    with pytest.raises(ValidationError):
        JsonSerializer().deserialize('{"id": "x"}', User)


def test_serialize_values() -> None:
    """serialize() should emit compact JSON for models, dataclasses and dicts."""
    serializer = JsonSerializer()

    assert serializer.serialize(User(id=1, name="Ada")) == '{"id":1,"name":"Ada"}'
    assert serializer.serialize(Point(1, 2)) == '{"x":1,"y":2}'
    assert serializer.serialize({"a": [1, 2]}) == '{"a":[1,2]}'


def test_adapters_are_cached() -> None:
    """Repeated decodes of the same type should reuse one adapter."""
    serializer = JsonSerializer()
    serializer.deserialize("1", int)
    serializer.deserialize("2", int)

    assert list(serializer._adapters) == [int]


def test_undecodable_type_raises_type_error() -> None:
    """Types pydantic cannot build a schema for should surface as TypeError."""
    with pytest.raises(TypeError, match="Cannot decode into"):
        JsonSerializer().deserialize_dynamic("{}", object())
