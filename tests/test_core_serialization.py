from dataclasses import dataclass

import pytest
from pydantic import BaseModel

from vtxplugin.core.errors import SerializationError
from vtxplugin.core.serialization import from_json, to_json, to_json_bytes


class Item(BaseModel):
    id: int
    name: str


@dataclass
class Point:
    x: int
    y: int


def test_to_json_is_compact_and_keeps_unicode():
    assert to_json({"a": 1, "b": [1, 2]}) == '{"a":1,"b":[1,2]}'
    assert to_json_bytes({"name": "café"}) == '{"name":"café"}'.encode("utf-8")


def test_to_json_handles_models_and_dataclasses():
    assert to_json(Item(id=1, name="a")) == '{"id":1,"name":"a"}'
    assert to_json([Point(1, 2)]) == '[{"x":1,"y":2}]'


@pytest.mark.parametrize("value", [float("nan"), {"x": object()}, {1, 2}])
def test_to_json_rejects_unencodable_values(value):
    with pytest.raises(SerializationError):
        to_json(value)


def test_from_json_with_and_without_model():
    assert from_json('{"id": 1, "name": "a"}') == {"id": 1, "name": "a"}
    assert from_json('{"id": 1, "name": "a"}', model=Item) == Item(id=1, name="a")
    assert from_json(b'[{"id": 2, "name": "b"}]', model=list[Item]) == [Item(id=2, name="b")]


def test_from_json_errors_become_serialization_errors():
    with pytest.raises(SerializationError):
        from_json("{not json")
    with pytest.raises(SerializationError):
        from_json('{"id": "x"}', model=Item)
