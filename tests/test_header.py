import enum
import math
from dataclasses import dataclass
from typing import List, Optional

import pytest

from delimread.header import serialize_header
from delimread.records import SerializeError


class _Collect:
    def __init__(self) -> None:
        self.fields = []

    def write_field(self, field) -> None:
        self.fields.append(field)


def header(value):
    writer = _Collect()
    wrote = serialize_header(writer, value)
    return wrote, ",".join(writer.fields)


def header_err(value):
    with pytest.raises(SerializeError) as info:
        serialize_header(_Collect(), value)
    return info.value


@dataclass
class Foo:
    x: bool
    y: int
    z: str


@dataclass
class Labeled:
    label: str
    num: float


@dataclass
class Bar:
    label2: bool
    value: int
    empty: Optional[int] = None


@dataclass
class Unit:
    pass


class Wat(enum.Enum):
    Foo = 1
    Bar = 2
    Baz = 3


@pytest.mark.parametrize(
    "value",
    [
        True,
        12345,
        2**127,
        2**127 - 1,
        1.23,
        math.nan,
        "☃",
        "how\nare\n\"you\"?",
        b"how\nare\n\"you\"?",
        None,
        5,
        Unit(),
        1.5,
        Wat.Foo,
        Wat.Bar,
        Wat.Baz,
        [1, 2, 3],
        (True, 1.5, "hi"),
        (True, 1.5, [1, 2, 3]),
        (False, 42, "hi"),
    ],
)
def test_non_struct_values_write_nothing(value):
    assert header(value) == (False, "")


def test_struct_headers():
    assert header(Foo(True, 5, "hi")) == (True, "x,y,z")


def test_struct_headers_nested_fails():
    @dataclass
    class Nested:
        label2: str
        value: int

    @dataclass
    class Outer:
        label: str
        nest: Nested

    err = header_err(Outer("foo", Nested("bar", 5)))
    assert "container inside struct" in str(err)


def test_struct_headers_nested_seq_fails():
    @dataclass
    class WithValues:
        label: str
        values: List[int]

    err = header_err(WithValues("foo", [1, 2, 3]))
    assert "container inside struct" in str(err)


def test_struct_headers_inside_tuple():
    row = (Labeled("hi", 5.0), Bar(True, 3), Labeled("baz", 2.3))
    assert header(row) == (True, "label,num,label2,value,empty,label,num")


def test_struct_headers_inside_tuple_scalar_before():
    err = header_err((3.14, Labeled("hi", 5.0)))
    assert "scalar outside struct" in str(err)


def test_struct_headers_inside_tuple_scalar_after():
    err = header_err((Labeled("hi", 5.0), 3.14))
    assert "scalar outside struct" in str(err)


def test_struct_headers_inside_seq():
    row = [Labeled("hi", 5.0), Labeled("baz", 2.3)]
    assert header(row) == (True, "label,num,label,num")


def test_struct_headers_inside_nested_tuple_seq():
    row = ((Labeled("hi", 5.0), Bar(True, 3)), [(Labeled("baz", 2.3),)])
    assert header(row) == (True, "label,num,label2,value,empty,label,num")


def test_maps_are_rejected():
    err = header_err({"a": 1})
    assert "maps" in str(err)


def test_unsupported_object_is_rejected():
    with pytest.raises(SerializeError):
        serialize_header(_Collect(), object())


def test_scalar_before_struct_writes_no_names():
    writer = _Collect()
    with pytest.raises(SerializeError):
        serialize_header(writer, ("first", Foo(True, 1, "a")))
    assert writer.fields == []


def test_struct_field_names_match_dataclass_order():
    wrote, got = header([Foo(False, 1, "a"), Foo(True, 2, "b")])
    assert wrote is True
    assert got.split(",") == ["x", "y", "z", "x", "y", "z"]


def test_unit_struct_inside_struct_field_is_scalar():
    @dataclass
    class HoldsUnit:
        marker: Unit
        count: int

    assert header(HoldsUnit(Unit(), 3)) == (True, "marker,count")