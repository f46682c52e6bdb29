import math
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Annotated, NewType, Optional, Union

import pytest
from pydantic import BaseModel

from fieldfill.engine.fields import enumerate_fields
from fieldfill.engine.kinds import (
    Float32,
    Int8,
    Kind,
    Uint8,
    Uint32,
    inspect_type,
    narrow_float,
    narrow_int,
    narrow_uint,
    resolve_hints,
    type_hash,
    zero_value,
)

Age = NewType("Age", Int8)


@dataclass
class Point:
    x: int
    y: int = 5
    label: str = ""


class Model(BaseModel):
    name: str
    size: int = 3


@pytest.mark.parametrize(
    ("hint", "kind", "bits"),
    [
        (bool, Kind.BOOL, 1),
        (int, Kind.INT, 64),
        (Int8, Kind.INT, 8),
        (Uint32, Kind.UINT, 32),
        (float, Kind.FLOAT, 64),
        (Float32, Kind.FLOAT, 32),
        (str, Kind.STRING, 0),
        (Age, Kind.INT, 8),
        (Annotated[int, "meta"], Kind.INT, 64),
    ],
)
def test_scalar_kinds(hint, kind, bits):
    info = inspect_type(hint)
    assert info.kind is kind
    assert info.bits == bits


def test_newtype_keeps_own_identity():
    assert inspect_type(Age).name.endswith(".Age")
    assert inspect_type(int).name == "builtins.int"


def test_optional_is_pointer():
    for hint in (Optional[int], int | None):
        info = inspect_type(hint)
        assert info.kind is Kind.POINTER
        assert info.elem.kind is Kind.INT
        assert type_hash(info) == "builtins.int"


def test_other_unions_are_not_pointers():
    assert inspect_type(Union[int, str]).kind is Kind.OTHER


def test_sequences():
    assert inspect_type(list[int]).kind is Kind.SLICE
    assert inspect_type(list[int]).elem.kind is Kind.INT
    assert inspect_type(bytes).is_byte_sequence
    assert inspect_type(bytearray).is_byte_sequence
    assert inspect_type(list[Uint8]).is_byte_sequence
    assert not inspect_type(list[int]).is_byte_sequence


def test_records_and_others():
    assert inspect_type(Point).kind is Kind.STRUCT
    assert inspect_type(Model).kind is Kind.STRUCT
    assert inspect_type(timedelta).kind is Kind.OTHER
    assert inspect_type(timedelta).name == "datetime.timedelta"
    assert inspect_type(dict[str, int]).kind is Kind.OTHER


def test_zero_values():
    assert zero_value(inspect_type(bool)) is False
    assert zero_value(inspect_type(Int8)) == 0
    assert zero_value(inspect_type(float)) == 0.0
    assert zero_value(inspect_type(str)) == ""
    assert zero_value(inspect_type(bytes)) is None
    assert zero_value(inspect_type(list[Uint8])) is None
    assert zero_value(inspect_type(list[list[Uint8]])) == []
    assert zero_value(inspect_type(list[str])) == []
    assert zero_value(inspect_type(Optional[int])) is None
    assert zero_value(inspect_type(Point)) == Point(x=0, y=5, label="")
    model = zero_value(inspect_type(Model))
    assert model.name == ""
    assert model.size == 3


def test_narrowing():
    assert narrow_int(127, 8) == 127
    assert narrow_int(128, 8) == -128
    assert narrow_int(-129, 8) == 127
    assert narrow_int(1 << 63, 64) == -(1 << 63)
    assert narrow_uint(256, 8) == 0
    assert narrow_uint(257, 8) == 1
    assert narrow_float(3.2, 64) == 3.2
    assert narrow_float(3.2, 32) != 3.2
    assert narrow_float(3.2, 32) == pytest.approx(3.2, rel=1e-6)
    assert narrow_float(1e300, 32) == math.inf
    assert narrow_float(-1e300, 32) == -math.inf


def test_enumerate_fields_skips_private_and_frozen():
    @dataclass
    class Record:
        public: int = field(default=0, metadata={"default": "1"})
        _private: int = field(default=0, metadata={"default": "2"})
        other: str = ""

    @dataclass(frozen=True)
    class Frozen:
        value: int = field(default=0, metadata={"default": "1"})

    fields = enumerate_fields(Record(), "default")
    assert [f.name for f in fields] == ["public", "other"]
    assert [f.tag for f in fields] == ["1", ""]
    assert enumerate_fields(Frozen(), "default") == []


def test_enumerate_fields_converts_non_string_tags():
    @dataclass
    class Record:
        count: int = field(default=0, metadata={"default": 7})

    assert enumerate_fields(Record(), "default")[0].tag == "7"


@dataclass
class Forward:
    count: "int" = 0
    peer: "UndefinedPeer" = None  # noqa: F821
    point: "Point" = None


def test_resolve_hints_falls_back_per_field():
    hints = resolve_hints(Forward)
    assert hints["count"] is int
    assert hints["peer"] == "UndefinedPeer"
    assert hints["point"] is Point
    assert inspect_type(hints["peer"]).kind is Kind.OTHER
