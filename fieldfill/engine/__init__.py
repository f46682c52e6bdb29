"""填充引擎：字段枚举 + 空值判定 + 规则解析 + 组合类型递归"""

from fieldfill.engine.fields import FieldData, enumerate_fields, is_record
from fieldfill.engine.filler import Filler, FillerFunc, RuleTable
from fieldfill.engine.kinds import (
    Float32,
    Float64,
    Int8,
    Int16,
    Int32,
    Int64,
    Kind,
    TypeInfo,
    Uint,
    Uint8,
    Uint16,
    Uint32,
    Uint64,
    inspect_type,
)

__all__ = [
    "FieldData",
    "Filler",
    "FillerFunc",
    "Float32",
    "Float64",
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "Kind",
    "RuleTable",
    "TypeInfo",
    "Uint",
    "Uint8",
    "Uint16",
    "Uint32",
    "Uint64",
    "enumerate_fields",
    "inspect_type",
    "is_record",
]
