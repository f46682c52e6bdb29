"""
字段类型解析：把类型注解归一为封闭的 Kind 枚举 + TypeInfo

支持的注解形态：
- bool / int / float / str                      → 标量
- Int8 ... Uint64 / Float32 等 NewType 宽度别名  → 标量（带位宽）
- bytes / bytearray                             → SLICE（元素为 8 位无符号）
- list[T]                                       → SLICE
- T | None / Optional[T]                        → POINTER（None 即未分配）
- dataclass / pydantic BaseModel                → STRUCT
- 其他                                          → OTHER（只能被 by-type 规则命中）
"""

from __future__ import annotations

import dataclasses
import enum
import inspect
import math
import struct
import sys
import types
import typing
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, NewType

from pydantic import BaseModel

# ── 宽度别名（运行时就是 int / float，本身不做任何校验） ──
Int8 = NewType("Int8", int)
Int16 = NewType("Int16", int)
Int32 = NewType("Int32", int)
Int64 = NewType("Int64", int)
Uint = NewType("Uint", int)
Uint8 = NewType("Uint8", int)
Uint16 = NewType("Uint16", int)
Uint32 = NewType("Uint32", int)
Uint64 = NewType("Uint64", int)
Float32 = NewType("Float32", float)
Float64 = NewType("Float64", float)


class Kind(enum.Enum):
    """字段的结构类别（封闭集合）"""

    BOOL = "bool"
    INT = "int"
    UINT = "uint"
    FLOAT = "float"
    STRING = "string"
    SLICE = "slice"
    STRUCT = "struct"
    POINTER = "pointer"
    OTHER = "other"


SCALAR_KINDS = frozenset({Kind.BOOL, Kind.INT, Kind.UINT, Kind.FLOAT, Kind.STRING})

_WIDTHS: dict[Any, tuple[Kind, int]] = {
    Int8: (Kind.INT, 8),
    Int16: (Kind.INT, 16),
    Int32: (Kind.INT, 32),
    Int64: (Kind.INT, 64),
    Uint: (Kind.UINT, 64),
    Uint8: (Kind.UINT, 8),
    Uint16: (Kind.UINT, 16),
    Uint32: (Kind.UINT, 32),
    Uint64: (Kind.UINT, 64),
    Float32: (Kind.FLOAT, 32),
    Float64: (Kind.FLOAT, 64),
}

_BUILTINS: dict[type, tuple[Kind, int]] = {
    bool: (Kind.BOOL, 1),
    int: (Kind.INT, 64),
    float: (Kind.FLOAT, 64),
    str: (Kind.STRING, 0),
}


@dataclass(frozen=True)
class TypeInfo:
    """单个字段的类型描述"""

    kind: Kind
    hint: Any  # 原始注解
    origin: Any  # 运行时的具体类（用于构造零值）
    name: str  # 类型标识：<module>.<name>
    bits: int = 0
    elem: TypeInfo | None = None  # SLICE 的元素 / POINTER 的指向类型

    @property
    def is_byte_sequence(self) -> bool:
        return (
            self.kind is Kind.SLICE
            and self.elem is not None
            and self.elem.kind is Kind.UINT
            and self.elem.bits == 8
        )


def is_record_type(tp: Any) -> bool:
    """dataclass 类或 pydantic 模型类"""
    if not isinstance(tp, type):
        return False
    if issubclass(tp, BaseModel):
        return True
    return dataclasses.is_dataclass(tp)


def _qualified_name(tp: Any) -> str:
    module = getattr(tp, "__module__", "") or ""
    name = getattr(tp, "__qualname__", None) or getattr(tp, "__name__", None) or repr(tp)
    return f"{module}.{name}"


def _is_newtype(tp: Any) -> bool:
    return hasattr(tp, "__supertype__") and callable(tp)


def inspect_type(hint: Any) -> TypeInfo:
    """解析类型注解，结果按注解缓存（注解不可哈希时直接解析）"""
    try:
        return _inspect_cached(hint)
    except TypeError:
        return _inspect(hint)


@lru_cache(maxsize=1024)
def _inspect_cached(hint: Any) -> TypeInfo:
    return _inspect(hint)


def _inspect(hint: Any) -> TypeInfo:
    origin = typing.get_origin(hint)

    if origin is typing.Annotated:
        return _inspect(typing.get_args(hint)[0])

    if _is_newtype(hint):
        return _inspect_newtype(hint)

    if origin is typing.Union or origin is types.UnionType:
        members = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(members) == 1 and len(members) < len(typing.get_args(hint)):
            elem = _inspect(members[0])
            return TypeInfo(Kind.POINTER, hint, elem.origin, elem.name, elem.bits, elem)
        return TypeInfo(Kind.OTHER, hint, None, repr(hint))

    if origin is list or hint is list:
        args = typing.get_args(hint)
        elem = _inspect(args[0]) if args else TypeInfo(Kind.OTHER, Any, None, "typing.Any")
        return TypeInfo(Kind.SLICE, hint, list, "builtins.list", 0, elem)

    if hint in (bytes, bytearray):
        elem = TypeInfo(Kind.UINT, Uint8, int, _qualified_name(Uint8), 8)
        return TypeInfo(Kind.SLICE, hint, hint, _qualified_name(hint), 0, elem)

    if origin is None and isinstance(hint, type):
        for base, (kind, bits) in _BUILTINS.items():
            # bool 是 int 的子类，_BUILTINS 中 bool 在前
            if issubclass(hint, base):
                return TypeInfo(kind, hint, hint, _qualified_name(hint), bits)
        if is_record_type(hint):
            return TypeInfo(Kind.STRUCT, hint, hint, _qualified_name(hint))
        return TypeInfo(Kind.OTHER, hint, hint, _qualified_name(hint))

    return TypeInfo(Kind.OTHER, hint, None, repr(hint))


def _inspect_newtype(hint: Any) -> TypeInfo:
    """NewType 保留自身名字作为类型标识，类别与位宽取自最近的已知宽度别名或底层类型"""
    name = f"{hint.__module__}.{hint.__name__}"
    current = hint
    while _is_newtype(current):
        if current in _WIDTHS:
            kind, bits = _WIDTHS[current]
            runtime = float if kind is Kind.FLOAT else int
            return TypeInfo(kind, hint, runtime, name, bits)
        current = current.__supertype__
    base = _inspect(current)
    return dataclasses.replace(base, hint=hint, name=name)


def type_hash(info: TypeInfo) -> str:
    """类型标识，剥掉一层指针，使注册到值类型的规则同样命中其 Optional 形式"""
    if info.kind is Kind.POINTER and info.elem is not None:
        return info.elem.name
    return info.name


def zero_value(info: TypeInfo) -> Any:
    """类型的零值：字节序列与指针为 None（未分配），列表为空列表"""
    if info.kind is Kind.BOOL:
        return False
    if info.kind in (Kind.INT, Kind.UINT):
        return 0
    if info.kind is Kind.FLOAT:
        return 0.0
    if info.kind is Kind.STRING:
        return ""
    if info.kind is Kind.SLICE:
        return None if info.is_byte_sequence else []
    if info.kind is Kind.STRUCT:
        return zero_record(info.origin)
    return None


def resolve_hints(cls: type) -> dict[str, Any]:
    """
    解析记录类的类型注解。

    整体解析失败时（例如只在 TYPE_CHECKING 下导入的前向引用）逐个字段解析，
    解析不了的字段保留原始字符串（归为 OTHER），其余字段照常填充。
    """
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError):
        pass

    hints: dict[str, Any] = {}
    for base in reversed(cls.__mro__):
        module = sys.modules.get(base.__module__)
        globalns = vars(module) if module is not None else {}
        try:
            annotations = inspect.get_annotations(base)
        except NameError:
            continue
        for name, raw in annotations.items():
            hints[name] = _eval_hint(raw, globalns, dict(vars(base)))
    return hints


def _eval_hint(raw: Any, globalns: dict, localns: dict) -> Any:
    if not isinstance(raw, str):
        return raw
    try:
        return eval(raw, globalns, localns)  # noqa: S307
    except (NameError, AttributeError, SyntaxError, TypeError):
        return raw


def zero_record(cls: type) -> Any:
    """构造记录实例：有默认值的字段沿用默认值，其余字段填零值"""
    hints = resolve_hints(cls)
    if issubclass(cls, BaseModel):
        values = {
            name: zero_value(inspect_type(info.annotation))
            for name, info in cls.model_fields.items()
            if info.is_required()
        }
        return cls.model_construct(**values)

    kwargs = {}
    missing = []
    for f in dataclasses.fields(cls):
        if f.default is not dataclasses.MISSING or f.default_factory is not dataclasses.MISSING:
            continue
        value = zero_value(inspect_type(hints.get(f.name, f.type)))
        if f.init:
            kwargs[f.name] = value
        else:
            missing.append((f.name, value))
    obj = cls(**kwargs)
    for name, value in missing:
        object.__setattr__(obj, name, value)
    return obj


def narrow_int(value: int, bits: int) -> int:
    """按补码截断到指定位宽"""
    if bits >= 64 or bits <= 0:
        bits = 64
    mask = (1 << bits) - 1
    value &= mask
    if value >> (bits - 1):
        value -= 1 << bits
    return value


def narrow_uint(value: int, bits: int) -> int:
    """截断到无符号位宽"""
    if bits <= 0:
        bits = 64
    return value & ((1 << bits) - 1)


def narrow_float(value: float, bits: int) -> float:
    """float32 字段按单精度舍入，超出范围时变为 ±inf"""
    if bits != 32 or math.isnan(value) or math.isinf(value):
        return value
    try:
        return struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError:
        return math.copysign(math.inf, value)
