"""
Filler 引擎：规则解析 + 组合类型递归

一次填充流程：
1. enumerate_fields 展开当前层字段
2. is_empty 过滤掉已设置的字段（引擎只补值，不覆盖）
3. resolve 按 字段名 → 类型标识 → 类别 的顺序选出唯一的填充函数
4. 组合类型（struct / 指针 / list）的规则再回到第 1 步处理子结构

RuleTable 每种模式构造一次，之后只读；FieldData 每次遍历现建现弃。
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping

from fieldfill.engine.emptiness import COMPOSITE_ELEMS, is_empty
from fieldfill.engine.fields import CellSlot, FieldData, ItemSlot, enumerate_fields, is_record
from fieldfill.engine.kinds import SCALAR_KINDS, Kind, TypeInfo, type_hash, zero_value
from fieldfill.errors import NotARecordError
from fieldfill.observability.logging_config import get_logger

log = get_logger(__name__)

FillerFunc = Callable[["Filler", FieldData], None]

# 形如 [1,2,3,4]
_BRACKET_RE = re.compile(r"\[(.*)\]", re.DOTALL)


@dataclass(frozen=True)
class RuleTable:
    """一种模式（defaults / factory）的填充函数表"""

    tag: str  # 注解键名
    by_name: Mapping[str, FillerFunc] = field(default_factory=dict)
    by_type: Mapping[str, FillerFunc] = field(default_factory=dict)
    by_kind: Mapping[Kind, FillerFunc] = field(default_factory=dict)

    def __post_init__(self):
        # 构造完成后只读
        object.__setattr__(self, "by_name", MappingProxyType(dict(self.by_name)))
        object.__setattr__(self, "by_type", MappingProxyType(dict(self.by_type)))
        object.__setattr__(self, "by_kind", MappingProxyType(dict(self.by_kind)))


class Filler:
    """按 RuleTable 填充记录中的空字段"""

    def __init__(self, table: RuleTable):
        self.table = table

    @property
    def tag(self) -> str:
        return self.table.tag

    def fill(self, record: Any) -> None:
        """
        原地填充记录的空字段。

        Raises:
            NotARecordError: record 不是 dataclass 实例或 pydantic 模型实例
        """
        if not is_record(record):
            raise NotARecordError(record)
        filled = self.fill_record(record)
        log.debug("记录填充完成", record=type(record).__name__, tag=self.tag, filled=filled)

    def fill_record(self, record: Any) -> int:
        """填充一条记录（供 struct 规则递归调用），返回本层被处理的字段数"""
        return self.fill_fields(enumerate_fields(record, self.tag))

    def fill_fields(self, fields: Iterable[FieldData]) -> int:
        count = 0
        for fd in fields:
            if is_empty(fd) and self.apply(fd):
                count += 1
        return count

    def resolve(self, fd: FieldData) -> FillerFunc | None:
        """字段名 → 类型标识（剥一层指针）→ 类别，先命中者生效"""
        if fd.name:
            fn = self.table.by_name.get(fd.name)
            if fn is not None:
                return fn
        fn = self.table.by_type.get(type_hash(fd.type))
        if fn is not None:
            return fn
        return self.table.by_kind.get(fd.type.kind)

    def apply(self, fd: FieldData) -> bool:
        """执行选中的填充函数；三层都未命中时什么也不做"""
        fn = self.resolve(fd)
        if fn is None:
            return False
        fn(self, fd)
        return True

    def kind_rule(self, info: TypeInfo) -> FillerFunc | None:
        """按类别取规则；OTHER 类别没有类别规则，退回按类型标识取"""
        if info.kind is Kind.OTHER:
            return self.table.by_type.get(type_hash(info))
        return self.table.by_kind.get(info.kind)

    def dispatch_kind(self, fd: FieldData) -> None:
        """只按类别分发，用于指针指向值和 list 元素"""
        fn = self.kind_rule(fd.type)
        if fn is not None:
            fn(self, fd)


# ── 组合类型规则（defaults / factory 共用） ──


def fill_struct(filler: Filler, fd: FieldData) -> None:
    """递归填充嵌套记录，无论该字段本身是否带注解"""
    record = fd.value
    if record is None:
        record = zero_value(fd.type)
        fd.set(record)
    if is_record(record):
        filler.fill_record(record)


def fill_pointer(filler: Filler, fd: FieldData) -> None:
    """
    Optional[T] 字段。

    - None 且指向标量、又没有注解：保持 None
    - None：先构造 T 的零值，按 T 的类别填充（继承原注解），再写回
    - 非 None：视为已设置；仅对 struct 及元素为 struct/指针 的 list 继续向下递归
    """
    elem = fd.type.elem
    if elem is None or elem.kind is Kind.OTHER:
        return

    if fd.value is None:
        if elem.kind in SCALAR_KINDS and not fd.tag:
            return
        cell = CellSlot(zero_value(elem))
        filler.dispatch_kind(FieldData(name="", type=elem, tag=fd.tag, slot=cell, parent=fd.parent))
        fd.set(cell.value)
        return

    descend = elem.kind is Kind.STRUCT or (
        elem.kind is Kind.SLICE and elem.elem is not None and elem.elem.kind in COMPOSITE_ELEMS
    )
    if descend:
        filler.dispatch_kind(FieldData(name="", type=elem, tag=fd.tag, slot=fd.slot, parent=fd.parent))


def fill_elements(filler: Filler, fd: FieldData) -> None:
    """逐个处理已有的 struct / 指针元素，从不凭空创建元素"""
    seq = fd.value
    if not seq:
        return
    elem = fd.type.elem
    for i in range(len(seq)):
        filler.dispatch_kind(FieldData(name="", type=elem, tag="", slot=ItemSlot(seq, i), parent=fd.parent))


def fill_bytes(fd: FieldData, data: bytes) -> None:
    """字节序列已分配（哪怕是空的）就不动"""
    if fd.value is not None:
        return
    origin = fd.type.origin
    if origin is bytearray:
        fd.set(bytearray(data))
    elif origin is list:
        fd.set(list(data))
    else:
        fd.set(bytes(data))


def parse_bracket_literal(text: str) -> list[str] | None:
    """
    解析 [a,b,c] 形式的列表字面量，返回各元素的子字面量。

    "[]" 返回空列表；格式不符返回 None。
    按逗号朴素切分：嵌套字面量内部不能再含逗号（[[1],[2]] 可以，[[1,2]] 不行）。
    """
    match = _BRACKET_RE.fullmatch(text)
    if match is None:
        return None
    inner = match.group(1)
    if inner == "":
        return []
    return inner.split(",")


def fill_slice(filler: Filler, fd: FieldData) -> None:
    """list / bytes 字段：按元素类别分别处理"""
    elem = fd.type.elem
    if elem is None:
        return

    if fd.type.is_byte_sequence:
        fill_bytes(fd, fd.tag.encode("utf-8"))
        return

    if elem.kind in COMPOSITE_ELEMS:
        fill_elements(filler, fd)
        return

    items = parse_bracket_literal(fd.tag)
    if items is None:
        if fd.tag:
            log.debug("列表注解格式错误，保持原值", field=fd.name, tag=fd.tag)
        return

    if filler.kind_rule(elem) is None:
        log.debug("列表元素类型没有可用规则，保持原值", field=fd.name, elem=elem.name)
        return

    result = [zero_value(elem) for _ in items]
    for i, text in enumerate(items):
        filler.dispatch_kind(FieldData(name="", type=elem, tag=text, slot=ItemSlot(result, i), parent=fd.parent))
    fd.set(result)
