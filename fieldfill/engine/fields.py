"""
字段枚举器：把一条记录展开为按声明顺序排列的 FieldData 列表

只枚举当前这一层的可写字段，不做递归；
嵌套的 struct / list / Optional 由组合规则在需要时重新调用本模块。

不可写字段（直接跳过，不报错）：
- 以下划线开头的字段（非导出）
- frozen dataclass / frozen pydantic 模型 / frozen pydantic 字段
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from fieldfill.engine.kinds import TypeInfo, inspect_type, resolve_hints


class AttrSlot:
    """记录属性的存储位置"""

    __slots__ = ("owner", "name")

    def __init__(self, owner: Any, name: str):
        self.owner = owner
        self.name = name

    def get(self) -> Any:
        return getattr(self.owner, self.name, None)

    def set(self, value: Any) -> None:
        setattr(self.owner, self.name, value)


class ItemSlot:
    """列表元素的存储位置"""

    __slots__ = ("seq", "index")

    def __init__(self, seq: list, index: int):
        self.seq = seq
        self.index = index

    def get(self) -> Any:
        return self.seq[self.index]

    def set(self, value: Any) -> None:
        self.seq[self.index] = value


class CellSlot:
    """临时存储位置（指针分配时先在这里构造指向值，再整体写回）"""

    __slots__ = ("value",)

    def __init__(self, value: Any = None):
        self.value = value

    def get(self) -> Any:
        return self.value

    def set(self, value: Any) -> None:
        self.value = value


Slot = AttrSlot | ItemSlot | CellSlot


@dataclass
class FieldData:
    """单次遍历中的字段描述，用完即弃"""

    name: str  # 字段名（列表元素、指针指向值为空串）
    type: TypeInfo
    tag: str  # 注解文本，没有注解时为空串
    slot: Slot
    parent: Any = None  # 所属记录，仅在本次遍历中使用

    @property
    def value(self) -> Any:
        return self.slot.get()

    def set(self, value: Any) -> None:
        self.slot.set(value)


def is_record(obj: Any) -> bool:
    """记录实例：dataclass 实例或 pydantic 模型实例（类本身不算）"""
    if isinstance(obj, type):
        return False
    return isinstance(obj, BaseModel) or dataclasses.is_dataclass(obj)


def _tag_text(raw: Any) -> str:
    if raw is None:
        return ""
    return raw if isinstance(raw, str) else str(raw)


def enumerate_fields(record: Any, tag_key: str) -> list[FieldData]:
    """按声明顺序返回记录中所有可写字段的 FieldData"""
    if isinstance(record, BaseModel):
        return _model_fields(record, tag_key)
    return _dataclass_fields(record, tag_key)


def _dataclass_fields(record: Any, tag_key: str) -> list[FieldData]:
    cls = type(record)
    if cls.__dataclass_params__.frozen:
        return []

    hints = resolve_hints(cls)
    results: list[FieldData] = []
    for f in dataclasses.fields(record):
        if f.name.startswith("_"):
            continue
        results.append(
            FieldData(
                name=f.name,
                type=inspect_type(hints.get(f.name, f.type)),
                tag=_tag_text(f.metadata.get(tag_key)),
                slot=AttrSlot(record, f.name),
                parent=record,
            )
        )
    return results


def _model_fields(record: BaseModel, tag_key: str) -> list[FieldData]:
    cls = type(record)
    if cls.model_config.get("frozen"):
        return []

    results: list[FieldData] = []
    for name, info in cls.model_fields.items():
        if name.startswith("_") or info.frozen:
            continue
        extra = info.json_schema_extra if isinstance(info.json_schema_extra, dict) else {}
        results.append(
            FieldData(
                name=name,
                type=inspect_type(info.annotation),
                tag=_tag_text(extra.get(tag_key)),
                slot=AttrSlot(record, name),
                parent=record,
            )
        )
    return results
