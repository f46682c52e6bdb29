"""
空值判定：字段当前值是否为其类型的“零值”，只有零值字段才会被填充

| 类别            | 视为空                          |
|-----------------|---------------------------------|
| bool            | False                           |
| int / uint      | 0                               |
| float           | 0.0（不做误差容忍）             |
| str             | ""                              |
| 字节序列        | None（已分配的 b"" 视为已设置） |
| 其他 list       | 长度为 0                        |
| struct / 指针   | 总是处理（由组合规则自行判断）  |
| 元素为 struct / 指针的 list | 总是处理（逐个元素递归）|
| 其他类型        | None 或假值                     |

标量与列表字段当前值为 None 时同样视为空。
"""

from fieldfill.engine.fields import FieldData
from fieldfill.engine.kinds import Kind

COMPOSITE_ELEMS = (Kind.STRUCT, Kind.POINTER)


def is_empty(field: FieldData) -> bool:
    """判定字段是否可以被填充"""
    kind = field.type.kind
    value = field.value

    if kind in (Kind.STRUCT, Kind.POINTER):
        return True
    if kind is Kind.SLICE and field.type.elem is not None and field.type.elem.kind in COMPOSITE_ELEMS:
        return True
    if value is None:
        return True

    if kind is Kind.BOOL:
        return value is False or value == 0
    if kind in (Kind.INT, Kind.UINT):
        return value == 0
    if kind is Kind.FLOAT:
        return value == 0.0
    if kind is Kind.STRING:
        return value == ""
    if kind is Kind.SLICE:
        if field.type.is_byte_sequence:
            # 字节序列只看是否已分配
            return False
        return len(value) == 0
    return not value
