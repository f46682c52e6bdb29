"""
factory 模式：用随机的非零值填充空字段，用于构造测试数据

| 类别     | 取值                                      |
|----------|-------------------------------------------|
| bool     | 随机 True / False                         |
| int      | [1, 该位宽最大值]                         |
| uint     | [1, 该位宽最大值]                         |
| float    | (0, 1]                                    |
| str      | 32 位十六进制串（当前时间 + 随机数的 md5）|
| 字节序列 | 同上字符串的字节，仅在未分配时填充        |

Optional 字段不分配；struct 与已有的 struct/指针 list 元素递归填充。
随机源可注入（FIELDFILL_FACTORY_SEED 或 rng 参数），默认共享的随机源不适合并发下的可复现场景。
"""

import hashlib
import random
from datetime import datetime
from functools import lru_cache
from typing import Any, Callable

from fieldfill.config import Settings, get_settings
from fieldfill.engine.fields import FieldData
from fieldfill.engine.filler import Filler, RuleTable, fill_bytes, fill_elements, fill_struct
from fieldfill.engine.kinds import Kind, narrow_float

Clock = Callable[[], datetime]


def random_string(rng: random.Random, clock: Clock = datetime.now) -> str:
    """32 位十六进制串"""
    seed = f"{clock().isoformat()}|{rng.getrandbits(64)}"
    return hashlib.md5(seed.encode("utf-8")).hexdigest()


def build_factory_table(
    tag: str = "factory",
    rng: random.Random | None = None,
    clock: Clock = datetime.now,
) -> RuleTable:
    """构造 factory 模式的规则表"""
    rng = rng or random.Random()

    def _fill_bool(filler: Filler, fd: FieldData) -> None:
        fd.set(rng.random() < 0.5)

    def _fill_int(filler: Filler, fd: FieldData) -> None:
        bits = fd.type.bits or 64
        fd.set(rng.randint(1, (1 << (bits - 1)) - 1))

    def _fill_uint(filler: Filler, fd: FieldData) -> None:
        bits = fd.type.bits or 64
        fd.set(rng.randint(1, (1 << bits) - 1))

    def _fill_float(filler: Filler, fd: FieldData) -> None:
        fd.set(narrow_float(1.0 - rng.random(), fd.type.bits))

    def _fill_string(filler: Filler, fd: FieldData) -> None:
        fd.set(random_string(rng, clock))

    def _fill_slice(filler: Filler, fd: FieldData) -> None:
        if fd.type.is_byte_sequence:
            fill_bytes(fd, random_string(rng, clock).encode("ascii"))
        elif fd.type.elem is not None and fd.type.elem.kind in (Kind.STRUCT, Kind.POINTER):
            fill_elements(filler, fd)

    def _fill_pointer(filler: Filler, fd: FieldData) -> None:
        # 已分配的 struct 指针递归填充，None 保持不动
        if fd.value is not None and fd.type.elem is not None and fd.type.elem.kind is Kind.STRUCT:
            fill_struct(filler, fd)

    return RuleTable(
        tag=tag,
        by_kind={
            Kind.BOOL: _fill_bool,
            Kind.INT: _fill_int,
            Kind.UINT: _fill_uint,
            Kind.FLOAT: _fill_float,
            Kind.STRING: _fill_string,
            Kind.SLICE: _fill_slice,
            Kind.STRUCT: fill_struct,
            Kind.POINTER: _fill_pointer,
        },
    )


def build_factory_filler(
    settings: Settings | None = None,
    rng: random.Random | None = None,
    clock: Clock | None = None,
) -> Filler:
    settings = settings or get_settings()
    if rng is None:
        rng = random.Random(settings.FACTORY_SEED)
    return Filler(build_factory_table(settings.FACTORY_TAG, rng, clock or datetime.now))


@lru_cache
def get_factory_filler() -> Filler:
    """进程级共享实例，首次使用时构造"""
    return build_factory_filler()


def apply_factory(record: Any, *, filler: Filler | None = None) -> None:
    """
    用随机非零值原地填充记录中的空字段，已设置的字段保持不变。

    Raises:
        NotARecordError: record 不是 dataclass 实例或 pydantic 模型实例
    """
    (filler or get_factory_filler()).fill(record)
