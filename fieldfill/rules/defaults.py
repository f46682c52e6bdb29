"""
defaults 模式：把字段注解文本解析为字面量，填入空字段

用法：

    @dataclass
    class Example:
        enabled: bool = field(default=False, metadata={"default": "true"})
        retries: Int8 = field(default=0, metadata={"default": "3"})
        timeout: timedelta = field(default=timedelta(0), metadata={"default": "1m30s"})
        tags: list[str] = field(default_factory=list, metadata={"default": "[a,b]"})
        created: str = field(default="", metadata={"default": "{{date:0,0,-1}}"})

    apply_defaults(Example())
"""

from datetime import datetime, timedelta
from functools import lru_cache
from typing import Any, Callable

from fieldfill.config import Settings, get_settings
from fieldfill.engine.fields import FieldData
from fieldfill.engine.filler import Filler, RuleTable, fill_pointer, fill_slice, fill_struct
from fieldfill.engine.kinds import Kind, inspect_type, narrow_float, narrow_int, narrow_uint
from fieldfill.rules.scalars import parse_bool, parse_duration, parse_float, parse_int, parse_uint
from fieldfill.rules.templating import expand_macros

Clock = Callable[[], datetime]

TIMEDELTA_TYPE = inspect_type(timedelta).name


def _fill_bool(filler: Filler, fd: FieldData) -> None:
    fd.set(parse_bool(fd.tag))


def _fill_int(filler: Filler, fd: FieldData) -> None:
    fd.set(narrow_int(parse_int(fd.tag), fd.type.bits))


def _fill_uint(filler: Filler, fd: FieldData) -> None:
    fd.set(narrow_uint(parse_uint(fd.tag), fd.type.bits))


def _fill_float(filler: Filler, fd: FieldData) -> None:
    fd.set(narrow_float(parse_float(fd.tag), fd.type.bits))


def _fill_timedelta(filler: Filler, fd: FieldData) -> None:
    """timedelta 及 Optional[timedelta]；按类型命中时不经过指针规则，这里自行判断是否已设置"""
    if fd.value:
        return
    if fd.type.kind is Kind.POINTER and not fd.tag:
        return
    fd.set(parse_duration(fd.tag))


def build_defaults_table(tag: str = "default", clock: Clock = datetime.now) -> RuleTable:
    """构造 defaults 模式的规则表"""

    def _fill_string(filler: Filler, fd: FieldData) -> None:
        fd.set(expand_macros(fd.tag, clock()))

    return RuleTable(
        tag=tag,
        by_type={TIMEDELTA_TYPE: _fill_timedelta},
        by_kind={
            Kind.BOOL: _fill_bool,
            Kind.INT: _fill_int,
            Kind.UINT: _fill_uint,
            Kind.FLOAT: _fill_float,
            Kind.STRING: _fill_string,
            Kind.STRUCT: fill_struct,
            Kind.POINTER: fill_pointer,
            Kind.SLICE: fill_slice,
        },
    )


def build_defaults_filler(settings: Settings | None = None, clock: Clock | None = None) -> Filler:
    settings = settings or get_settings()
    return Filler(build_defaults_table(settings.DEFAULTS_TAG, clock or datetime.now))


@lru_cache
def get_defaults_filler() -> Filler:
    """进程级共享实例，首次使用时构造"""
    return build_defaults_filler()


def apply_defaults(record: Any, *, filler: Filler | None = None) -> None:
    """
    按 defaults 注解原地填充记录中的空字段，已设置的字段保持不变。

    Raises:
        NotARecordError: record 不是 dataclass 实例或 pydantic 模型实例
    """
    (filler or get_defaults_filler()).fill(record)
