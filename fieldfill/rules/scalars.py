"""
标量注解解析：宽松解析，失败时退回零值

| 类别   | 接受的写法                                        | 失败时 |
|--------|---------------------------------------------------|--------|
| bool   | 1 t T TRUE true True / 0 f F FALSE false False    | False  |
| int    | 十进制，可带 +/-，按 64 位解析（越界取边界值）    | 0      |
| uint   | 十进制，可带 +，按 64 位解析（越界取最大值）      | 0      |
| float  | 十进制小数 / 科学计数 / inf / nan                 | 0.0    |
| 时长   | 1h2m3.5s、300ms 等                                | 0      |

窄化到字段实际位宽由 kinds.narrow_* 负责。
"""

import re
from datetime import timedelta

from fieldfill.observability.logging_config import get_logger

log = get_logger(__name__)

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
UINT64_MAX = (1 << 64) - 1

_TRUE = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE = frozenset({"0", "f", "F", "FALSE", "false", "False"})

_INT_RE = re.compile(r"[+-]?\d+")
_UINT_RE = re.compile(r"\+?\d+")
_FLOAT_RE = re.compile(
    r"[+-]?(?:(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?|inf(?:inity)?|nan)",
    re.IGNORECASE,
)
_DURATION_PART_RE = re.compile(r"(\d*\.?\d*)(ns|us|µs|μs|ms|s|m|h)")

_DURATION_UNITS_US = {
    "ns": 0.001,
    "us": 1,
    "µs": 1,
    "μs": 1,
    "ms": 1000,
    "s": 1_000_000,
    "m": 60_000_000,
    "h": 3_600_000_000,
}


def _fallback(kind: str, text: str, zero):
    if text:
        log.debug("注解解析失败，按零值处理", kind=kind, text=text)
    return zero


def parse_bool(text: str) -> bool:
    if text in _TRUE:
        return True
    if text in _FALSE:
        return False
    return _fallback("bool", text, False)


def _clamp_decimal(text: str, low: int, high: int) -> int:
    """十进制串按 64 位取值，越界取边界值；超长数字串不交给 int() 转换"""
    negative = text.startswith("-")
    digits = text.lstrip("+-").lstrip("0")
    if len(digits) > 20:
        return low if negative else high
    value = int(digits) if digits else 0
    return max(low, min(high, -value if negative else value))


def parse_int(text: str) -> int:
    if not _INT_RE.fullmatch(text):
        return _fallback("int", text, 0)
    return _clamp_decimal(text, INT64_MIN, INT64_MAX)


def parse_uint(text: str) -> int:
    if not _UINT_RE.fullmatch(text):
        return _fallback("uint", text, 0)
    return _clamp_decimal(text, 0, UINT64_MAX)


def parse_float(text: str) -> float:
    if not _FLOAT_RE.fullmatch(text):
        return _fallback("float", text, 0.0)
    return float(text)


def parse_duration(text: str) -> timedelta:
    """解析 1h2m3.5s 形式的时长字符串，单位必填（单独的 0 除外）"""
    if text in ("0", "+0", "-0"):
        return timedelta(0)

    sign = 1
    body = text
    if body[:1] in ("+", "-"):
        sign = -1 if body[0] == "-" else 1
        body = body[1:]

    total_us = 0.0
    pos = 0
    for match in _DURATION_PART_RE.finditer(body):
        number = match.group(1)
        if match.start() != pos or number in ("", "."):
            return _fallback("duration", text, timedelta(0))
        total_us += float(number) * _DURATION_UNITS_US[match.group(2)]
        pos = match.end()

    if not body or pos != len(body):
        return _fallback("duration", text, timedelta(0))
    return timedelta(microseconds=sign * total_us)
