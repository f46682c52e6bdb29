"""
字符串注解中的日期/时间宏展开

- {{date:y,m,d}} → 当前日期加 y 年 m 月 d 天，格式 YYYY-MM-DD
- {{time:h,m,s}} → 当前时间加 h 时 m 分 s 秒，格式 HH:MM:SS（24 小时制）

同一字符串中的多个宏共用同一个“当前时刻”，从左到右依次展开。
参数个数不对、类型不是 date/time 的宏原样保留。
"""

import re
from datetime import date, datetime, timedelta

# 参数允许为空（按 0 处理），与宏名一起在回调中再校验
_MACRO_RE = re.compile(r"\{\{\s*(\w+)\s*:([^{}]*)\}\}")
_ARG_RE = re.compile(r"\s*(-?)(\d*)\s*")


def add_date(day: date, years: int, months: int, days: int) -> date:
    """
    日期加减，月末溢出顺延到下个月（1 月 31 日加 1 个月 → 3 月 2/3 日）。
    """
    month_index = day.month - 1 + months
    year = day.year + years + month_index // 12
    month = month_index % 12 + 1
    first = date(year, month, 1)
    return first + timedelta(days=day.day - 1 + days)


def _parse_args(raw: str) -> tuple[int, int, int] | None:
    parts = raw.split(",")
    if len(parts) != 3:
        return None
    values = []
    for part in parts:
        match = _ARG_RE.fullmatch(part)
        if match is None:
            return None
        sign, digits = match.groups()
        value = int(digits) if digits else 0
        values.append(-value if sign else value)
    return values[0], values[1], values[2]


def expand_macros(text: str, now: datetime) -> str:
    """展开 text 中所有 date/time 宏"""
    if "{{" not in text:
        return text

    def _replace(match: re.Match) -> str:
        kind = match.group(1)
        args = _parse_args(match.group(2))
        if args is None:
            return match.group(0)
        a, b, c = args
        try:
            if kind == "date":
                return add_date(now.date(), a, b, c).strftime("%Y-%m-%d")
            if kind == "time":
                return (now + timedelta(hours=a, minutes=b, seconds=c)).strftime("%H:%M:%S")
        except (ValueError, OverflowError):
            # 超出 datetime 可表示范围，保留原文
            pass
        return match.group(0)

    return _MACRO_RE.sub(_replace, text)
