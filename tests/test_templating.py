from datetime import date, datetime

import pytest

from fieldfill.rules.templating import add_date, expand_macros


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("{{date:1,-10,0}}", "2020-08-10"),
        ("{{date:0,0,0}}", "2020-06-10"),
        ("{{date:0,0,-10}}", "2020-05-31"),
        ("{{time:1,-5,10}}", "12:55:10"),
        ("{{date:1,-10,0}} {{time:1,-5,10}}", "2020-08-10 12:55:10"),
        ("from {{date:0,0,-1}} to {{date:0,0,1}}", "from 2020-06-09 to 2020-06-11"),
        ("{{ date : 0, 1, 0 }}", "2020-07-10"),
        ("{{date:,,}}", "2020-06-10"),
        ("plain text", "plain text"),
    ],
)
def test_expand_macros(fixed_now, text, expected):
    assert expand_macros(text, fixed_now) == expected


@pytest.mark.parametrize(
    "text",
    ["{{date:1,2}}", "{{time:1,2,3,4}}", "{{week:1,2,3}}", "{{date:a,b,c}}", "{{date}}"],
)
def test_malformed_macros_are_left_verbatim(fixed_now, text):
    assert expand_macros(text, fixed_now) == text


def test_time_wraps_past_midnight():
    now = datetime(2020, 6, 10, 23, 30, 0)
    assert expand_macros("{{time:1,0,0}}", now) == "00:30:00"


def test_add_date_normalises_month_overflow():
    assert add_date(date(2020, 1, 31), 0, 1, 0) == date(2020, 3, 2)
    assert add_date(date(2021, 1, 31), 0, 1, 0) == date(2021, 3, 3)
    assert add_date(date(2020, 3, 15), 0, -15, 0) == date(2018, 12, 15)


def test_out_of_range_date_is_left_verbatim(fixed_now):
    assert expand_macros("{{date:9000,0,0}}", fixed_now) == "{{date:9000,0,0}}"
