from datetime import date, datetime

import pytest

from lifetracker.core.dates import (
    day_key,
    days_between,
    days_of_month,
    days_of_week,
    parse_day,
    relative_label,
    week_number,
)


def test_parse_day_accepts_common_shapes():
    assert parse_day("2024-01-01T09:00:00") == date(2024, 1, 1)
    assert parse_day(datetime(2024, 1, 1, 23, 30)) == date(2024, 1, 1)
    assert parse_day(date(2024, 1, 1)) == date(2024, 1, 1)
    assert parse_day("") is None
    assert parse_day("yesterday") is None
    assert day_key("2024-02-29T10:00") == "2024-02-29"


def test_days_between_is_absolute():
    assert days_between("2024-01-10", "2024-01-01") == 9
    with pytest.raises(ValueError):
        days_between("nope", "2024-01-01")


def test_week_and_month_helpers():
    week = days_of_week(date(2024, 1, 10))
    assert week[0] == date(2024, 1, 8)
    assert week[-1] == date(2024, 1, 14)
    assert len(days_of_month(date(2024, 2, 3))) == 29
    assert week_number(date(2024, 1, 1)) == 1


@pytest.mark.parametrize(
    "offset,label",
    [(0, "today"), (1, "tomorrow"), (-1, "yesterday"), (3, "in 3 days"), (-4, "4 days ago"), (10, "2024-01-11")],
)
def test_relative_label(offset, label):
    today = date(2024, 1, 1)
    assert relative_label(date.fromordinal(today.toordinal() + offset), today) == label
