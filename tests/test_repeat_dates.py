"""
Test Repeat Shift Dates - weekday selection, ordering and range policy
"""

import os
import sys
import unittest
from datetime import date, timedelta

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from hurecore.coreutils.errors import InvalidRange, InvalidWeekdaySelection
from hurecore.scheduling.repeat_dates import (
    generate_repeat_dates,
    plan_repeat_shifts,
    week_bounds,
    weekday_index,
)


def test_weekday_index_uses_sunday_as_zero():
    assert weekday_index(date(2025, 1, 12)) == 0  # Sunday
    assert weekday_index(date(2025, 1, 6)) == 1  # Monday
    assert weekday_index(date(2025, 1, 11)) == 6  # Saturday


def test_monday_wednesday_in_one_week():
    print("🧪 Testing Mon/Wed repeat over one week...")

    dates = generate_repeat_dates(date(2025, 1, 6), date(2025, 1, 12), {1, 3})

    # 2025-01-12 is a Sunday, so it is not selected
    assert dates == [date(2025, 1, 6), date(2025, 1, 8)], dates

    print(f"✅ Generated {len(dates)} dates: {[d.isoformat() for d in dates]}")


def test_start_date_always_included():
    dates = generate_repeat_dates("2025-01-07", "2025-01-20", [1])

    assert dates[0] == date(2025, 1, 7)  # Tuesday, not selected
    assert dates == [date(2025, 1, 7), date(2025, 1, 13), date(2025, 1, 20)]


def test_end_date_is_inclusive():
    dates = generate_repeat_dates("2025-01-06", "2025-01-12", [0])
    assert dates[-1] == date(2025, 1, 12)


def test_single_day_range():
    assert generate_repeat_dates("2025-03-01", "2025-03-01", [1]) == [date(2025, 3, 1)]


def test_output_strictly_increasing_and_selected():
    print("🧪 Testing ordering and weekday membership over a quarter...")

    selected = {0, 2, 5}
    start = date(2025, 1, 1)
    dates = generate_repeat_dates(start, date(2025, 3, 31), selected)

    for earlier, later in zip(dates, dates[1:]):
        assert earlier < later, f"{earlier} !< {later}"
    assert len(dates) == len(set(dates))
    for day in dates[1:]:
        assert weekday_index(day) in selected, f"{day} not in selection"
    assert dates[0] == start

    print(f"✅ {len(dates)} dates strictly increasing and on selected weekdays")


def test_every_day_selected_covers_whole_range():
    dates = generate_repeat_dates("2025-01-01", "2025-01-31", range(7))
    assert len(dates) == 31
    assert dates == [date(2025, 1, 1) + timedelta(days=i) for i in range(31)]


def test_plan_repeat_shifts_copies_template():
    template = {
        "location_id": "loc-1",
        "date": "2025-01-06",
        "start_time": "08:00",
        "end_time": "17:00",
        "role_required": "Nurse",
        "staff_needed": 2,
    }
    shifts = plan_repeat_shifts(template, "2025-01-12", [1, 3, 5])

    assert [s["date"] for s in shifts] == ["2025-01-06", "2025-01-08", "2025-01-10"]
    assert all(s["role_required"] == "Nurse" for s in shifts)
    assert template["date"] == "2025-01-06"


def test_week_bounds_monday_to_sunday():
    assert week_bounds("2025-01-12") == (date(2025, 1, 6), date(2025, 1, 12))
    assert week_bounds(date(2025, 1, 6)) == (date(2025, 1, 6), date(2025, 1, 12))
    assert week_bounds("2025-01-09") == (date(2025, 1, 6), date(2025, 1, 12))


class TestRepeatDateErrors(unittest.TestCase):
    def test_end_before_start_raises(self):
        with self.assertRaises(InvalidRange):
            generate_repeat_dates("2025-01-12", "2025-01-06", [1])

    def test_empty_selection_raises(self):
        with self.assertRaises(InvalidWeekdaySelection):
            generate_repeat_dates("2025-01-06", "2025-01-12", [])

    def test_out_of_range_weekday_raises(self):
        with self.assertRaises(InvalidWeekdaySelection):
            generate_repeat_dates("2025-01-06", "2025-01-12", [1, 7])

    def test_booleans_are_not_weekdays(self):
        with self.assertRaises(InvalidWeekdaySelection):
            generate_repeat_dates("2025-01-06", "2025-01-12", [True])
        with self.assertRaises(InvalidWeekdaySelection):
            generate_repeat_dates("2025-01-06", "2025-01-12", [3, False])

    def test_unparseable_date_raises(self):
        with self.assertRaises(ValueError):
            generate_repeat_dates("not-a-date", "2025-01-12", [1])


if __name__ == "__main__":
    unittest.main()
