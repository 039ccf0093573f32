"""
Repeat Shifts - Date Generation

Weekday indices follow the 0 = Sunday ... 6 = Saturday convention used by the
schedule screens.
"""

from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Tuple
import logging

from hurecore.coreutils.errors import InvalidRange, InvalidWeekdaySelection
from hurecore.coreutils.time import to_date

logger = logging.getLogger(__name__)

WEEKDAY_NAMES = ("Sun", "Mon", "Tue", "Wed", "Thu", "Fri", "Sat")


def weekday_index(day: date) -> int:
    """Weekday of a date with Sunday as 0"""
    return (day.weekday() + 1) % 7


def _validate_weekdays(weekdays: Iterable[int]) -> set:
    selected = set(weekdays)
    if not selected:
        raise InvalidWeekdaySelection("Select at least one weekday to repeat on")
    invalid = sorted(
        (
            d
            for d in selected
            if isinstance(d, bool) or not isinstance(d, int) or not 0 <= d <= 6
        ),
        key=str,
    )
    if invalid:
        raise InvalidWeekdaySelection(f"Weekday indices must be 0-6, got {invalid}")
    return selected


def generate_repeat_dates(start: Any, end: Any, weekdays: Iterable[int]) -> List[date]:
    """
    Generate the dates a repeating shift falls on

    The start date is always included. Every later day up to and including
    the end date is added when its weekday is selected.

    Args:
        start: First shift date (date or YYYY-MM-DD)
        end: Last date to consider, inclusive (date or YYYY-MM-DD)
        weekdays: Weekday indices, 0 = Sunday

    Returns:
        List[date]: Strictly increasing dates

    Raises:
        InvalidRange: if end is before start
        InvalidWeekdaySelection: if no weekday is selected or one is out of range
    """
    start_date = to_date(start)
    end_date = to_date(end)
    selected = _validate_weekdays(weekdays)

    if end_date < start_date:
        raise InvalidRange(f"End date {end_date} is before start date {start_date}")

    dates = [start_date]
    current = start_date + timedelta(days=1)
    while current <= end_date:
        if weekday_index(current) in selected:
            dates.append(current)
        current += timedelta(days=1)

    logger.debug(f"Generated {len(dates)} repeat dates from {start_date} to {end_date}")
    return dates


def plan_repeat_shifts(
    template: Dict[str, Any], end: Any, weekdays: Iterable[int]
) -> List[Dict[str, Any]]:
    """
    Expand a shift template into one payload per repeat date

    Args:
        template: Shift fields including its first ``date``
        end: Last date to repeat to, inclusive
        weekdays: Weekday indices, 0 = Sunday

    Returns:
        List[Dict]: Copies of the template with ``date`` set to YYYY-MM-DD
    """
    dates = generate_repeat_dates(template["date"], end, weekdays)
    return [{**template, "date": day.isoformat()} for day in dates]


def week_bounds(day: Any) -> Tuple[date, date]:
    """Monday and Sunday of the week containing day; Sunday closes its week"""
    current = to_date(day)
    monday = current - timedelta(days=current.weekday())
    return monday, monday + timedelta(days=6)
