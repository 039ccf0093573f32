"""
Time Handling - Boundary Normalization and Kenya Display Formats

Stored timestamps arrive in several shapes (native datetimes, ISO strings,
epoch numbers, document-store timestamp objects carrying ``seconds``). They are
normalized here into a single tagged ``Instant`` before any calculation sees
them. Display helpers render the dd/mm/yyyy formats used in Kenya.
"""

from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any, Optional, Union
from zoneinfo import ZoneInfo
import re

from hurecore.coreutils.env import TIMEZONE
from hurecore.coreutils.errors import InvalidDate

KENYA_TZ = ZoneInfo(TIMEZONE)

_ISO_DATE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_HH_MM = re.compile(r"^\d{1,2}:\d{2}$")
_HH_MM_SS = re.compile(r"^\d{1,2}:\d{2}:\d{2}$")

# epoch values above this are taken to be milliseconds
_MILLISECONDS_THRESHOLD = 100_000_000_000


@dataclass(frozen=True)
class Instant:
    """A boundary timestamp tagged as either a calendar date or a zoned datetime"""

    kind: str  # "date" or "datetime"
    value: Union[date, datetime]

    def as_date(self) -> date:
        if self.kind == "date":
            return self.value
        return self.value.astimezone(KENYA_TZ).date()

    def as_datetime(self) -> datetime:
        if self.kind == "datetime":
            return self.value.astimezone(KENYA_TZ)
        return datetime(
            self.value.year, self.value.month, self.value.day, 12, tzinfo=KENYA_TZ
        )


def _from_epoch(seconds: float, nanoseconds: float = 0) -> Instant:
    return Instant(
        "datetime",
        datetime.fromtimestamp(seconds + nanoseconds / 1e9, tz=timezone.utc),
    )


def to_instant(value: Any) -> Optional[Instant]:
    """
    Normalize a raw timestamp value into an Instant

    Args:
        value: datetime, date, ISO string, epoch seconds/milliseconds, or an
            object/dict exposing ``seconds`` (and optionally ``nanoseconds``)

    Returns:
        Instant, or None for None/empty input

    Raises:
        InvalidDate: if the value cannot be interpreted as a timestamp
    """
    if value is None or value == "":
        return None

    if isinstance(value, Instant):
        return value

    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=KENYA_TZ)
        return Instant("datetime", value)

    if isinstance(value, date):
        return Instant("date", value)

    if isinstance(value, bool):
        raise InvalidDate(f"Cannot interpret {value!r} as a timestamp")

    if isinstance(value, (int, float)):
        if abs(value) >= _MILLISECONDS_THRESHOLD:
            return _from_epoch(value / 1000)
        return _from_epoch(value)

    if isinstance(value, str):
        text = value.strip()
        try:
            if _ISO_DATE.match(text):
                return Instant("date", date.fromisoformat(text))
            if text.endswith("Z"):
                text = text[:-1] + "+00:00"
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise InvalidDate(f"Cannot interpret {value!r} as a date: {e}") from e
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=KENYA_TZ)
        return Instant("datetime", parsed)

    if isinstance(value, dict) and "seconds" in value:
        return _from_epoch(value["seconds"], value.get("nanoseconds", 0))

    if hasattr(value, "seconds"):
        return _from_epoch(value.seconds, getattr(value, "nanoseconds", 0))

    raise InvalidDate(f"Cannot interpret {value!r} as a timestamp")


def to_date(value: Any) -> date:
    """Normalize a boundary value to a calendar date in Kenya time"""
    instant = to_instant(value)
    if instant is None:
        raise InvalidDate("A date is required")
    return instant.as_date()


def today_ke() -> date:
    """Today's date in Kenya time, independent of the host timezone"""
    return datetime.now(KENYA_TZ).date()


def _safe_instant(value: Any) -> Optional[Instant]:
    try:
        return to_instant(value)
    except (ValueError, TypeError, OverflowError):
        return None


def format_date_ke(value: Any) -> str:
    """Format as dd/mm/yyyy (e.g. 18/01/2026), '-' when missing or invalid"""
    instant = _safe_instant(value)
    if instant is None:
        return "-"
    return instant.as_date().strftime("%d/%m/%Y")


def format_datetime_ke(value: Any) -> str:
    """Format as dd/mm/yyyy HH:MM in Kenya time"""
    instant = _safe_instant(value)
    if instant is None:
        return "-"
    return instant.as_datetime().strftime("%d/%m/%Y %H:%M")


def format_time_ke(value: Any) -> str:
    """Format as HH:MM; plain clock strings pass through"""
    if isinstance(value, str):
        if _HH_MM.match(value):
            return value
        if _HH_MM_SS.match(value):
            return value[: value.rfind(":")]
    instant = _safe_instant(value)
    if instant is None:
        return "-"
    return instant.as_datetime().strftime("%H:%M")


def format_date_with_day_ke(value: Any) -> str:
    """Format with short weekday (e.g. Sat, 18/01/2026)"""
    instant = _safe_instant(value)
    if instant is None:
        return "-"
    return instant.as_date().strftime("%a, %d/%m/%Y")


def format_date_long_ke(value: Any) -> str:
    """Format with short month name (e.g. 18 Jan 2026)"""
    instant = _safe_instant(value)
    if instant is None:
        return "-"
    day = instant.as_date()
    return f"{day.day} {day.strftime('%b %Y')}"


def format_date_full_ke(value: Any) -> str:
    """Format with full weekday and month (e.g. Saturday, 18 January 2026)"""
    instant = _safe_instant(value)
    if instant is None:
        return "-"
    day = instant.as_date()
    return f"{day.strftime('%A')}, {day.day} {day.strftime('%B %Y')}"


def format_month_year_ke(value: Any) -> str:
    """Format month and year (e.g. January 2026)"""
    instant = _safe_instant(value)
    if instant is None:
        return "-"
    return instant.as_date().strftime("%B %Y")
