"""
CSV Export - Report Rendering

Renders rows into CSV text. Writing the text to disk or sending it over
HTTP is the caller's job (see local_storage).

Quoting rules:
- Headers are always quoted
- Strings are quoted, embedded quotes doubled
- Numbers are written bare
- Missing values become ""
- Anything else is quoted as its string form
"""

from dataclasses import dataclass
from datetime import date
from numbers import Number
from typing import Any, Callable, Mapping, Optional, Sequence, Union
import logging

from hurecore.coreutils.errors import EmptyInput
from hurecore.coreutils.time import to_instant

logger = logging.getLogger(__name__)

Accessor = Union[str, Callable[[Any], Any]]


@dataclass(frozen=True)
class CSVColumn:
    header: str
    accessor: Accessor

    def value(self, row: Any) -> Any:
        if callable(self.accessor):
            return self.accessor(row)
        if isinstance(row, Mapping):
            return row.get(self.accessor)
        return getattr(row, self.accessor, None)


def _quote(text: str) -> str:
    return '"' + text.replace('"', '""') + '"'


def format_csv_value(value: Any) -> str:
    """Render a single cell"""
    if value is None:
        return '""'
    if isinstance(value, str):
        return _quote(value)
    if isinstance(value, Number) and not isinstance(value, bool):
        return str(value)
    return _quote(str(value))


def export_to_csv(rows: Sequence[Any], columns: Sequence[CSVColumn]) -> str:
    """
    Render rows as CSV text

    Args:
        rows: Mappings or objects, in output order
        columns: Column descriptors, in output order

    Returns:
        str: Header line followed by one line per row, joined with newlines

    Raises:
        EmptyInput: if there are no rows
    """
    rows = list(rows)
    if not rows:
        raise EmptyInput()

    header = ",".join(_quote(col.header) for col in columns)
    lines = [header]
    for row in rows:
        lines.append(",".join(format_csv_value(col.value(row)) for col in columns))

    logger.info(f"Rendered {len(rows)} rows x {len(columns)} columns to CSV")
    return "\n".join(lines)


def format_cents_for_csv(cents: Optional[int]) -> str:
    """Cents to a 2-decimal currency string"""
    return f"{(cents or 0) / 100:.2f}"


def format_date_for_csv(value: Any) -> str:
    """dd/mm/yyyy, empty when missing; unparseable strings pass through"""
    if not value:
        return ""
    try:
        return to_instant(value).as_date().strftime("%d/%m/%Y")
    except (ValueError, TypeError):
        return str(value)


def format_datetime_for_csv(value: Any) -> str:
    """dd/mm/yyyy HH:MM in Kenya time, empty when missing"""
    if not value:
        return ""
    try:
        return to_instant(value).as_datetime().strftime("%d/%m/%Y %H:%M")
    except (ValueError, TypeError):
        return str(value)


def export_filename(base: str, day: date) -> str:
    """Download name for an export: {base}_{YYYY-MM-DD}.csv"""
    return f"{base}_{day.isoformat()}.csv"
