"""Date parsing and epoch-millisecond helpers."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any

DATE_FORMAT = "%Y/%m/%d"


def parse_date(value: Any) -> datetime:
    """Parse ``YYYY/MM/DD``, ISO date/datetime strings or date objects as UTC.

    Naive values are interpreted as UTC midnight / UTC wall time.
    """
    if isinstance(value, datetime):
        dt_value = value
    elif isinstance(value, date):
        dt_value = datetime(value.year, value.month, value.day)
    else:
        text = str(value).strip()
        try:
            dt_value = datetime.strptime(text, DATE_FORMAT)
        except ValueError:
            try:
                dt_value = datetime.fromisoformat(text)
            except ValueError as exc:
                raise ValueError(f"Invalid date format '{text}': expected YYYY/MM/DD or ISO 8601") from exc
    if dt_value.tzinfo is None:
        return dt_value.replace(tzinfo=timezone.utc)
    return dt_value.astimezone(timezone.utc)


def to_millis(value: datetime) -> int:
    return int(parse_date(value).timestamp() * 1000)


def format_millis(timestamp: int, fmt: str = "%Y-%m-%d %H:%M:%S UTC") -> str:
    dt_value = datetime.fromtimestamp(timestamp / 1000.0, tz=timezone.utc)
    return dt_value.strftime(fmt)
