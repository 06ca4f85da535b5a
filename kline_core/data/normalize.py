"""Conversion of raw Bybit kline rows into typed bars."""

from __future__ import annotations

from typing import Iterable, List

from kline_core.data.feed import Bar, RawRow
from kline_core.errors import MalformedRecord

ROW_FIELDS = ("start_time", "open", "high", "low", "close", "volume", "turnover")


def _parse_start_time(value: str) -> int:
    # Unsigned decimal digits only: no sign, whitespace, underscores or floats.
    if not isinstance(value, str) or not (value.isascii() and value.isdigit()):
        raise MalformedRecord("start_time", value)
    return int(value)


def _parse_float(field: str, value: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise MalformedRecord(field, value) from exc


def normalize_row(row: RawRow) -> Bar:
    """Parse ``[start_time, open, high, low, close, volume, turnover]``.

    Extra trailing fields are ignored. Raises ``MalformedRecord`` naming the
    first field that is missing or does not parse.
    """

    if isinstance(row, (str, bytes)) or not isinstance(row, (list, tuple)):
        raise MalformedRecord("row", row)
    if len(row) < len(ROW_FIELDS):
        raise MalformedRecord(ROW_FIELDS[len(row)])

    start_time = _parse_start_time(row[0])
    values = [_parse_float(name, row[idx]) for idx, name in enumerate(ROW_FIELDS[1:], start=1)]
    return Bar(start_time, *values)


def normalize_page(rows: Iterable[RawRow]) -> List[Bar]:
    return [normalize_row(row) for row in rows]
