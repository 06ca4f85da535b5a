"""pandas views of kline series."""

from __future__ import annotations

from typing import Iterable

import pandas as pd

from kline_core.data.feed import Bar

FRAME_COLUMNS = ["open", "high", "low", "close", "volume", "turnover"]


class DataValidationError(ValueError):
    """Raised when a kline frame breaks series invariants."""


def bars_to_frame(bars: Iterable[Bar]) -> pd.DataFrame:
    """Build a frame indexed by tz-aware UTC ``timestamp``."""

    rows = list(bars)
    if not rows:
        empty = pd.DataFrame(columns=FRAME_COLUMNS, dtype=float)
        empty.index = pd.DatetimeIndex([], tz="UTC", name="timestamp")
        return empty

    frame = pd.DataFrame(
        {
            "timestamp": pd.to_datetime([bar.start_time for bar in rows], unit="ms", utc=True),
            "open": [bar.open for bar in rows],
            "high": [bar.high for bar in rows],
            "low": [bar.low for bar in rows],
            "close": [bar.close for bar in rows],
            "volume": [bar.volume for bar in rows],
            "turnover": [bar.turnover for bar in rows],
        }
    )
    frame.set_index("timestamp", inplace=True)
    return validate_bars(frame)


def validate_bars(frame: pd.DataFrame) -> pd.DataFrame:
    """Ensure the frame is a strictly increasing, complete kline series."""

    missing = set(FRAME_COLUMNS).difference(frame.columns)
    if missing:
        raise DataValidationError(f"Missing required columns: {', '.join(sorted(missing))}")

    if not isinstance(frame.index, pd.DatetimeIndex):
        raise DataValidationError("Bars must be indexed by pandas.DatetimeIndex.")
    if frame.index.tz is None:
        raise DataValidationError("Bars must use timezone-aware timestamps (UTC).")
    if frame.index.has_duplicates:
        raise DataValidationError("Duplicate timestamps detected.")
    if not frame.index.is_monotonic_increasing:
        raise DataValidationError("Timestamps must be strictly increasing.")

    if frame[FRAME_COLUMNS].isna().any().any():
        raise DataValidationError("Detected NA values inside kline frame.")
    if (frame["volume"] < 0).any():
        raise DataValidationError("Volume cannot be negative.")
    if (frame["turnover"] < 0).any():
        raise DataValidationError("Turnover cannot be negative.")

    return frame
