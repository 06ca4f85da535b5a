"""Core data-layer types for kline retrieval."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from typing import Protocol, Sequence

from kline_core.data.intervals import normalize_interval
from kline_core.errors import InvalidWindow

RawRow = Sequence[str]
RawPage = list[list[str]]


class Category(str, Enum):
    """Bybit market segment."""

    SPOT = "spot"
    LINEAR = "linear"
    INVERSE = "inverse"


@dataclass(frozen=True)
class Bar:
    """One OHLCV + turnover observation keyed by its open time."""

    start_time: int
    open: float
    high: float
    low: float
    close: float
    volume: float
    turnover: float

    @property
    def opened_at(self) -> datetime:
        return datetime.fromtimestamp(self.start_time / 1000.0, tz=timezone.utc)


@dataclass(frozen=True)
class TimeWindow:
    """Half-open ``[start, end)`` range in epoch milliseconds."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start >= self.end:
            raise InvalidWindow(self.start, self.end)

    def __contains__(self, timestamp: int) -> bool:
        return self.start <= timestamp < self.end


@dataclass(frozen=True)
class FetchRequest:
    """Normalized, immutable request for one pagination run."""

    symbol: str
    interval_code: str
    category: Category
    max_records: int
    window: TimeWindow

    def __post_init__(self) -> None:
        if self.max_records < 0:
            raise ValueError("max_records must be >= 0")
        object.__setattr__(self, "interval_code", normalize_interval(self.interval_code))
        object.__setattr__(self, "category", Category(self.category))


class PageFetcher(Protocol):
    """Capability that fetches one bounded page of raw kline rows."""

    async def fetch_page(
        self,
        symbol: str,
        interval_code: str,
        window: TimeWindow,
        category: Category,
        limit: int,
    ) -> RawPage:  # pragma: no cover - interface only
        ...
