"""Projection of kline bars into barter market-stream events."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Iterable, Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field

from kline_core.data.feed import Bar, Category


class Venue(str, Enum):
    """Exchange labels understood by barter."""

    BYBIT_SPOT = "bybit_spot"
    BYBIT_PERPETUALS_USD = "bybit_perpetuals_usd"


# Inverse contracts share the perpetuals label.
CATEGORY_VENUES: dict[Category, Venue] = {
    Category.SPOT: Venue.BYBIT_SPOT,
    Category.LINEAR: Venue.BYBIT_PERPETUALS_USD,
    Category.INVERSE: Venue.BYBIT_PERPETUALS_USD,
}
DEFAULT_VENUE = Venue.BYBIT_SPOT


def venue_for_category(category: Category | str) -> Venue:
    """Map a category to its venue; unrecognized labels get ``DEFAULT_VENUE``."""
    try:
        key = Category(category)
    except ValueError:
        return DEFAULT_VENUE
    return CATEGORY_VENUES.get(key, DEFAULT_VENUE)


class BarterCandle(BaseModel):
    close_time: datetime
    open: float
    high: float
    low: float
    close: float
    volume: float
    trade_count: int = 0


class BarterDataKind(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    candle: BarterCandle = Field(alias="Candle")


class BarterMarketEvent(BaseModel):
    time_exchange: datetime
    time_received: datetime
    exchange: Venue
    instrument: int
    kind: BarterDataKind


class BarterEventResult(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    ok: BarterMarketEvent = Field(alias="Ok")


class BarterStreamEvent(BaseModel):
    """``{"Item": {"Ok": <market event>}}`` envelope consumed by barter backtests."""

    model_config = ConfigDict(populate_by_name=True)

    item: BarterEventResult = Field(alias="Item")

    @property
    def event(self) -> BarterMarketEvent:
        return self.item.ok

    def to_json_line(self) -> str:
        return self.model_dump_json(by_alias=True)


def project_bar(
    bar: Bar,
    interval_ms: int,
    category: Category | str,
    instrument_index: int,
    now: Optional[datetime] = None,
) -> BarterStreamEvent:
    """Build the barter event for one bar.

    ``time_received`` is the projection wall-clock time unless ``now`` is given.
    Bybit klines carry no trade count, so it is always 0.
    """
    opened_at = bar.opened_at
    candle = BarterCandle(
        close_time=opened_at + timedelta(milliseconds=interval_ms),
        open=bar.open,
        high=bar.high,
        low=bar.low,
        close=bar.close,
        volume=bar.volume,
        trade_count=0,
    )
    event = BarterMarketEvent(
        time_exchange=opened_at,
        time_received=now or datetime.now(timezone.utc),
        exchange=venue_for_category(category),
        instrument=instrument_index,
        kind=BarterDataKind(candle=candle),
    )
    return BarterStreamEvent(item=BarterEventResult(ok=event))


def project_series(
    bars: Iterable[Bar],
    interval_ms: int,
    category: Category | str,
    instrument_index: int,
) -> Iterator[BarterStreamEvent]:
    for bar in bars:
        yield project_bar(bar, interval_ms, category, instrument_index)
