"""Tests for barter market-event projection."""

import json
from datetime import datetime, timezone

import pytest

from kline_core.data.feed import Bar, Category
from kline_core.export.barter import Venue, project_bar, project_series, venue_for_category

BAR = Bar(1704067200000, 42000.0, 42100.0, 41900.0, 42050.0, 12.5, 525000.0)
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize(
    "category, venue",
    [
        (Category.SPOT, Venue.BYBIT_SPOT),
        (Category.LINEAR, Venue.BYBIT_PERPETUALS_USD),
        (Category.INVERSE, Venue.BYBIT_PERPETUALS_USD),
        ("linear", Venue.BYBIT_PERPETUALS_USD),
        ("option", Venue.BYBIT_SPOT),
    ],
)
def test_category_venue_mapping(category, venue):
    assert venue_for_category(category) is venue


def test_project_bar_fields():
    event = project_bar(BAR, 900_000, Category.LINEAR, instrument_index=2, now=NOW).event

    assert event.time_exchange == datetime(2024, 1, 1, tzinfo=timezone.utc)
    assert event.time_received == NOW
    assert event.exchange is Venue.BYBIT_PERPETUALS_USD
    assert event.instrument == 2
    candle = event.kind.candle
    assert candle.close_time == datetime(2024, 1, 1, 0, 15, tzinfo=timezone.utc)
    assert (candle.open, candle.high, candle.low, candle.close, candle.volume) == (
        42000.0,
        42100.0,
        41900.0,
        42050.0,
        12.5,
    )
    assert candle.trade_count == 0


def test_close_time_follows_interval_duration():
    event = project_bar(BAR, 86_400_000, Category.SPOT, 0, now=NOW).event
    assert event.kind.candle.close_time == datetime(2024, 1, 2, tzinfo=timezone.utc)


def test_json_line_uses_barter_envelope():
    line = project_bar(BAR, 900_000, Category.SPOT, 1, now=NOW).to_json_line()
    payload = json.loads(line)

    ok = payload["Item"]["Ok"]
    assert ok["exchange"] == "bybit_spot"
    assert ok["instrument"] == 1
    assert ok["time_exchange"].startswith("2024-01-01T00:00:00")
    assert ok["kind"]["Candle"]["trade_count"] == 0
    assert ok["kind"]["Candle"]["close_time"].startswith("2024-01-01T00:15:00")
    assert "\n" not in line


def test_time_received_defaults_to_wall_clock():
    before = datetime.now(timezone.utc)
    event = project_bar(BAR, 60_000, Category.SPOT, 0).event
    after = datetime.now(timezone.utc)
    assert before <= event.time_received <= after


def test_project_series_one_event_per_bar():
    bars = [BAR, Bar(BAR.start_time + 60_000, 1, 2, 0.5, 1.5, 3, 4)]
    events = list(project_series(bars, 60_000, Category.INVERSE, 3))
    assert [event.event.time_exchange for event in events] == [bar.opened_at for bar in bars]
    assert all(event.event.exchange is Venue.BYBIT_PERPETUALS_USD for event in events)
