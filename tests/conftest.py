"""Shared fixtures: deterministic in-memory page fetchers."""

from __future__ import annotations

from typing import List, Optional, Sequence

import pytest

from kline_core.data.feed import Category, TimeWindow

MINUTE = 60_000


def make_row(start_time: int, price: float = 100.0) -> list[str]:
    """Bybit-shaped raw row for ``start_time``."""
    return [
        str(start_time),
        f"{price:.2f}",
        f"{price + 2:.2f}",
        f"{price - 1:.2f}",
        f"{price + 1:.2f}",
        "12.5",
        f"{(price + 1) * 12.5:.4f}",
    ]


class GridFetcher:
    """Serves one bar per ``interval_ms`` grid step, newest first like Bybit.

    ``first``/``last`` bound the data the provider has; ``None`` means
    unbounded on that side.
    """

    def __init__(self, interval_ms: int, first: int = 0, last: Optional[int] = None) -> None:
        self.interval_ms = interval_ms
        self.first = first
        self.last = last
        self.calls: List[tuple[TimeWindow, int]] = []
        self.closed = False

    async def fetch_page(
        self,
        symbol: str,
        interval_code: str,
        window: TimeWindow,
        category: Category,
        limit: int,
    ) -> list[list[str]]:
        self.calls.append((window, limit))
        step = self.interval_ms
        ts = max(window.start, self.first)
        if ts % step:
            ts += step - ts % step
        rows = []
        while ts < window.end and len(rows) < limit:
            if self.last is not None and ts > self.last:
                break
            rows.append(make_row(ts, price=100.0 + ts / step))
            ts += step
        return list(reversed(rows))

    def close(self) -> None:
        self.closed = True


class ScriptedFetcher:
    """Replays fixed pages in order, then reports an empty page."""

    def __init__(self, pages: Sequence[Sequence[Sequence[str]]]) -> None:
        self.pages = [list(page) for page in pages]
        self.calls: List[tuple[TimeWindow, int]] = []

    async def fetch_page(self, symbol, interval_code, window, category, limit):
        self.calls.append((window, limit))
        index = len(self.calls) - 1
        if index < len(self.pages):
            return [list(row) for row in self.pages[index]]
        return []


class RecordingSleep:
    def __init__(self) -> None:
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


@pytest.fixture
def sleeper() -> RecordingSleep:
    return RecordingSleep()
