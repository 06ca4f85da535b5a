"""Paginated time-window fetch engine for Bybit klines."""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, List, Optional

from kline_core.data.feed import Bar, FetchRequest, PageFetcher, TimeWindow
from kline_core.data.intervals import resolve_interval
from kline_core.data.normalize import normalize_page
from kline_core.errors import InvalidWindow, KlineError
from kline_core.utils.timefmt import format_millis

MAX_PAGE_SIZE = 1000
DEFAULT_PACING_DELAY = 0.1

logger = logging.getLogger(__name__)


class Termination(str, Enum):
    """Why a pagination run stopped."""

    EXHAUSTED = "exhausted"
    CAP_REACHED = "cap_reached"
    EMPTY_PAGE = "empty_page"
    NO_PROGRESS = "no_progress"
    ERROR = "error"


@dataclass
class PaginationResult:
    """Outcome of one pagination run."""

    termination: Termination
    bars: List[Bar] = field(default_factory=list)
    pages_fetched: int = 0
    error: Optional[KlineError] = None

    @property
    def ok(self) -> bool:
        return self.termination is not Termination.ERROR

    def raise_for_error(self) -> List[Bar]:
        """Return the bars, or raise the error that aborted the run."""
        if self.error is not None:
            raise self.error
        return self.bars


def _fmt_ms(timestamp: int) -> str:
    return format_millis(timestamp, "%Y-%m-%d %H:%M:%S")


def _dedup_sorted(bars: List[Bar]) -> List[Bar]:
    ordered = sorted(bars, key=lambda bar: bar.start_time)
    unique: List[Bar] = []
    for bar in ordered:
        if unique and unique[-1].start_time == bar.start_time:
            continue
        unique.append(bar)
    return unique


@dataclass
class _RunState:
    current_start: int
    accumulated: List[Bar] = field(default_factory=list)
    pages: int = 0


class PaginationEngine:
    """Drives successive page fetches until the window or the cap is exhausted.

    Only one page request is in flight at a time: each chunk's window is
    computed from the records returned by the previous one.
    """

    def __init__(
        self,
        fetcher: PageFetcher,
        page_size: int = MAX_PAGE_SIZE,
        pacing_delay: float = DEFAULT_PACING_DELAY,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        if not 1 <= page_size <= MAX_PAGE_SIZE:
            raise ValueError(f"page_size must be between 1 and {MAX_PAGE_SIZE}")
        if pacing_delay < 0:
            raise ValueError("pacing_delay must be >= 0")
        self.fetcher = fetcher
        self.page_size = page_size
        self.pacing_delay = pacing_delay
        self._sleep = sleep

    async def fetch(self, request: FetchRequest) -> List[Bar]:
        """Return the full ordered series or raise the error that stopped it."""
        result = await self.paginate(request)
        return result.raise_for_error()

    async def paginate(self, request: FetchRequest) -> PaginationResult:
        """Run the fetch loop, reporting errors as ``Termination.ERROR``.

        Partial results are discarded when an error occurs.
        """
        state = _RunState(current_start=request.window.start)
        try:
            termination = await self._run(request, state)
        except KlineError as exc:
            logger.error(f"Kline fetch for {request.symbol} aborted after {state.pages} pages: {exc}")
            return PaginationResult(Termination.ERROR, [], state.pages, exc)

        bars = _dedup_sorted(state.accumulated)
        logger.info(
            f"Kline fetch for {request.symbol} finished ({termination.value}): "
            f"{len(bars)} records in {state.pages} pages"
        )
        return PaginationResult(termination, bars, state.pages)

    async def _run(self, request: FetchRequest, state: _RunState) -> Termination:
        window = request.window
        if window.start >= window.end:
            raise InvalidWindow(window.start, window.end)
        interval_ms = resolve_interval(request.interval_code)
        max_records = request.max_records
        accumulated = state.accumulated

        while state.current_start < window.end and len(accumulated) < max_records:
            chunk_limit = min(self.page_size, max_records - len(accumulated))
            chunk_end = min(state.current_start + chunk_limit * interval_ms, window.end)
            logger.info(
                f"Fetching data from {_fmt_ms(state.current_start)} to {_fmt_ms(chunk_end)} "
                f"(chunk size: {chunk_limit})..."
            )

            rows = await self.fetcher.fetch_page(
                request.symbol,
                request.interval_code,
                TimeWindow(state.current_start, chunk_end),
                request.category,
                chunk_limit,
            )
            state.pages += 1
            if not rows:
                logger.info("No more data available.")
                return Termination.EMPTY_PAGE

            chunk = sorted(normalize_page(rows), key=lambda bar: bar.start_time)
            chunk = [bar for bar in chunk if bar.start_time in window]
            if accumulated:
                last_time = accumulated[-1].start_time
                chunk = [bar for bar in chunk if bar.start_time > last_time]
            chunk = chunk[: max_records - len(accumulated)]

            accumulated.extend(chunk)
            logger.info(
                f"Retrieved {len(chunk)} records in this chunk. Total so far: {len(accumulated)}"
            )

            if len(accumulated) >= max_records:
                logger.info(f"Reached maximum record limit of {max_records}.")
                return Termination.CAP_REACHED
            if not chunk:
                logger.warning(
                    f"No new records after {_fmt_ms(state.current_start)}; stopping to avoid refetching"
                )
                return Termination.NO_PROGRESS

            state.current_start = accumulated[-1].start_time + interval_ms
            await self._sleep(self.pacing_delay)

        if len(accumulated) >= max_records:
            return Termination.CAP_REACHED
        return Termination.EXHAUSTED
