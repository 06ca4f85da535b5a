"""Factory helpers to build fetch requests and engines from config."""

from __future__ import annotations

import logging

from kline_core.data.bybit import BybitClient
from kline_core.data.feed import FetchRequest, PageFetcher, TimeWindow
from kline_core.data.pagination import PaginationEngine
from kline_core.utils.config import FetchConfig
from kline_core.utils.timefmt import to_millis

logger = logging.getLogger(__name__)


def build_fetch_request(config: FetchConfig) -> FetchRequest:
    """Validate the window and interval and freeze them into a request.

    Raises:
        InvalidWindow: If start is not before end
        UnsupportedInterval: If the interval code is not a Bybit interval
    """
    return FetchRequest(
        symbol=config.symbol,
        interval_code=config.interval,
        category=config.category,
        max_records=config.max_records,
        window=TimeWindow(to_millis(config.start), to_millis(config.end)),
    )


def build_page_fetcher(config: FetchConfig) -> BybitClient:
    client = BybitClient(testnet=config.testnet, timeout=config.timeout)
    logger.info(f"Using Bybit {'testnet' if config.testnet else 'mainnet'} at {client.base_url}")
    return client


def build_engine(config: FetchConfig, fetcher: PageFetcher | None = None) -> PaginationEngine:
    return PaginationEngine(
        fetcher or build_page_fetcher(config),
        page_size=config.page_size,
        pacing_delay=config.pacing_delay,
    )
