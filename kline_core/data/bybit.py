"""Bybit v5 kline transport."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

import requests

from kline_core.data.feed import Category, RawPage, TimeWindow
from kline_core.data.pagination import MAX_PAGE_SIZE
from kline_core.errors import DomainRejection, TransportFailure

MAINNET_URL = "https://api.bybit.com"
TESTNET_URL = "https://api-testnet.bybit.com"

logger = logging.getLogger(__name__)


class BybitClient:
    """Thin wrapper around the Bybit v5 ``/market/kline`` endpoint.

    Requests are blocking; ``fetch_page`` runs them in a worker thread so the
    pagination engine's event loop is free while a page is outstanding.
    """

    KLINE_PATH = "/v5/market/kline"

    def __init__(
        self,
        testnet: bool = False,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
        base_url: Optional[str] = None,
    ) -> None:
        self.testnet = testnet
        self.base_url = base_url or (TESTNET_URL if testnet else MAINNET_URL)
        self.timeout = timeout
        self.session = session or requests.Session()

    @property
    def kline_url(self) -> str:
        return f"{self.base_url}{self.KLINE_PATH}"

    def get_kline_page(
        self,
        symbol: str,
        interval: str,
        start_ms: int,
        end_ms: int,
        category: Category | str = Category.LINEAR,
        limit: int = MAX_PAGE_SIZE,
    ) -> RawPage:
        """Fetch one page of raw kline rows, newest first as Bybit returns them."""

        if not 1 <= limit <= MAX_PAGE_SIZE:
            raise ValueError(f"limit must be between 1 and {MAX_PAGE_SIZE}")
        params = {
            "category": Category(category).value,
            "symbol": symbol,
            "interval": interval,
            "start": start_ms,
            "end": end_ms,
            "limit": limit,
        }
        try:
            resp = self.session.get(self.kline_url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
        except requests.RequestException as exc:
            raise TransportFailure(f"HTTP request failed: {exc}") from exc
        except ValueError as exc:
            raise TransportFailure(f"JSON parsing failed: {exc}") from exc

        return self._extract_rows(payload)

    async def fetch_page(
        self,
        symbol: str,
        interval_code: str,
        window: TimeWindow,
        category: Category,
        limit: int,
    ) -> RawPage:
        # Bybit treats "end" as inclusive; the window is half-open.
        return await asyncio.to_thread(
            self.get_kline_page,
            symbol,
            interval_code,
            window.start,
            window.end - 1,
            category,
            limit,
        )

    def close(self) -> None:
        self.session.close()

    @staticmethod
    def _extract_rows(payload: Any) -> RawPage:
        if not isinstance(payload, dict):
            raise TransportFailure(f"Unexpected response payload: {payload!r}")
        ret_code = payload.get("retCode")
        if ret_code != 0:
            message = payload.get("retMsg") or "Unknown error"
            logger.error(f"Bybit kline request rejected: code={ret_code}, msg={message}")
            raise DomainRejection(message, ret_code)

        result = payload.get("result")
        if not result or not isinstance(result, dict):
            raise DomainRejection("No result data", ret_code)
        rows = result.get("list") or []
        if not isinstance(rows, list):
            raise DomainRejection(f"Unexpected kline list: {rows!r}", ret_code)
        return rows
