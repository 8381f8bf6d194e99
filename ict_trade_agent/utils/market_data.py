# -*- coding: utf-8 -*-
from __future__ import annotations

"""
CoinGecko market data: top-N snapshots and recent price history.

Both endpoints are called once per request (no retries, no caching). Any
non-2xx answer or network failure surfaces as TransportError so callers
decide whether it is fatal for the scan or only for one coin.
"""

import os
import time
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pandas as pd
import requests

from .errors import TransportError
from .logger import get_logger

LOGGER = get_logger(__name__)

FREE_API_URL = "https://api.coingecko.com/api/v3"
PRO_API_URL = "https://pro-api.coingecko.com/api/v3"
DEFAULT_TIMEOUT_S = 15.0
# price history window used for the intraday (5-minute) closes
HISTORY_WINDOW_S = 24 * 60 * 60


@dataclass(frozen=True, slots=True)
class MarketSnapshot:
    """One row of the market-cap ranking."""

    id: str
    symbol: str
    name: str
    current_price: float
    price_change_pct_24h: float


def _to_snapshot(row: Dict[str, Any]) -> Optional[MarketSnapshot]:
    coin_id = row.get("id")
    if not coin_id:
        return None
    price = row.get("current_price")
    change = row.get("price_change_percentage_24h")
    # CoinGecko returns null for freshly listed or stale coins
    if price is None or change is None:
        return None
    try:
        price = float(price)
        change = float(change)
    except (TypeError, ValueError):
        return None
    if price <= 0:
        return None
    return MarketSnapshot(
        id=str(coin_id),
        symbol=str(row.get("symbol", "")).upper(),
        name=str(row.get("name") or coin_id),
        current_price=price,
        price_change_pct_24h=change,
    )


class CoinGeckoClient:
    """Thin blocking client over the two CoinGecko endpoints the scanner needs."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout_s: float = DEFAULT_TIMEOUT_S,
        session: Optional[requests.Session] = None,
        pro: Optional[bool] = None,
    ) -> None:
        self.api_key = api_key if api_key is not None else os.getenv("COINGECKO_API_KEY")
        if pro is None:
            pro = os.getenv("COINGECKO_PRO", "0") == "1"
        self.timeout_s = timeout_s
        self.session = session or requests.Session()
        if self.api_key and pro:
            self.base_url = PRO_API_URL
            self.header_key: Optional[str] = "x-cg-pro-api-key"
        elif self.api_key:
            self.base_url = FREE_API_URL
            self.header_key = "x-cg-demo-api-key"
        else:
            self.base_url = FREE_API_URL
            self.header_key = None

    def _get(self, endpoint: str, params: Dict[str, Any]) -> Any:
        url = f"{self.base_url}/{endpoint}"
        headers = {}
        if self.header_key:
            headers[self.header_key] = self.api_key
        try:
            response = self.session.get(url, params=params, headers=headers, timeout=self.timeout_s)
        except requests.RequestException as exc:
            raise TransportError(f"CoinGecko request to {endpoint} failed: {exc}") from exc
        if not response.ok:
            raise TransportError(
                f"CoinGecko API error ({response.status_code})",
                status_code=response.status_code,
                body=response.text,
            )
        try:
            return response.json()
        except ValueError as exc:
            raise TransportError(
                f"CoinGecko returned invalid JSON for {endpoint}",
                status_code=response.status_code,
                body=response.text,
            ) from exc

    def fetch_top_markets(self, count: int) -> List[MarketSnapshot]:
        """Top `count` coins by market cap with their 24h change."""
        rows = self._get(
            "coins/markets",
            {
                "vs_currency": "usd",
                "order": "market_cap_desc",
                "per_page": count,
                "page": 1,
                "sparkline": "false",
                "price_change_percentage": "24h",
            },
        )
        snapshots = [snap for snap in (_to_snapshot(row) for row in rows or []) if snap is not None]
        LOGGER.info("Fetched %s market snapshots (requested %s)", len(snapshots), count)
        return snapshots

    def fetch_price_history(self, coin_id: str, from_ts: int, to_ts: int) -> pd.DataFrame:
        """Price points between two unix timestamps as a ts/c frame, oldest first."""
        payload = self._get(
            f"coins/{coin_id}/market_chart/range",
            {"vs_currency": "usd", "from": from_ts, "to": to_ts},
        )
        prices = (payload or {}).get("prices") or []
        df = pd.DataFrame(prices, columns=["ts", "c"])
        return df.sort_values("ts", kind="stable").reset_index(drop=True)

    def fetch_closes(self, coin_id: str, window_s: int = HISTORY_WINDOW_S) -> List[float]:
        """Closes over the last `window_s` seconds."""
        to_ts = int(time.time())
        df = self.fetch_price_history(coin_id, to_ts - window_s, to_ts)
        return [float(c) for c in df["c"].dropna().tolist()]


__all__ = ["MarketSnapshot", "CoinGeckoClient", "HISTORY_WINDOW_S"]
