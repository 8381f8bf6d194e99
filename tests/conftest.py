"""Shared fakes for the market-data and reasoning collaborators."""

import os
import tempfile

# keep test runs from writing into the repo's ./log directory
os.environ.setdefault("ICT_LOG_DIR", tempfile.mkdtemp(prefix="ict_logs_"))

import pytest

from ict_trade_agent.utils.candidates import Candidate
from ict_trade_agent.utils.errors import MalformedResponseError, ServiceError, TransportError
from ict_trade_agent.utils.market_data import MarketSnapshot


def make_snapshot(coin_id="x", change=5.0, price=100.0, symbol=None, name=None):
    return MarketSnapshot(
        id=coin_id,
        symbol=symbol or coin_id,
        name=name or coin_id.title(),
        current_price=price,
        price_change_pct_24h=change,
    )


def make_candidate(coin_id="x", direction="bullish", change=5.0, price=100.0):
    return Candidate(make_snapshot(coin_id, change=change, price=price), direction)


def json_reply(payload: str) -> str:
    return f"Here is my analysis.\n```json\n{payload}\n```\n"


class FakeMarket:
    """Price-history source keyed by coin id; an Exception value is raised."""

    def __init__(self, closes=None, default_len=120):
        self.closes = closes or {}
        self.default_len = default_len
        self.calls = []

    def fetch_closes(self, coin_id):
        self.calls.append(coin_id)
        value = self.closes.get(coin_id, [100.0 + i * 0.1 for i in range(self.default_len)])
        if isinstance(value, Exception):
            raise value
        return value


class FakeReasoning:
    """Returns canned payloads per symbol (matched inside the prompt)."""

    def __init__(self, payloads=None, default=None):
        self.payloads = payloads or {}
        self.default = default if default is not None else {"isValid": True, "entry": 100, "stopLoss": 95, "rationale": "FVG"}
        self.prompts = []
        self.credentials = []

    async def evaluate(self, prompt, credential):
        self.prompts.append(prompt)
        self.credentials.append(credential)
        for symbol, payload in self.payloads.items():
            if f"setup for {symbol} " in prompt:
                if isinstance(payload, Exception):
                    raise payload
                return payload
        return self.default


@pytest.fixture
def fake_market():
    return FakeMarket()


@pytest.fixture
def fake_reasoning():
    return FakeReasoning()


__all__ = [
    "make_snapshot",
    "make_candidate",
    "json_reply",
    "FakeMarket",
    "FakeReasoning",
    "TransportError",
    "ServiceError",
    "MalformedResponseError",
]
