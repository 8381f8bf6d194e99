# -*- coding: utf-8 -*-
"""Trade plan records and the risk math that produces them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional, Union

from .candidates import Candidate

PRICE_DECIMALS = 5
LOT_DECIMALS = 4

TradeDirection = Literal["Long", "Short"]


@dataclass(frozen=True, slots=True)
class TradePlan:
    name: str
    symbol: str
    direction: TradeDirection
    entry: float
    stop_loss: float
    take_profit: float
    lot_size: float
    risk_reward_ratio: float
    rationale: str


@dataclass(frozen=True, slots=True)
class Skipped:
    """Candidate dropped quietly: no data, no setup, or unusable numbers."""

    symbol: str
    reason: str


@dataclass(frozen=True, slots=True)
class Failed:
    """Candidate whose analysis errored; reported to the user."""

    symbol: str
    reason: str


AnalysisOutcome = Union[TradePlan, Skipped, Failed]


def build_trade_plan(
    candidate: Candidate,
    entry: float,
    stop_loss: float,
    risk_amount: float,
    rr_ratio: float,
    rationale: str = "",
) -> Optional[TradePlan]:
    """
    Derive take-profit and lot size from entry/stop and the user's risk settings.

    lot_size is sized so that a move from entry to stop loses exactly
    `risk_amount`. Returns None when the stop distance is zero or the
    take-profit would not be a positive price. Values are rounded only when
    the plan is built.
    """
    sl_distance = abs(entry - stop_loss)
    if sl_distance == 0 or entry <= 0:
        return None

    if candidate.direction == "bullish":
        take_profit = entry + sl_distance * rr_ratio
    else:
        take_profit = entry - sl_distance * rr_ratio
    if take_profit <= 0:
        return None

    risk_pct = sl_distance / entry
    position_usd = risk_amount / risk_pct
    lot_size = position_usd / entry

    snap = candidate.snapshot
    return TradePlan(
        name=snap.name,
        symbol=snap.symbol.upper(),
        direction="Long" if candidate.direction == "bullish" else "Short",
        entry=round(entry, PRICE_DECIMALS),
        stop_loss=round(stop_loss, PRICE_DECIMALS),
        take_profit=round(take_profit, PRICE_DECIMALS),
        lot_size=round(lot_size, LOT_DECIMALS),
        risk_reward_ratio=rr_ratio,
        rationale=rationale,
    )


__all__ = [
    "TradePlan",
    "Skipped",
    "Failed",
    "AnalysisOutcome",
    "TradeDirection",
    "build_trade_plan",
    "PRICE_DECIMALS",
    "LOT_DECIMALS",
]
