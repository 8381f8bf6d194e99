# -*- coding: utf-8 -*-
"""Momentum filter that turns market snapshots into bullish/bearish candidates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Literal, Sequence

from .logger import get_logger
from .market_data import MarketSnapshot

LOGGER = get_logger(__name__)

Direction = Literal["bullish", "bearish"]


@dataclass(frozen=True, slots=True)
class Candidate:
    snapshot: MarketSnapshot
    direction: Direction


def select_candidates(snapshots: Sequence[MarketSnapshot], threshold: float) -> List[Candidate]:
    """Bullish movers above +threshold, then bearish movers below -threshold.

    Both bounds are exclusive and input order is kept inside each group.
    """
    bullish = [Candidate(s, "bullish") for s in snapshots if s.price_change_pct_24h > threshold]
    bearish = [Candidate(s, "bearish") for s in snapshots if s.price_change_pct_24h < -threshold]
    candidates = bullish + bearish
    if not candidates:
        LOGGER.info("No coins moved more than %s%% in 24h", threshold)
    else:
        LOGGER.info("Selected %s bullish and %s bearish candidates", len(bullish), len(bearish))
    return candidates


__all__ = ["Candidate", "Direction", "select_candidates"]
