# -*- coding: utf-8 -*-
"""Per-candidate ICT analysis: price history -> rubric prompt -> verdict -> trade plan."""

from __future__ import annotations

import asyncio
from pathlib import Path
from string import Template
from typing import List, Protocol, Sequence

from ict_trade_agent.utils.candidates import Candidate
from ict_trade_agent.utils.errors import MalformedResponseError, ServiceError, TransportError
from ict_trade_agent.utils.logger import get_logger
from ict_trade_agent.utils.model_decision import parse_verdict
from ict_trade_agent.utils.trade_plan import AnalysisOutcome, Failed, Skipped, build_trade_plan

log = get_logger(__name__)

PROJECT_ROOT = Path(__file__).resolve().parent
MIN_CLOSES = 50
PROMPT_CLOSES = 100


def _read_text(path: Path) -> str:
    with open(path, "r", encoding="utf-8") as f:
        return f.read()


ANALYSIS_PROMPT_TEMPLATE = Template(_read_text(PROJECT_ROOT / "prompts/analysis_prompt.txt"))


class PriceHistorySource(Protocol):
    def fetch_closes(self, coin_id: str) -> List[float]: ...


class Evaluator(Protocol):
    async def evaluate(self, prompt: str, credential: str) -> dict: ...


def build_analysis_prompt(candidate: Candidate, closes: Sequence[float]) -> str:
    """Fill the ICT rubric with the candidate's direction, momentum and last 100 closes."""
    snap = candidate.snapshot
    bullish = candidate.direction == "bullish"
    return ANALYSIS_PROMPT_TEMPLATE.substitute(
        direction=candidate.direction,
        symbol=snap.symbol.upper(),
        current_price=f"{snap.current_price:.5f}",
        momentum=f"{snap.price_change_pct_24h:.2f}",
        closes=", ".join(str(c) for c in closes[-PROMPT_CLOSES:]),
        structure="higher-highs" if bullish else "lower-lows",
        zone="discount (for longs)" if bullish else "premium (for shorts)",
        stop_placement="just below the low" if bullish else "just above the high",
    )


class AnalysisEngine:
    """Runs the full analysis for one candidate and reports a tagged outcome."""

    def __init__(self, market: PriceHistorySource, reasoning: Evaluator) -> None:
        self.market = market
        self.reasoning = reasoning

    async def analyze(
        self,
        candidate: Candidate,
        risk_amount: float,
        rr_ratio: float,
        credential: str,
    ) -> AnalysisOutcome:
        snap = candidate.snapshot
        symbol = snap.symbol.upper()

        try:
            closes = await asyncio.to_thread(self.market.fetch_closes, snap.id)
        except TransportError as exc:
            log.debug("Skipping %s: price history unavailable (%s)", symbol, exc)
            return Skipped(symbol, f"price history unavailable: {exc}")

        if len(closes) < MIN_CLOSES:
            log.debug("Skipping %s: only %s closes", symbol, len(closes))
            return Skipped(symbol, f"insufficient data ({len(closes)} closes)")

        prompt = build_analysis_prompt(candidate, closes)
        try:
            payload = await self.reasoning.evaluate(prompt, credential)
        except (ServiceError, MalformedResponseError) as exc:
            log.error("Analysis failed for %s: %s", symbol, exc)
            return Failed(symbol, f"{symbol}: {exc}")

        verdict = parse_verdict(payload)
        if verdict is None or not verdict.is_actionable():
            rationale = verdict.rationale if verdict is not None else "unparseable verdict"
            log.debug("Skipping %s: no valid setup (%s)", symbol, rationale)
            return Skipped(symbol, f"no valid setup: {rationale}")

        plan = build_trade_plan(
            candidate,
            entry=verdict.entry,
            stop_loss=verdict.stop_loss,
            risk_amount=risk_amount,
            rr_ratio=rr_ratio,
            rationale=verdict.rationale or "",
        )
        if plan is None:
            log.debug("Skipping %s: unusable entry/stop (%s/%s)", symbol, verdict.entry, verdict.stop_loss)
            return Skipped(symbol, "unusable entry/stop distance")

        log.info("%s %s setup: entry=%s sl=%s tp=%s", symbol, plan.direction, plan.entry, plan.stop_loss, plan.take_profit)
        return plan


__all__ = ["AnalysisEngine", "build_analysis_prompt", "MIN_CLOSES", "PROMPT_CLOSES"]
