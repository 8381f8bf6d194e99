# -*- coding: utf-8 -*-
"""Momentum scan runner: select candidates, analyze them concurrently, fan results in."""

from __future__ import annotations

import argparse
import asyncio
import sys
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence

from ict_trade_agent.analysis_agent import AnalysisEngine
from ict_trade_agent.report import NO_CANDIDATES_MSG, NO_SETUPS_MSG, render_scan_result
from ict_trade_agent.utils.candidates import Candidate, select_candidates
from ict_trade_agent.utils.errors import ConfigurationError, ScannerError
from ict_trade_agent.utils.logger import get_logger
from ict_trade_agent.utils.market_data import CoinGeckoClient, MarketSnapshot
from ict_trade_agent.utils.reasoning_client import ReasoningClient
from ict_trade_agent.utils.settings import (
    ScanSettings,
    build_settings,
    load_credential,
    load_max_concurrency,
    load_settings,
    save_settings,
)
from ict_trade_agent.utils.trade_plan import AnalysisOutcome, Failed, TradePlan

log = get_logger(__name__)

ProgressCallback = Callable[[int, int], None]


@dataclass
class ScanResult:
    longs: List[TradePlan] = field(default_factory=list)
    shorts: List[TradePlan] = field(default_factory=list)
    errors: List[str] = field(default_factory=list)
    candidate_count: int = 0

    @property
    def trade_count(self) -> int:
        return len(self.longs) + len(self.shorts)

    @property
    def is_empty(self) -> bool:
        """No trade plans, whether or not any candidate was found."""
        return self.trade_count == 0

    def summary_message(self) -> Optional[str]:
        """Informational line for an empty scan; None when there are setups."""
        if self.candidate_count == 0:
            return NO_CANDIDATES_MSG
        if self.is_empty:
            return NO_SETUPS_MSG
        return None


class MomentumScanner:
    """Fans AnalysisEngine out over every candidate and partitions the outcomes."""

    def __init__(
        self,
        engine: AnalysisEngine,
        on_progress: Optional[ProgressCallback] = None,
        max_concurrency: Optional[int] = None,
    ) -> None:
        self.engine = engine
        if max_concurrency is not None and max_concurrency < 1:
            raise ConfigurationError(f"max_concurrency must be at least 1, got {max_concurrency}")
        self.on_progress = on_progress
        self.max_concurrency = max_concurrency

    def _report_progress(self, done: int, total: int) -> None:
        if self.on_progress is None:
            return
        try:
            self.on_progress(done, total)
        except Exception:
            log.exception("Progress callback failed at %s / %s", done, total)

    async def _analyze_one(
        self,
        candidate: Candidate,
        risk_amount: float,
        rr_ratio: float,
        credential: str,
        semaphore: Optional[asyncio.Semaphore],
    ) -> AnalysisOutcome:
        symbol = candidate.snapshot.symbol.upper()
        try:
            if semaphore is None:
                return await self.engine.analyze(candidate, risk_amount, rr_ratio, credential)
            async with semaphore:
                return await self.engine.analyze(candidate, risk_amount, rr_ratio, credential)
        except Exception as exc:
            log.exception("Unexpected error analyzing %s", symbol)
            return Failed(symbol, f"{symbol}: {exc}")

    async def run(
        self,
        snapshots: Sequence[MarketSnapshot],
        threshold: float,
        risk_amount: float,
        rr_ratio: float,
        credential: str,
    ) -> ScanResult:
        if not credential or not credential.strip():
            raise ConfigurationError("Please provide a model API key (GEMINI_API_KEY or --api-key).")

        candidates = select_candidates(snapshots, threshold)
        result = ScanResult(candidate_count=len(candidates))
        if not candidates:
            return result

        total = len(candidates)
        log.info("Found %s candidates. Analyzing in parallel...", total)
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency is not None else None
        tasks = [
            asyncio.create_task(self._analyze_one(c, risk_amount, rr_ratio, credential, semaphore))
            for c in candidates
        ]

        done = 0
        for next_outcome in asyncio.as_completed(tasks):
            outcome = await next_outcome
            done += 1
            self._report_progress(done, total)

            if isinstance(outcome, TradePlan):
                (result.longs if outcome.direction == "Long" else result.shorts).append(outcome)
            elif isinstance(outcome, Failed):
                result.errors.append(outcome.reason)

        log.info(
            "Scan finished: %s longs, %s shorts, %s errors out of %s candidates",
            len(result.longs),
            len(result.shorts),
            len(result.errors),
            total,
        )
        return result


def _log_progress(done: int, total: int) -> None:
    log.info("Analyzing %s / %s coins...", done, total)


async def run_scan(
    settings: ScanSettings,
    credential: str,
    market: Optional[CoinGeckoClient] = None,
    reasoning: Optional[ReasoningClient] = None,
    max_concurrency: Optional[int] = None,
    on_progress: Optional[ProgressCallback] = _log_progress,
) -> ScanResult:
    """Fetch the top markets and run the whole pipeline with the given settings."""
    if not credential:
        raise ConfigurationError("Please provide a model API key (GEMINI_API_KEY or --api-key).")

    market = market or CoinGeckoClient()
    reasoning = reasoning or ReasoningClient()
    log.info("Fetching market data for top %s coins...", settings.coin_count)
    snapshots = await asyncio.to_thread(market.fetch_top_markets, settings.coin_count)

    scanner = MomentumScanner(
        AnalysisEngine(market, reasoning),
        on_progress=on_progress,
        max_concurrency=max_concurrency,
    )
    return await scanner.run(
        snapshots,
        threshold=settings.momentum_threshold,
        risk_amount=settings.risk_amount,
        rr_ratio=settings.rr_ratio,
        credential=credential,
    )


def _positive_int(raw: str) -> int:
    value = int(raw)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {value}")
    return value


def _build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Scan top coins for momentum and ICT setups graded by an AI model.")
    parser.add_argument("--risk-amount", type=float, default=None, help="USD risked per trade (default 10)")
    parser.add_argument("--rr-ratio", type=float, default=None, help="Reward multiple of the stop distance (default 3)")
    parser.add_argument("--coin-count", type=_positive_int, default=None, help="Number of top market-cap coins to scan (default 50)")
    parser.add_argument("--momentum-threshold", type=float, default=None, help="Minimum absolute 24h change in percent (default 3)")
    parser.add_argument("--api-key", default=None, help="Model API key; defaults to $GEMINI_API_KEY")
    parser.add_argument("--model", default=None, help="langchain model id, e.g. google_genai:gemini-2.5-flash")
    parser.add_argument("--max-concurrency", type=_positive_int, default=None, help="Cap on simultaneous analyses (default unbounded)")
    parser.add_argument("--no-save", action="store_true", help="Do not persist the settings used for this run")
    return parser


def _resolve_settings(args: argparse.Namespace) -> ScanSettings:
    stored = load_settings().model_dump()
    overrides = {
        "risk_amount": args.risk_amount,
        "rr_ratio": args.rr_ratio,
        "coin_count": args.coin_count,
        "momentum_threshold": args.momentum_threshold,
    }
    stored.update({k: v for k, v in overrides.items() if v is not None})
    return build_settings(**stored)


def main(argv: Optional[List[str]] = None) -> int:
    args = _build_arg_parser().parse_args(argv)
    try:
        settings = _resolve_settings(args)
        if not args.no_save:
            save_settings(settings)
        credential = load_credential(args.api_key)
        max_concurrency = args.max_concurrency or load_max_concurrency()
        result = asyncio.run(
            run_scan(
                settings,
                credential,
                reasoning=ReasoningClient(model=args.model),
                max_concurrency=max_concurrency,
            )
        )
    except ConfigurationError as exc:
        log.error("%s", exc)
        return 1
    except ScannerError as exc:
        log.error("A global error occurred: %s", exc)
        return 2
    except KeyboardInterrupt:
        print("\n[exit ] interrupted")
        return 130
    except Exception as exc:
        log.exception("Scan crashed: %s", exc)
        return 2

    for line in render_scan_result(result):
        print(line, file=sys.stderr if line.startswith("ERROR:") else sys.stdout)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
