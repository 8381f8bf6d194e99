# -*- coding: utf-8 -*-
"""Plain-text rendering of scan results for the terminal."""

from __future__ import annotations

from typing import List

from ict_trade_agent.utils.trade_plan import LOT_DECIMALS, PRICE_DECIMALS, TradePlan

NO_CANDIDATES_MSG = "No coins found matching the momentum threshold. Try widening your criteria."
NO_SETUPS_MSG = "Analysis complete. No high-confluence ICT setups found based on the current rules."


def _fmt_ratio(val: float) -> str:
    return f"{val:g}"


def render_trade_card(plan: TradePlan) -> str:
    return (
        f"[{plan.direction.upper()}] {plan.name} ({plan.symbol})\n"
        f"  Entry:       ${plan.entry:.{PRICE_DECIMALS}f}\n"
        f"  Stop Loss:   ${plan.stop_loss:.{PRICE_DECIMALS}f}\n"
        f"  Take Profit: ${plan.take_profit:.{PRICE_DECIMALS}f}\n"
        f"  Lot Size:    {plan.lot_size:.{LOT_DECIMALS}f} {plan.symbol}\n"
        f"  R:R Ratio:   {_fmt_ratio(plan.risk_reward_ratio)}:1\n"
        f"  AI Rationale: {plan.rationale}"
    )


def render_scan_result(result) -> List[str]:
    """Lines for a ScanResult: long cards, short cards, info message, then errors."""
    lines: List[str] = []
    if result.candidate_count == 0:
        lines.append(result.summary_message())
        return lines

    for title, plans in (("Long", result.longs), ("Short", result.shorts)):
        if not plans:
            continue
        lines.append(f"Valid {title} Setups ({len(plans)})")
        lines.extend(render_trade_card(plan) for plan in plans)

    message = result.summary_message()
    if message:
        lines.append(message)

    lines.extend(f"ERROR: {err}" for err in result.errors)
    return lines


__all__ = ["render_trade_card", "render_scan_result", "NO_CANDIDATES_MSG", "NO_SETUPS_MSG"]
