"""Tests for the terminal rendering of scan results."""

from conftest import make_candidate

from ict_trade_agent.auto_scan import ScanResult
from ict_trade_agent.report import NO_CANDIDATES_MSG, NO_SETUPS_MSG, render_scan_result, render_trade_card
from ict_trade_agent.utils.trade_plan import build_trade_plan


def _plan(direction="bullish", stop=95):
    return build_trade_plan(make_candidate("btc", direction=direction), 100, stop, risk_amount=10, rr_ratio=3, rationale="FVG retest")


def test_trade_card_fields():
    card = render_trade_card(_plan())
    assert "[LONG] Btc (BTC)" in card
    assert "Entry:       $100.00000" in card
    assert "Take Profit: $115.00000" in card
    assert "Lot Size:    2.0000 BTC" in card
    assert "R:R Ratio:   3:1" in card
    assert "AI Rationale: FVG retest" in card


def test_no_candidates_message():
    assert render_scan_result(ScanResult()) == [NO_CANDIDATES_MSG]


def test_no_setups_message_and_errors():
    lines = render_scan_result(ScanResult(errors=["SOL: boom"], candidate_count=2))
    assert lines == [NO_SETUPS_MSG, "ERROR: SOL: boom"]


def test_groups_longs_then_shorts():
    result = ScanResult(longs=[_plan()], shorts=[_plan("bearish", 105)], candidate_count=2)
    lines = render_scan_result(result)
    assert lines[0] == "Valid Long Setups (1)"
    assert lines[2] == "Valid Short Setups (1)"
    assert lines[3].startswith("[SHORT]")
    assert NO_SETUPS_MSG not in lines


def test_summary_message_distinguishes_empty_scans():
    assert ScanResult().is_empty
    assert ScanResult().summary_message() == NO_CANDIDATES_MSG
    assert ScanResult(candidate_count=3).summary_message() == NO_SETUPS_MSG
    with_setup = ScanResult(shorts=[_plan("bearish", 105)], candidate_count=3)
    assert not with_setup.is_empty
    assert with_setup.summary_message() is None
