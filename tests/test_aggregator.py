"""
Pytest tests for wallet analysis aggregation: OG status, last seen, holdings
ranking, ecosystem counting, and the end-to-end analyzer with a fake source.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone

import pytest

from solcard.analytics.aggregator import (
    WalletAnalyzer,
    build_analysis,
    compute_last_seen,
    compute_og_status,
    compute_top_ecosystems,
    compute_top_holdings,
)
from solcard.config.settings import RANK_BY_AMOUNT, RANK_BY_USD_VALUE
from solcard.core.exceptions import AggregationFailure
from solcard.ingestion.fetcher import WalletDataFetcher
from solcard.ingestion.models import AssetRecord, TransactionRecord, WalletData
from tests.helpers import (
    ALPHA_PROGRAM,
    ALPHA_PROGRAM_2,
    BETA_PROGRAM,
    DAY,
    GAMMA_PROGRAM,
    NOW,
    VALID_WALLET,
    FakeSource,
    make_tx,
)


def _token(symbol: str, raw: float, decimals: int = 6, usd: float | None = None, fungible: bool = True) -> AssetRecord:
    return AssetRecord(raw_amount=raw, decimals=decimals, fungible=fungible, symbol=symbol, name=f"{symbol} Token", usd_value=usd)


# -----------------------------------------------------------------------------
# OG status / last seen
# -----------------------------------------------------------------------------

def test_empty_history_gives_null_statuses():
    og = compute_og_status([], NOW)
    seen = compute_last_seen([], NOW)
    assert og.first_transaction_date is None and og.days_since_first is None
    assert seen.last_transaction_date is None and seen.days_since_last is None


def test_single_transaction_same_days_for_both():
    txs = [make_tx(12.5)]
    og = compute_og_status(txs, NOW)
    seen = compute_last_seen(txs, NOW)
    assert og.days_since_first == seen.days_since_last == 12
    assert og.first_transaction_date == seen.last_transaction_date


def test_oldest_is_last_and_newest_is_first():
    txs = [make_tx(1), make_tx(40), make_tx(400)]
    og = compute_og_status(txs, NOW)
    seen = compute_last_seen(txs, NOW)
    assert og.days_since_first == 400
    assert seen.days_since_last == 1
    assert og.first_transaction_date == datetime.fromtimestamp(NOW - 400 * DAY, tz=timezone.utc)


def test_future_timestamp_clamped_to_zero_days():
    txs = [TransactionRecord(timestamp=NOW + 120)]
    assert compute_last_seen(txs, NOW).days_since_last == 0


# -----------------------------------------------------------------------------
# Top holdings
# -----------------------------------------------------------------------------

def test_sol_always_first_even_without_assets():
    holdings = compute_top_holdings(3.5, [])
    assert len(holdings) == 1
    assert holdings[0].symbol == "SOL"
    assert holdings[0].name == "Solana"
    assert holdings[0].amount == 3.5
    assert holdings[0].usd_value == 0.0


def test_raw_amount_scaled_by_decimals():
    holdings = compute_top_holdings(0.0, [_token("ABC", 5_000_000_000, decimals=9)])
    assert holdings[1].amount == 5.0


def test_holdings_capped_at_six_with_sol_first():
    assets = [_token(f"T{i}", (i + 1) * 1_000_000) for i in range(10)]
    holdings = compute_top_holdings(1.0, assets)
    assert len(holdings) == 6
    assert holdings[0].symbol == "SOL"
    # Unpriced: ranked by amount, largest first
    assert [h.symbol for h in holdings[1:]] == ["T9", "T8", "T7", "T6", "T5"]


def test_non_fungible_and_empty_assets_excluded():
    assets = [
        _token("NFT", 1, decimals=0, fungible=False),
        _token("ZERO", 0),
        _token("OK", 2_000_000),
    ]
    holdings = compute_top_holdings(1.0, assets)
    assert [h.symbol for h in holdings] == ["SOL", "OK"]


def test_missing_metadata_defaults():
    holdings = compute_top_holdings(0.0, [AssetRecord(raw_amount=1_000_000_000)])
    assert holdings[1].symbol == "Unknown"
    assert holdings[1].name == "Unknown Token"
    assert holdings[1].amount == 1.0


def test_usd_value_ranks_priced_before_unpriced():
    assets = [
        _token("BIG", 900_000_000_000),            # 900k units, no price
        _token("CHEAP", 1_000_000, usd=5.0),
        _token("RICH", 1_000_000, usd=500.0),
        _token("MID", 10_000_000),                 # 10 units, no price
    ]
    holdings = compute_top_holdings(1.0, assets, rank_key=RANK_BY_USD_VALUE)
    assert [h.symbol for h in holdings] == ["SOL", "RICH", "CHEAP", "BIG", "MID"]
    assert holdings[1].usd_value == 500.0


def test_amount_rank_key_ignores_usd():
    assets = [
        _token("RICH", 1_000_000, usd=500.0),
        _token("BIG", 900_000_000_000),
    ]
    holdings = compute_top_holdings(1.0, assets, rank_key=RANK_BY_AMOUNT)
    assert [h.symbol for h in holdings] == ["SOL", "BIG", "RICH"]


def test_holdings_ties_keep_provider_order():
    assets = [_token("FIRST", 1_000_000), _token("SECOND", 1_000_000)]
    holdings = compute_top_holdings(0.0, assets)
    assert [h.symbol for h in holdings[1:]] == ["FIRST", "SECOND"]


def test_unknown_rank_key_rejected():
    with pytest.raises(ValueError):
        compute_top_holdings(1.0, [_token("A", 1)], rank_key="market_cap")


# -----------------------------------------------------------------------------
# Top ecosystems
# -----------------------------------------------------------------------------

def test_ecosystems_sorted_and_limited(registry):
    txs = [
        make_tx(1, BETA_PROGRAM),
        make_tx(2, BETA_PROGRAM),
        make_tx(3, BETA_PROGRAM),
        make_tx(4, GAMMA_PROGRAM),
        make_tx(5, GAMMA_PROGRAM),
        make_tx(6, ALPHA_PROGRAM),
    ]
    top = compute_top_ecosystems(txs, registry, NOW)
    assert [(e.name, e.interaction_count) for e in top] == [("Beta", 3), ("Gamma", 2)]


def test_same_ecosystem_twice_in_one_transaction_counts_once(registry):
    txs = [make_tx(1, ALPHA_PROGRAM, ALPHA_PROGRAM_2, BETA_PROGRAM)]
    top = compute_top_ecosystems(txs, registry, NOW)
    assert [(e.name, e.interaction_count) for e in top] == [("Alpha", 1), ("Beta", 1)]


def test_ecosystem_window_excludes_old_transactions(registry):
    txs = [
        make_tx(29.9, GAMMA_PROGRAM),
        make_tx(30, GAMMA_PROGRAM),      # exactly on the cutoff: included
        make_tx(31, BETA_PROGRAM),
        make_tx(200, BETA_PROGRAM),
    ]
    top = compute_top_ecosystems(txs, registry, NOW)
    assert [(e.name, e.interaction_count) for e in top] == [("Gamma", 2)]


def test_ecosystem_ties_follow_registry_order(registry):
    # Gamma seen first in history, but Alpha is declared first
    txs = [make_tx(1, GAMMA_PROGRAM), make_tx(2, ALPHA_PROGRAM), make_tx(3, BETA_PROGRAM)]
    top = compute_top_ecosystems(txs, registry, NOW)
    assert [e.name for e in top] == ["Alpha", "Beta"]


def test_no_recent_activity_gives_no_ecosystems(registry):
    assert compute_top_ecosystems([], registry, NOW) == ()
    assert compute_top_ecosystems([make_tx(1, "unrelated")], registry, NOW) == ()


# -----------------------------------------------------------------------------
# Assembly
# -----------------------------------------------------------------------------

def test_build_analysis_serializes_camel_case(registry):
    data = WalletData(
        address=VALID_WALLET,
        balance=15_000.0,
        transactions=(make_tx(2, ALPHA_PROGRAM), make_tx(100)),
        assets=(_token("USDC", 25_000_000, usd=25.0),),
    )
    body = build_analysis(data, registry, NOW).to_response()
    assert body["address"] == VALID_WALLET
    assert body["ogStatus"]["daysSinceFirst"] == 100
    assert body["lastSeen"]["daysSinceLast"] == 2
    assert body["whaleStatus"] == {"tier": "Whale", "solBalance": 15_000.0}
    assert body["topHoldings"][0]["symbol"] == "SOL"
    assert body["topHoldings"][1] == {"symbol": "USDC", "name": "USDC Token", "amount": 25.0, "usdValue": 25.0}
    assert body["topEcosystems"] == [{"name": "Alpha", "interactionCount": 1}]
    assert body["ogStatus"]["firstTransactionDate"].startswith("2025-")


def test_analysis_is_immutable(registry):
    analysis = build_analysis(WalletData(address=VALID_WALLET), registry, NOW)
    with pytest.raises(Exception):
        analysis.address = "other"  # type: ignore[misc]


def test_analyzer_all_fetches_fail_degrades_to_defaults(registry):
    source = FakeSource(
        balance=RuntimeError("rpc down"),
        transactions=RuntimeError("rpc down"),
        assets=RuntimeError("rpc down"),
    )
    analyzer = WalletAnalyzer(WalletDataFetcher(source, timeout_sec=1.0), registry=registry, clock=lambda: NOW)
    analysis = asyncio.run(analyzer.analyze(VALID_WALLET))
    assert analysis.og_status.days_since_first is None
    assert analysis.last_seen.days_since_last is None
    assert analysis.whale_status.tier == "Fish"
    assert analysis.whale_status.sol_balance == 0.0
    assert [h.symbol for h in analysis.top_holdings] == ["SOL"]
    assert analysis.top_ecosystems == ()


def test_analyzer_end_to_end(registry):
    source = FakeSource(
        balance=150.0,
        transactions=[make_tx(0.5, BETA_PROGRAM), make_tx(3, BETA_PROGRAM, ALPHA_PROGRAM), make_tx(900)],
        assets=[_token("BONK", 1_000_000_000_000, decimals=5)],
    )
    analyzer = WalletAnalyzer(WalletDataFetcher(source, timeout_sec=1.0), registry=registry, clock=lambda: NOW)
    analysis = asyncio.run(analyzer.analyze(VALID_WALLET))
    assert sorted(source.calls) == ["assets", "balance", "transactions"]
    assert analysis.whale_status.tier == "Dolphin"
    assert analysis.og_status.days_since_first == 900
    assert analysis.last_seen.days_since_last == 0
    assert analysis.top_holdings[1].amount == 10_000_000.0
    assert [(e.name, e.interaction_count) for e in analysis.top_ecosystems] == [("Beta", 2), ("Alpha", 1)]


def test_analyzer_wraps_aggregation_errors(registry):
    # A negative balance violates the output model
    source = FakeSource(balance=-5.0)
    analyzer = WalletAnalyzer(WalletDataFetcher(source, timeout_sec=1.0), registry=registry, clock=lambda: NOW)
    with pytest.raises(AggregationFailure):
        asyncio.run(analyzer.analyze(VALID_WALLET))


def test_analyzer_rejects_unknown_rank_key(registry):
    with pytest.raises(ValueError):
        WalletAnalyzer(WalletDataFetcher(FakeSource()), registry=registry, rank_key="bogus")
