"""
Wallet analysis aggregation.

Combines the fetched balance, transaction history and asset list into a
WalletAnalysis: OG status (oldest transaction), last seen (newest transaction),
whale tier, top holdings (SOL first) and the most used ecosystems over the
recent window. The compute_* functions are pure and take an explicit `now`
(epoch seconds); WalletAnalyzer wires them to the fetcher.
"""

from __future__ import annotations

import math
import time
from collections import Counter
from datetime import datetime, timezone
from typing import Callable, Iterable, Sequence

from solcard.analytics.models import (
    EcosystemActivity,
    Holding,
    LastSeen,
    OGStatus,
    WalletAnalysis,
    WhaleStatus,
)
from solcard.analytics.whale_classifier import classify_whale_tier
from solcard.config.ecosystems import DEFAULT_REGISTRY, EcosystemRegistry
from solcard.config.settings import (
    DEFAULT_ECOSYSTEM_WINDOW_DAYS,
    RANK_BY_AMOUNT,
    RANK_BY_USD_VALUE,
    Settings,
)
from solcard.core.exceptions import AggregationFailure
from solcard.ingestion.fetcher import WalletDataFetcher
from solcard.ingestion.models import AssetRecord, TransactionRecord, WalletData
from solcard.solcard_logging import bind_wallet

SECONDS_PER_DAY = 86_400
MAX_HOLDINGS = 6
MAX_ECOSYSTEMS = 2

SOL_SYMBOL = "SOL"
SOL_NAME = "Solana"
UNKNOWN_SYMBOL = "Unknown"
UNKNOWN_NAME = "Unknown Token"


def _days_between(now: float, timestamp: int) -> int:
    # Clamp: a block time slightly ahead of the local clock is "today"
    return max(0, math.floor((now - timestamp) / SECONDS_PER_DAY))


def _utc(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)


def compute_og_status(transactions: Sequence[TransactionRecord], now: float) -> OGStatus:
    """Oldest transaction is the last one (history is most recent first)."""
    if not transactions:
        return OGStatus()
    oldest = transactions[-1]
    return OGStatus(
        first_transaction_date=_utc(oldest.timestamp),
        days_since_first=_days_between(now, oldest.timestamp),
    )


def compute_last_seen(transactions: Sequence[TransactionRecord], now: float) -> LastSeen:
    if not transactions:
        return LastSeen()
    newest = transactions[0]
    return LastSeen(
        last_transaction_date=_utc(newest.timestamp),
        days_since_last=_days_between(now, newest.timestamp),
    )


def compute_whale_status(sol_balance: float) -> WhaleStatus:
    return WhaleStatus(tier=classify_whale_tier(sol_balance), sol_balance=sol_balance)


def _holding_rank(rank_key: str) -> Callable[[Holding], tuple]:
    if rank_key == RANK_BY_AMOUNT:
        return lambda h: (h.amount,)
    if rank_key == RANK_BY_USD_VALUE:
        # Priced holdings first by USD value, then unpriced ones by amount
        return lambda h: (1, h.usd_value) if (h.usd_value or 0) > 0 else (0, h.amount)
    raise ValueError(f"unknown holdings rank key: {rank_key!r}")


def compute_top_holdings(
    sol_balance: float,
    assets: Iterable[AssetRecord],
    rank_key: str = RANK_BY_USD_VALUE,
    limit: int = MAX_HOLDINGS,
) -> tuple[Holding, ...]:
    """
    SOL first, then the best ranked fungible tokens with a positive balance.

    Token USD values are passed through from the provider when present, else 0.
    Ties keep provider order.
    """
    sol = Holding(symbol=SOL_SYMBOL, name=SOL_NAME, amount=sol_balance, usd_value=0.0)
    tokens = [
        Holding(
            symbol=asset.symbol or UNKNOWN_SYMBOL,
            name=asset.name or UNKNOWN_NAME,
            amount=asset.amount,
            usd_value=asset.usd_value if asset.usd_value is not None else 0.0,
        )
        for asset in assets
        if asset.fungible and asset.raw_amount > 0
    ]
    tokens.sort(key=_holding_rank(rank_key), reverse=True)
    return tuple([sol] + tokens[: limit - 1])[:limit]


def compute_top_ecosystems(
    transactions: Iterable[TransactionRecord],
    registry: EcosystemRegistry,
    now: float,
    window_days: int = DEFAULT_ECOSYSTEM_WINDOW_DAYS,
    limit: int = MAX_ECOSYSTEMS,
) -> tuple[EcosystemActivity, ...]:
    """
    Count, per ecosystem, the recent transactions that touched it.

    A transaction counts at most once per ecosystem. Sorted by count
    descending; equal counts follow registry declaration order.
    """
    cutoff = now - window_days * SECONDS_PER_DAY
    counts: Counter[str] = Counter()
    for tx in transactions:
        if tx.timestamp < cutoff:
            continue
        counts.update(registry.ecosystems_for(tx.program_ids))
    ranked = sorted(counts.items(), key=lambda kv: (-kv[1], registry.rank(kv[0])))
    return tuple(
        EcosystemActivity(name=name, interaction_count=count)
        for name, count in ranked[:limit]
    )


def build_analysis(
    data: WalletData,
    registry: EcosystemRegistry,
    now: float,
    rank_key: str = RANK_BY_USD_VALUE,
    window_days: int = DEFAULT_ECOSYSTEM_WINDOW_DAYS,
) -> WalletAnalysis:
    """Assemble the full analysis from already fetched data."""
    return WalletAnalysis(
        address=data.address,
        og_status=compute_og_status(data.transactions, now),
        last_seen=compute_last_seen(data.transactions, now),
        whale_status=compute_whale_status(data.balance),
        top_holdings=compute_top_holdings(data.balance, data.assets, rank_key=rank_key),
        top_ecosystems=compute_top_ecosystems(data.transactions, registry, now, window_days=window_days),
    )


class WalletAnalyzer:
    """Fetch wallet data and derive the card statistics."""

    def __init__(
        self,
        fetcher: WalletDataFetcher,
        registry: EcosystemRegistry = DEFAULT_REGISTRY,
        rank_key: str = RANK_BY_USD_VALUE,
        window_days: int = DEFAULT_ECOSYSTEM_WINDOW_DAYS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        _holding_rank(rank_key)
        self.fetcher = fetcher
        self.registry = registry
        self.rank_key = rank_key
        self.window_days = window_days
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        fetcher: WalletDataFetcher,
        settings: Settings,
        registry: EcosystemRegistry = DEFAULT_REGISTRY,
    ) -> "WalletAnalyzer":
        return cls(
            fetcher,
            registry=registry,
            rank_key=settings.holdings_rank_key,
            window_days=settings.ecosystem_window_days,
        )

    async def analyze(self, address: str) -> WalletAnalysis:
        log = bind_wallet(address)
        log.info("wallet_analyze_start")
        data = await self.fetcher.fetch(address)
        try:
            analysis = build_analysis(
                data,
                self.registry,
                now=self._clock(),
                rank_key=self.rank_key,
                window_days=self.window_days,
            )
        except Exception as e:
            log.exception("wallet_analyze_failed", error=str(e))
            raise AggregationFailure(f"Failed to analyze wallet: {e}") from e
        log.info(
            "wallet_analyze_done",
            tier=analysis.whale_status.tier,
            tx_count=len(data.transactions),
            asset_count=len(data.assets),
            degraded=list(data.failures),
        )
        return analysis
