"""
Concurrent wallet data fetch with per-call degradation.

Balance, transactions and assets are requested concurrently and joined before
returning. Each call is bounded by a timeout; a timeout or any exception is
logged and replaced by that call's empty default (0.0 / [] / []), so one failing
upstream never affects the other two fields.
"""

from __future__ import annotations

import asyncio
from typing import Any, Awaitable, Callable, TypeVar

from solcard.ingestion.base import WalletDataSource
from solcard.ingestion.models import FetchResult, WalletData
from solcard.solcard_logging import get_logger, short_wallet

logger = get_logger(__name__)

T = TypeVar("T")

DEFAULT_TIMEOUT_SEC = 10.0


class WalletDataFetcher:
    def __init__(self, source: WalletDataSource, timeout_sec: float = DEFAULT_TIMEOUT_SEC) -> None:
        self.source = source
        self.timeout_sec = timeout_sec

    async def _guarded(
        self,
        name: str,
        address: str,
        call: Callable[[str], Awaitable[T]],
        default: T,
    ) -> FetchResult[T]:
        try:
            value = await asyncio.wait_for(call(address), timeout=self.timeout_sec)
        except asyncio.TimeoutError:
            error = f"timed out after {self.timeout_sec:g}s"
        except Exception as e:
            error = f"{type(e).__name__}: {e}"
        else:
            return FetchResult(value=value)
        logger.warning(
            "upstream_fetch_failed",
            fetch=name,
            wallet_id=short_wallet(address),
            error=error,
        )
        return FetchResult(value=default, error=error)

    async def fetch_balance(self, address: str) -> FetchResult[float]:
        return await self._guarded("balance", address, self.source.get_balance, 0.0)

    async def fetch_transactions(self, address: str) -> FetchResult[list[Any]]:
        return await self._guarded("transactions", address, self.source.get_transactions, [])

    async def fetch_assets(self, address: str) -> FetchResult[list[Any]]:
        return await self._guarded("assets", address, self.source.get_assets, [])

    async def fetch(self, address: str) -> WalletData:
        """Fan out the three fetches and wait for all of them."""
        balance, transactions, assets = await asyncio.gather(
            self.fetch_balance(address),
            self.fetch_transactions(address),
            self.fetch_assets(address),
        )
        failures = tuple(
            name
            for name, result in (("balance", balance), ("transactions", transactions), ("assets", assets))
            if not result.ok
        )
        return WalletData(
            address=address,
            balance=float(balance.value or 0.0),
            transactions=tuple(transactions.value or ()),
            assets=tuple(assets.value or ()),
            failures=failures,
        )
