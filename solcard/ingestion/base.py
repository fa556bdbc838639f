"""
Data source protocol.

Any indexing provider is plugged in by implementing these three coroutines.
Implementations raise on failure; WalletDataFetcher turns failures into defaults.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from solcard.ingestion.models import AssetRecord, TransactionRecord


@runtime_checkable
class WalletDataSource(Protocol):
    async def get_balance(self, address: str) -> float:
        """Native balance in SOL."""
        ...

    async def get_transactions(self, address: str) -> list[TransactionRecord]:
        """Single page of history, most recent first."""
        ...

    async def get_assets(self, address: str) -> list[AssetRecord]:
        """Assets owned by the wallet (fungible and not)."""
        ...
