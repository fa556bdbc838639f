"""
Shared test data: fixed clock, fake program IDs and an in-memory data source.
"""

from __future__ import annotations

from typing import Any

from solcard.ingestion.models import AssetRecord, TransactionRecord

# 44-char base58 wallet
VALID_WALLET = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"

NOW = 1_760_000_000  # fixed clock for deterministic day counts
DAY = 86_400

ALPHA_PROGRAM = "ALPHAprog1111111111111111111111111111111111"
ALPHA_PROGRAM_2 = "ALPHAprog2222222222222222222222222222222222"
BETA_PROGRAM = "BETAprog11111111111111111111111111111111111"
GAMMA_PROGRAM = "GAMMAprog111111111111111111111111111111111"


class FakeSource:
    """In-memory WalletDataSource. Pass an Exception instance to make a call fail."""

    def __init__(self, balance: Any = 0.0, transactions: Any = (), assets: Any = ()) -> None:
        self.balance = balance
        self.transactions = transactions
        self.assets = assets
        self.calls: list[str] = []

    @staticmethod
    def _resolve(value: Any) -> Any:
        if isinstance(value, Exception):
            raise value
        return value

    async def get_balance(self, address: str) -> float:
        self.calls.append("balance")
        return self._resolve(self.balance)

    async def get_transactions(self, address: str) -> list[TransactionRecord]:
        self.calls.append("transactions")
        return list(self._resolve(self.transactions))

    async def get_assets(self, address: str) -> list[AssetRecord]:
        self.calls.append("assets")
        return list(self._resolve(self.assets))


def make_tx(days_ago: float, *program_ids: str, now: int = NOW) -> TransactionRecord:
    return TransactionRecord(timestamp=int(now - days_ago * DAY), program_ids=frozenset(program_ids))
