"""
Normalised records produced by data sources.

The aggregation engine only sees these types, never a provider's wire format.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")

LAMPORTS_PER_SOL = 1_000_000_000
DEFAULT_TOKEN_DECIMALS = 9


@dataclass(frozen=True)
class TransactionRecord:
    timestamp: int
    program_ids: frozenset[str] = frozenset()
    signature: str | None = None
    succeeded: bool = True


@dataclass(frozen=True)
class AssetRecord:
    raw_amount: float
    decimals: int = DEFAULT_TOKEN_DECIMALS
    fungible: bool = True
    symbol: str | None = None
    name: str | None = None
    mint: str | None = None
    usd_value: float | None = None

    @property
    def amount(self) -> float:
        """UI amount: raw amount scaled by decimals."""
        return self.raw_amount / (10 ** self.decimals)


@dataclass(frozen=True)
class FetchResult(Generic[T]):
    """Outcome of one sub-fetch: the value (possibly a default) and the error, if any."""

    value: T
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class WalletData:
    address: str
    balance: float = 0.0
    transactions: tuple[TransactionRecord, ...] = ()
    assets: tuple[AssetRecord, ...] = ()
    failures: tuple[str, ...] = field(default=())
