"""
Output models for the wallet analysis.

Immutable pydantic models. Python attributes are snake_case; JSON output uses
the camelCase keys the card front end reads (ogStatus, daysSinceFirst, ...).
"""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CardModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, alias_generator=to_camel)


class OGStatus(_CardModel):
    """Account age derived from the oldest fetched transaction."""

    first_transaction_date: datetime | None = Field(None, description="Oldest transaction time (UTC)")
    days_since_first: int | None = Field(None, ge=0, description="Whole days since the oldest transaction")


class LastSeen(_CardModel):
    """Recent activity derived from the newest fetched transaction."""

    last_transaction_date: datetime | None = Field(None, description="Newest transaction time (UTC)")
    days_since_last: int | None = Field(None, ge=0, description="Whole days since the newest transaction")


class WhaleStatus(_CardModel):
    tier: str = Field(..., description="Fish, Dolphin, Shark, Whale or Kraken")
    sol_balance: float = Field(..., ge=0, description="Native SOL balance")


class Holding(_CardModel):
    symbol: str
    name: str
    amount: float = Field(..., ge=0)
    usd_value: float | None = None


class EcosystemActivity(_CardModel):
    name: str
    interaction_count: int = Field(..., ge=1)


class WalletAnalysis(_CardModel):
    """Everything the card needs for one wallet. Built once per request, never mutated."""

    address: str
    og_status: OGStatus
    last_seen: LastSeen
    whale_status: WhaleStatus
    top_holdings: tuple[Holding, ...] = Field(default=(), max_length=6)
    top_ecosystems: tuple[EcosystemActivity, ...] = Field(default=(), max_length=2)

    def to_response(self) -> dict:
        """JSON-ready dict with camelCase keys."""
        return self.model_dump(mode="json", by_alias=True)
