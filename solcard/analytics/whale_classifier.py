"""
Whale tier classification from SOL balance.

Thresholds are checked highest-first; the caller guarantees a non-negative balance.
"""

from __future__ import annotations

TIER_FISH = "Fish"
TIER_DOLPHIN = "Dolphin"
TIER_SHARK = "Shark"
TIER_WHALE = "Whale"
TIER_KRAKEN = "Kraken"

# Smallest to largest
WHALE_TIERS = (TIER_FISH, TIER_DOLPHIN, TIER_SHARK, TIER_WHALE, TIER_KRAKEN)

TIER_THRESHOLDS: tuple[tuple[float, str], ...] = (
    (100_000, TIER_KRAKEN),
    (10_000, TIER_WHALE),
    (1_000, TIER_SHARK),
    (100, TIER_DOLPHIN),
)


def classify_whale_tier(sol_balance: float) -> str:
    """Return Fish, Dolphin, Shark, Whale or Kraken for a SOL balance."""
    for threshold, tier in TIER_THRESHOLDS:
        if sol_balance >= threshold:
            return tier
    return TIER_FISH
