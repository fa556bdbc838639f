"""
Application-level exceptions.

- InvalidAddress fails fast at the HTTP boundary (400).
- UpstreamFetchFailure is raised by data sources and always degraded by the fetcher.
- AggregationFailure wraps unexpected errors in the analysis itself (500).
"""

from __future__ import annotations

MIN_ADDRESS_LENGTH = 32
MAX_ADDRESS_LENGTH = 44


class SolCardError(Exception):
    """Base class for SolCard errors."""


class ConfigurationError(SolCardError):
    """Required configuration is missing or invalid."""


class InvalidAddress(SolCardError, ValueError):
    """Wallet address failed validation."""

    def __init__(self, address: str | None) -> None:
        self.address = address
        super().__init__("Please provide a valid Solana wallet address")


class UpstreamFetchFailure(SolCardError):
    """One of the indexing API calls failed (transport, status or payload)."""

    def __init__(self, operation: str, message: str) -> None:
        self.operation = operation
        super().__init__(f"{operation}: {message}")


class AggregationFailure(SolCardError):
    """Unexpected error while deriving the wallet analysis."""


def validate_wallet_address(address: str | None) -> str:
    """
    Return the stripped address if its length is within 32..44 characters.

    Raises InvalidAddress otherwise. No base58 decoding is attempted.
    """
    value = (address or "").strip()
    if not (MIN_ADDRESS_LENGTH <= len(value) <= MAX_ADDRESS_LENGTH):
        raise InvalidAddress(address)
    return value
