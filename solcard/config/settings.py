"""
Application settings.

Loads configuration from environment variables (and the project .env), applies
defaults for optional values and exposes a single frozen Settings object used
by the fetcher, the aggregation engine and the API server.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache

from solcard.config.env import (
    HELIUS_API_BASE,
    env_bool,
    env_float,
    env_int,
    env_str,
    get_helius_api_key,
    get_helius_rpc_url,
    load_solcard_env,
)
from solcard.core.exceptions import ConfigurationError

RANK_BY_USD_VALUE = "usd_value"
RANK_BY_AMOUNT = "amount"
HOLDINGS_RANK_KEYS = (RANK_BY_USD_VALUE, RANK_BY_AMOUNT)

DEFAULT_TX_PAGE_LIMIT = 100
MAX_TX_PAGE_LIMIT = 1000
DEFAULT_ASSET_PAGE_LIMIT = 1000
DEFAULT_FETCH_TIMEOUT_SEC = 10.0
DEFAULT_ECOSYSTEM_WINDOW_DAYS = 30


@dataclass(frozen=True)
class Settings:
    helius_api_key: str = ""
    helius_rpc_url: str = ""
    helius_api_base: str = HELIUS_API_BASE
    tx_page_limit: int = DEFAULT_TX_PAGE_LIMIT
    asset_page_limit: int = DEFAULT_ASSET_PAGE_LIMIT
    only_successful: bool = False
    fetch_timeout_sec: float = DEFAULT_FETCH_TIMEOUT_SEC
    ecosystem_window_days: int = DEFAULT_ECOSYSTEM_WINDOW_DAYS
    holdings_rank_key: str = RANK_BY_USD_VALUE
    api_host: str = "0.0.0.0"
    api_port: int = 3000
    cors_origins: tuple[str, ...] = ("*",)

    def __post_init__(self) -> None:
        if self.holdings_rank_key not in HOLDINGS_RANK_KEYS:
            raise ConfigurationError(
                f"HOLDINGS_RANK_KEY must be one of {', '.join(HOLDINGS_RANK_KEYS)}, "
                f"got {self.holdings_rank_key!r}"
            )
        if self.fetch_timeout_sec <= 0:
            raise ConfigurationError("FETCH_TIMEOUT_SEC must be positive")

    def require_helius(self) -> None:
        """Raise ConfigurationError when no Helius endpoint can be built."""
        if not self.helius_api_key:
            raise ConfigurationError("HELIUS_API_KEY is not set in environment variables")


def load_settings() -> Settings:
    """Build Settings from the current environment (no caching)."""
    load_solcard_env()
    tx_limit = env_int("HELIUS_TX_LIMIT", DEFAULT_TX_PAGE_LIMIT)
    origins = tuple(o.strip() for o in env_str("CORS_ORIGINS", "*").split(",") if o.strip())
    return Settings(
        helius_api_key=get_helius_api_key(),
        helius_rpc_url=get_helius_rpc_url(),
        helius_api_base=env_str("HELIUS_API_BASE", HELIUS_API_BASE).rstrip("/"),
        tx_page_limit=max(1, min(tx_limit, MAX_TX_PAGE_LIMIT)),
        asset_page_limit=max(1, env_int("HELIUS_ASSET_LIMIT", DEFAULT_ASSET_PAGE_LIMIT)),
        only_successful=env_bool("HELIUS_ONLY_SUCCESSFUL", False),
        fetch_timeout_sec=env_float("FETCH_TIMEOUT_SEC", DEFAULT_FETCH_TIMEOUT_SEC),
        ecosystem_window_days=env_int("ECOSYSTEM_WINDOW_DAYS", DEFAULT_ECOSYSTEM_WINDOW_DAYS),
        holdings_rank_key=env_str("HOLDINGS_RANK_KEY", RANK_BY_USD_VALUE).lower(),
        api_host=env_str("API_HOST", "0.0.0.0"),
        api_port=env_int("API_PORT", env_int("PORT", 3000)),
        cors_origins=origins or ("*",),
    )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the process-wide settings, loaded once."""
    return load_settings()
