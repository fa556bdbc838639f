"""
Environment variable loading for SolCard.

- HELIUS_API_KEY: Helius API key (required by the server)
- HELIUS_RPC_URL / SOLANA_RPC_URL: RPC endpoint override
- HELIUS_API_BASE: REST base for enhanced transactions
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is solcard/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

HELIUS_API_BASE = "https://api.helius.xyz/v0"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"


def load_solcard_env() -> None:
    """Load .env from project root. Safe to call multiple times; never overrides the environment."""
    if _ENV_PATH.is_file():
        load_dotenv(_ENV_PATH, override=False)


def env_str(name: str, default: str = "") -> str:
    return (os.getenv(name) or "").strip() or default


def env_int(name: str, default: int) -> int:
    raw = env_str(name)
    return int(raw) if raw else default


def env_float(name: str, default: float) -> float:
    raw = env_str(name)
    return float(raw) if raw else default


def env_bool(name: str, default: bool = False) -> bool:
    raw = env_str(name).lower()
    if not raw:
        return default
    return raw in ("1", "true", "yes", "on")


def get_helius_api_key() -> str:
    load_solcard_env()
    return env_str("HELIUS_API_KEY")


def get_helius_rpc_url() -> str:
    """
    Resolve the RPC URL used for getBalance and DAS calls.
    Order: HELIUS_RPC_URL > SOLANA_RPC_URL > Helius mainnet URL from HELIUS_API_KEY.
    """
    load_solcard_env()
    url = env_str("HELIUS_RPC_URL") or env_str("SOLANA_RPC_URL")
    if url:
        return url
    key = get_helius_api_key()
    if key:
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return ""


def mask_api_key(url: str) -> str:
    """Hide the api-key query value for logging."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
