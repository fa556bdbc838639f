"""
Helius adapter for WalletDataSource.

- balance: JSON-RPC getBalance (lamports -> SOL)
- transactions: enhanced transactions REST endpoint, one page
- assets: DAS getAssetsByOwner, page 1, fungible tokens included

Parsing accepts both the enhanced/DAS shapes and the plain RPC / v0 balances
shapes, so the provider can change API version without touching aggregation.
Any transport, status or JSON-RPC error raises UpstreamFetchFailure.
"""

from __future__ import annotations

from typing import Any

import httpx

from solcard.config.settings import Settings
from solcard.core.exceptions import UpstreamFetchFailure
from solcard.ingestion.models import (
    DEFAULT_TOKEN_DECIMALS,
    LAMPORTS_PER_SOL,
    AssetRecord,
    TransactionRecord,
)
from solcard.solcard_logging import get_logger, short_wallet

logger = get_logger(__name__)

FUNGIBLE_INTERFACES = frozenset({"FungibleToken", "FungibleAsset"})
RPC_REQUEST_ID = "solcard"


# -----------------------------------------------------------------------------
# Parsing
# -----------------------------------------------------------------------------

def _as_float(value: Any) -> float | None:
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _as_int(value: Any) -> int | None:
    f = _as_float(value)
    return int(f) if f is not None else None


def _as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _first_str(*values: Any) -> str | None:
    for v in values:
        if isinstance(v, str) and v.strip():
            return v.strip()
    return None


def _program_ids_from_instructions(instructions: Any) -> set[str]:
    programs: set[str] = set()
    for ix in instructions or []:
        if not isinstance(ix, dict):
            continue
        pid = ix.get("programId") or ix.get("program_id")
        if pid:
            programs.add(str(pid))
        programs |= _program_ids_from_instructions(ix.get("innerInstructions"))
    return programs


def program_ids_from_transaction(tx: dict[str, Any]) -> frozenset[str]:
    """
    Collect every account and program ID a transaction touches.

    Enhanced shape: accountData[].account, instructions[].programId (+ innerInstructions).
    RPC shape: transaction.message.accountKeys (str or {pubkey}), message.instructions,
    meta.innerInstructions.
    """
    ids: set[str] = set()
    for entry in tx.get("accountData") or []:
        if isinstance(entry, dict) and entry.get("account"):
            ids.add(str(entry["account"]))
    ids |= _program_ids_from_instructions(tx.get("instructions"))

    inner_tx = tx.get("transaction")
    message = inner_tx.get("message") if isinstance(inner_tx, dict) else None
    if isinstance(message, dict):
        for key in message.get("accountKeys") or []:
            if isinstance(key, str):
                ids.add(key)
            elif isinstance(key, dict) and key.get("pubkey"):
                ids.add(str(key["pubkey"]))
        ids |= _program_ids_from_instructions(message.get("instructions"))
    meta = tx.get("meta")
    if isinstance(meta, dict):
        for group in meta.get("innerInstructions") or []:
            if isinstance(group, dict):
                ids |= _program_ids_from_instructions(group.get("instructions"))
    return frozenset(ids)


def parse_transaction(tx: Any) -> TransactionRecord | None:
    """Normalise one transaction; returns None when it has no usable timestamp."""
    if not isinstance(tx, dict):
        return None
    ts = _as_int(tx.get("timestamp"))
    if ts is None:
        ts = _as_int(tx.get("blockTime"))
    if ts is None:
        return None
    meta = tx.get("meta")
    failed = bool(tx.get("transactionError")) or (isinstance(meta, dict) and bool(meta.get("err")))
    signature = tx.get("signature")
    if signature is None and isinstance(tx.get("transaction"), dict):
        sigs = tx["transaction"].get("signatures") or []
        signature = sigs[0] if sigs else None
    return TransactionRecord(
        timestamp=ts,
        program_ids=program_ids_from_transaction(tx),
        signature=signature,
        succeeded=not failed,
    )


def parse_transactions(payload: Any) -> list[TransactionRecord]:
    """Normalise a page of transactions, most recent first."""
    if isinstance(payload, dict):
        payload = payload.get("transactions") or payload.get("result") or []
    records: list[TransactionRecord] = []
    for raw in payload or []:
        rec = parse_transaction(raw)
        if rec is None:
            logger.debug("helius_transaction_skipped", reason="no_timestamp")
            continue
        records.append(rec)
    # Stable: equal timestamps keep provider order
    return sorted(records, key=lambda r: r.timestamp, reverse=True)


def parse_asset(item: Any) -> AssetRecord | None:
    """
    Normalise one DAS asset or v0 balances token.

    DAS: interface, token_info.{balance, decimals, symbol, price_info.total_price},
    content.metadata.{symbol, name}. v0: mint, amount, decimals, tokenAccount.{tokenSymbol, tokenName}.
    """
    if not isinstance(item, dict):
        return None
    token_info = _as_dict(item.get("token_info"))
    metadata = _as_dict(_as_dict(item.get("content")).get("metadata"))
    token_account = _as_dict(item.get("tokenAccount"))

    raw_amount = _as_float(token_info.get("balance"))
    if raw_amount is None:
        raw_amount = _as_float(item.get("amount"))
    if raw_amount is None:
        return None

    decimals = _as_int(token_info.get("decimals"))
    if decimals is None:
        decimals = _as_int(item.get("decimals"))
    if decimals is None or decimals < 0:
        decimals = DEFAULT_TOKEN_DECIMALS

    interface = item.get("interface")
    if interface:
        fungible = interface in FUNGIBLE_INTERFACES
    else:
        fungible = decimals > 0

    usd_value = _as_float(_as_dict(token_info.get("price_info")).get("total_price"))
    if usd_value is None:
        usd_value = _as_float(item.get("usdValue"))

    return AssetRecord(
        raw_amount=raw_amount,
        decimals=decimals,
        fungible=fungible,
        symbol=_first_str(token_info.get("symbol"), metadata.get("symbol"), token_account.get("tokenSymbol"), item.get("symbol")),
        name=_first_str(metadata.get("name"), token_info.get("name"), token_account.get("tokenName"), item.get("name")),
        mint=_first_str(item.get("id"), item.get("mint")),
        usd_value=usd_value,
    )


def parse_assets(payload: Any) -> list[AssetRecord]:
    if isinstance(payload, dict):
        payload = payload.get("items") or payload.get("tokens") or []
    assets: list[AssetRecord] = []
    for item in payload or []:
        rec = parse_asset(item)
        if rec is None:
            logger.debug("helius_asset_skipped", reason="no_amount")
            continue
        assets.append(rec)
    return assets


def lamports_from_balance(result: Any) -> int:
    """getBalance result is {context, value}; some proxies return the bare integer."""
    if isinstance(result, dict):
        result = result.get("value")
    lamports = _as_int(result)
    return max(lamports or 0, 0)


# -----------------------------------------------------------------------------
# Source
# -----------------------------------------------------------------------------

class HeliusWalletSource:
    """WalletDataSource backed by Helius RPC, DAS and enhanced transactions."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        api_key: str,
        rpc_url: str,
        api_base: str,
        tx_limit: int = 100,
        asset_limit: int = 1000,
        only_successful: bool = False,
    ) -> None:
        self._client = client
        self._api_key = api_key
        self._rpc_url = rpc_url
        self._api_base = api_base.rstrip("/")
        self._tx_limit = tx_limit
        self._asset_limit = asset_limit
        self._only_successful = only_successful

    @classmethod
    def from_settings(cls, client: httpx.AsyncClient, settings: Settings) -> "HeliusWalletSource":
        settings.require_helius()
        return cls(
            client,
            api_key=settings.helius_api_key,
            rpc_url=settings.helius_rpc_url,
            api_base=settings.helius_api_base,
            tx_limit=settings.tx_page_limit,
            asset_limit=settings.asset_page_limit,
            only_successful=settings.only_successful,
        )

    async def _request(self, operation: str, method: str, url: str, **kwargs: Any) -> Any:
        try:
            r = await self._client.request(method, url, **kwargs)
            r.raise_for_status()
            return r.json()
        except httpx.HTTPStatusError as e:
            raise UpstreamFetchFailure(operation, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            raise UpstreamFetchFailure(operation, f"{type(e).__name__}: {e}") from e
        except ValueError as e:
            raise UpstreamFetchFailure(operation, "invalid JSON response") from e

    async def _rpc(self, operation: str, method: str, params: Any) -> Any:
        body = {"jsonrpc": "2.0", "id": RPC_REQUEST_ID, "method": method, "params": params}
        data = await self._request(operation, "POST", self._rpc_url, json=body)
        if not isinstance(data, dict):
            raise UpstreamFetchFailure(operation, "unexpected RPC payload")
        if data.get("error"):
            err = data["error"]
            message = err.get("message") if isinstance(err, dict) else str(err)
            raise UpstreamFetchFailure(operation, f"RPC error: {message}")
        return data.get("result")

    async def get_balance(self, address: str) -> float:
        result = await self._rpc("balance", "getBalance", [address])
        return lamports_from_balance(result) / LAMPORTS_PER_SOL

    async def get_transactions(self, address: str) -> list[TransactionRecord]:
        url = f"{self._api_base}/addresses/{address}/transactions"
        payload = await self._request(
            "transactions",
            "GET",
            url,
            params={"api-key": self._api_key, "limit": self._tx_limit},
        )
        records = parse_transactions(payload)
        if self._only_successful:
            records = [r for r in records if r.succeeded]
        logger.debug("helius_transactions_fetched", wallet_id=short_wallet(address), count=len(records))
        return records

    async def get_assets(self, address: str) -> list[AssetRecord]:
        params = {
            "ownerAddress": address,
            "page": 1,
            "limit": self._asset_limit,
            "displayOptions": {"showFungible": True},
        }
        result = await self._rpc("assets", "getAssetsByOwner", params)
        assets = parse_assets(result)
        logger.debug("helius_assets_fetched", wallet_id=short_wallet(address), count=len(assets))
        return assets
