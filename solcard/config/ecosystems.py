"""
Ecosystem registry: well-known Solana applications and their on-chain program IDs.

Static data loaded once at import. The registry is passed into the aggregation
engine, so tests can substitute a fixture registry. Declaration order is
significant: ecosystems with equal interaction counts are ranked in this order.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator


@dataclass(frozen=True)
class Ecosystem:
    code: str
    name: str
    program_ids: frozenset[str]
    description: str = ""


class EcosystemRegistry:
    """Immutable, ordered lookup from program ID to ecosystem."""

    def __init__(self, ecosystems: Iterable[Ecosystem]) -> None:
        ordered: list[Ecosystem] = []
        by_code: dict[str, Ecosystem] = {}
        for eco in ecosystems:
            if eco.code in by_code:
                raise ValueError(f"duplicate ecosystem code: {eco.code}")
            by_code[eco.code] = eco
            ordered.append(eco)
        self._ecosystems = tuple(ordered)
        self._by_code = by_code
        # Names, not codes, are the counting key; first declaration wins its rank.
        self._rank: dict[str, int] = {}
        for idx, eco in enumerate(self._ecosystems):
            self._rank.setdefault(eco.name, idx)
        self._by_program: dict[str, tuple[Ecosystem, ...]] = {}
        for eco in self._ecosystems:
            for pid in eco.program_ids:
                self._by_program[pid] = self._by_program.get(pid, ()) + (eco,)

    def __iter__(self) -> Iterator[Ecosystem]:
        return iter(self._ecosystems)

    def __len__(self) -> int:
        return len(self._ecosystems)

    def get(self, code: str) -> Ecosystem | None:
        return self._by_code.get(code)

    def names(self) -> list[str]:
        return sorted(self._rank, key=self._rank.__getitem__)

    def rank(self, name: str) -> int:
        """Declaration index of an ecosystem name (unknown names sort last)."""
        return self._rank.get(name, len(self._ecosystems))

    def ecosystems_for(self, program_ids: Iterable[str]) -> list[str]:
        """Distinct ecosystem names touched by the given program IDs, in declaration order."""
        touched: set[str] = set()
        for pid in program_ids:
            for eco in self._by_program.get(pid, ()):
                touched.add(eco.name)
        return sorted(touched, key=self.rank)


def _eco(code: str, name: str, description: str, *program_ids: str) -> Ecosystem:
    return Ecosystem(code=code, name=name, program_ids=frozenset(program_ids), description=description)


ECOSYSTEMS: tuple[Ecosystem, ...] = (
    _eco(
        "JUPITER", "Jupiter", "DEX Aggregator",
        "JUP6LkbZbjS1jKKwapdHNy74zcZ3tLUZoi5QNyVTaV4",
        "JUP4Fb2cqiRUcaTHdrPC8h2gNsA2ETXiPDD33WcGuJB",
        "JUP3c2Uh3WA4Ng34ocd2GKh6Er6bgE7nxkhMeL2HkQmp",
    ),
    _eco(
        "RAYDIUM", "Raydium", "AMM DEX",
        "675kPX9MHTjS2zt1qfr1NYHuzeLXfQM9H24wFSUt1Mp8",
        "CAMMCzo5YL8w4VFF8KVHrK22GGUsp5VTaW7grrKgrWqK",
        "RVKd61ztZW9GUwhRbbLoYVRE5Xf1B2tVscKqwZqXgEr",
    ),
    _eco(
        "ORCA", "Orca", "AMM DEX",
        "whirLbMiicVdio4qvUfM5KAg6Ct8VwpYzGff3uctyCc",
        "9W959DqEETiGZocYWCQPaJ6sBmUzgfxXfqGeTEdp3aQP",
    ),
    _eco(
        "PUMP_FUN", "Pump.fun", "Meme Coin Launchpad",
        "6EF8rrecthR5Dkzon8Nwu78hRvfCKubJ14M5uBEwF6P",
        "PumpFunKEqN4kJLEzD9JFbVqSyJuPqxPwJsX5FQjf1",
    ),
    _eco(
        "MAGIC_EDEN", "Magic Eden", "NFT Marketplace",
        "M2mx93ekt1fmXSVkTrUL9xVFHkmME8HTUi5Cyc5aF7K",
        "MEisE1HzehtrDpAAT8PnLHjpSSkRYakotTuJRPjTpo8",
        "1BWutmTvYPwDtmw9abTkS4Ssr8no61spGAvW1X6NDix",
    ),
    _eco(
        "TENSOR", "Tensor", "NFT Marketplace",
        "TSWAPaqyCSx2KABk68Shruf4rp7CxcNi8hAsbdwmHbN",
        "TCMPhJdwDryooaGtiocG1u3xcYbRpiJzb283XfCZsDp",
    ),
    _eco(
        "METEORA", "Meteora", "Liquidity Protocol",
        "LBUZKhRxPF3XUpBCjp4YzTKgLccjZhTSDM9YuVaPwxo",
        "Eo7WjKq67rjJQSZxS6z3YkapzY3eMj6Xy8X5EQVn5UaB",
    ),
    _eco(
        "BAGS", "Bags", "Token Launchpad",
        "FEEhPbKVKnco9EXnaY3i4R5rQVUx91wgVfu8qokixywi",
        "cpamdpZCGKUy5JxQXB4dcpGPiikHawvSWAd6mEn1sGG",
        "dbcij3LWUppWqq96dh6gJWwBifmcGfLSB5D4DuSMaqN",
    ),
    _eco("MARINADE", "Marinade", "Liquid Staking", "MarBmsSgKXdrN1egZf5sqe1TMai9K1rChYNDJgjq7aD"),
    _eco(
        "JITO", "Jito", "MEV & Liquid Staking",
        "J1toso1uCk3RLmjorhTtrVwY9HJ7X8V9yYac6Y7kGCPn",
        "Jito4APyf642JPZPx3hGc6WWJ8zPKtRbRs4P815Awbb",
    ),
    _eco(
        "KAMINO", "Kamino", "Lending & Liquidity",
        "KLend2g3cP87fffoy8q1mQqGKjrxjC8boSyAYavgmjD",
        "6LtLpnUFNByNXLyCoK9wA2MykKAmQNZKBdY8s47dehDc",
    ),
    _eco("MARGINFI", "MarginFi", "Lending Protocol", "MFv2hWf31Z9kbCa1snEPYctwafyhdvnV7FZnsebVacA"),
    _eco("DRIFT", "Drift", "Perpetuals DEX", "dRiftyHA39MWEi3m9aunc5MzRF1JYuBsbn6VPcn33UH"),
    _eco("PHOENIX", "Phoenix", "Orderbook DEX", "PhoeNiXZ8ByJGLkxNfZRnkUfjvmuYqLR89jjFHGqdXY"),
    _eco(
        "STAR_ATLAS", "Star Atlas", "Gaming",
        "BAP315i1xoAXqbJcTT1LrUS45N3tAQnNnPuNQkCcvbAr",
        "FLEET1qqzpexyaDpqb2DGsSzE2sDCizewCg9WjrA6DBW",
    ),
    _eco("GENOPETS", "Genopets", "Gaming", "GENEUpG4Ncpjy3kTpVYCy3EhLGYqWQeFWLTe6H8QYZBv"),
    _eco("BONFIDA", "Bonfida", "Name Service", "namesLPneVptA9Z5rqUDD9tMTWEJwofgaYwp8cawRkX"),
    _eco(
        "METAPLEX", "Metaplex", "NFT Infrastructure",
        "metaqbxxUerdq28cj1RbAWkYQm3ybzjb6a8bt518x1s",
        "hausS13jsjafwWwGqZTUQRmWyvyxn9EQpqMwV1PBBmk",
        "cndy3Z4yapfJBmL3ShUp5exZKqR3z33thTzeNMm2gRZ",
        "BGUMAp9Gq7iTEuizy4pqaxsTyUCBK68MDfK752saRPUY",
    ),
)

DEFAULT_REGISTRY = EcosystemRegistry(ECOSYSTEMS)
