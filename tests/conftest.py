"""
Pytest fixtures for SolCard tests: a fixture ecosystem registry, an in-memory
data source and a FastAPI TestClient wired to it.
"""

from __future__ import annotations

import pytest

from solcard.config.ecosystems import Ecosystem, EcosystemRegistry
from tests.helpers import (
    ALPHA_PROGRAM,
    ALPHA_PROGRAM_2,
    BETA_PROGRAM,
    GAMMA_PROGRAM,
    NOW,
    FakeSource,
)


@pytest.fixture
def registry() -> EcosystemRegistry:
    return EcosystemRegistry(
        [
            Ecosystem("ALPHA", "Alpha", frozenset({ALPHA_PROGRAM, ALPHA_PROGRAM_2}), "DEX"),
            Ecosystem("BETA", "Beta", frozenset({BETA_PROGRAM}), "Lending"),
            Ecosystem("GAMMA", "Gamma", frozenset({GAMMA_PROGRAM}), "NFT"),
        ]
    )


@pytest.fixture
def fake_source() -> FakeSource:
    return FakeSource()


@pytest.fixture
def client(fake_source, registry):
    """TestClient whose analyzer reads from fake_source; lifespan (Helius) is not started."""
    from fastapi.testclient import TestClient

    from solcard.analytics.aggregator import WalletAnalyzer
    from solcard.api_server.server import app, get_analyzer
    from solcard.ingestion.fetcher import WalletDataFetcher

    analyzer = WalletAnalyzer(
        WalletDataFetcher(fake_source, timeout_sec=1.0),
        registry=registry,
        clock=lambda: NOW,
    )
    app.dependency_overrides[get_analyzer] = lambda: analyzer
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
