"""
FastAPI server for wallet card analysis.

Exposes GET /api/analyze/{address} returning the WalletAnalysis for a wallet,
and GET /health. The Helius client and analyzer are created in the lifespan
and shared across requests; all per-request state stays local to the request.
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import Any

import httpx
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from solcard import __version__
from solcard.analytics.aggregator import WalletAnalyzer
from solcard.config.env import mask_api_key
from solcard.config.settings import Settings, get_settings
from solcard.core.exceptions import AggregationFailure, InvalidAddress, validate_wallet_address
from solcard.api_server.middleware import log_requests
from solcard.ingestion.fetcher import WalletDataFetcher
from solcard.ingestion.helius import HeliusWalletSource
from solcard.solcard_logging import get_logger, short_wallet

logger = get_logger(__name__)

INVALID_ADDRESS_ERROR = "Invalid Solana address"
ANALYSIS_FAILED_ERROR = "Analysis failed"
ANALYSIS_FAILED_MESSAGE = "Failed to analyze wallet"


# -----------------------------------------------------------------------------
# Dependency
# -----------------------------------------------------------------------------

def get_analyzer(request: Request) -> WalletAnalyzer:
    """Dependency: the process-wide analyzer built in the lifespan."""
    return request.app.state.analyzer


# -----------------------------------------------------------------------------
# Lifespan: one pooled HTTP client per process
# -----------------------------------------------------------------------------

def build_lifespan(settings: Settings):
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Create the Helius client and analyzer; close the client on shutdown."""
        settings.require_helius()
        client = httpx.AsyncClient(timeout=settings.fetch_timeout_sec)
        source = HeliusWalletSource.from_settings(client, settings)
        fetcher = WalletDataFetcher(source, timeout_sec=settings.fetch_timeout_sec)
        app.state.analyzer = WalletAnalyzer.from_settings(fetcher, settings)
        logger.info(
            "api_started",
            rpc_url=mask_api_key(settings.helius_rpc_url),
            rank_key=settings.holdings_rank_key,
            window_days=settings.ecosystem_window_days,
        )
        try:
            yield
        finally:
            await client.aclose()
            logger.info("api_stopped")

    return lifespan


# -----------------------------------------------------------------------------
# App and routes
# -----------------------------------------------------------------------------

def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(
        title="SolCard API",
        description="Solana wallet analysis for shareable cards.",
        version=__version__,
        lifespan=build_lifespan(settings),
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_methods=["GET"],
        allow_headers=["*"],
    )
    app.middleware("http")(log_requests)

    @app.exception_handler(InvalidAddress)
    def invalid_address_handler(request: Request, exc: InvalidAddress) -> JSONResponse:
        return JSONResponse(
            status_code=400,
            content={"error": INVALID_ADDRESS_ERROR, "message": str(exc)},
        )

    @app.exception_handler(AggregationFailure)
    def aggregation_failure_handler(request: Request, exc: AggregationFailure) -> JSONResponse:
        return JSONResponse(
            status_code=500,
            content={"error": ANALYSIS_FAILED_ERROR, "message": ANALYSIS_FAILED_MESSAGE},
        )

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok", "message": "Solana Card API is running"}

    @app.get("/api/analyze/{address}")
    async def analyze_wallet(
        address: str,
        analyzer: WalletAnalyzer = Depends(get_analyzer),
    ) -> JSONResponse:
        """
        Analyze a wallet and return {success: true, data: WalletAnalysis}.

        400 when the address is not 32-44 characters (no upstream call is made),
        500 when the analysis itself fails.
        """
        address = validate_wallet_address(address)
        logger.info("analyze_wallet_called", wallet_id=short_wallet(address))
        try:
            analysis = await analyzer.analyze(address)
        except AggregationFailure:
            raise
        except Exception as e:
            logger.exception("analyze_wallet_failed", wallet_id=short_wallet(address), error=str(e))
            raise AggregationFailure(str(e)) from e
        content: dict[str, Any] = {"success": True, "data": analysis.to_response()}
        return JSONResponse(status_code=200, content=content)

    return app


app = create_app()
