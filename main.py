"""
Main entrypoint: run the SolCard FastAPI server with uvicorn.

Env: HELIUS_API_KEY (required), API_HOST, API_PORT, LOG_LEVEL, LOG_FORMAT, etc.

Equivalent: uvicorn solcard.api_server.app:app --host 0.0.0.0 --port 3000
"""

import sys

# Configure structured JSON logging before other imports that may log
from solcard.solcard_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Validate configuration, then serve the API in the main thread."""
    import uvicorn

    from solcard.config.settings import get_settings
    from solcard.core.exceptions import ConfigurationError

    try:
        settings = get_settings()
        settings.require_helius()
    except ConfigurationError as e:
        logger.error("main_config_error", message=str(e))
        sys.exit(1)

    logger.info(
        "main_server_starting",
        host=settings.api_host,
        port=settings.api_port,
        endpoint="/api/analyze/{address}",
    )
    uvicorn.run(
        "solcard.api_server.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level="info",
    )


if __name__ == "__main__":
    main()
