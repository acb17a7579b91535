"""
Main entrypoint: run the explainer FastAPI server with uvicorn.

Env: SUI_NETWORK, SUI_RPC_URL, SUI_FALLBACK_RPC_URLS, API_HOST, API_PORT, LOG_LEVEL, etc.

Equivalent: uvicorn sui_explainer.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os

# Configure structured JSON logging before other imports that may log
from sui_explainer.explainer_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Load settings, then serve the API in the main thread."""
    from sui_explainer.config import get_settings

    api_host = os.getenv("API_HOST", "0.0.0.0").strip()
    api_port = int(os.getenv("API_PORT", "8000").strip() or "8000")
    settings = get_settings()

    from sui_explainer.api_server.app import app
    import uvicorn

    logger.info(
        "main_server_starting",
        host=api_host,
        port=api_port,
        network=settings.network,
        rpc_url=settings.rpc_url,
    )
    uvicorn.run(app, host=api_host, port=api_port, log_level=os.getenv("LOG_LEVEL", "info").lower())


if __name__ == "__main__":
    main()
