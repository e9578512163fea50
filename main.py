"""
Main entrypoint: FastAPI server with the dashboard poller in its lifespan.

The poller runs as asyncio tasks on the server's event loop (disable with
POLLER_ENABLED=0). On SIGINT/SIGTERM uvicorn shuts down, the lifespan stops
the poller and closes the relay.

Env: ZENO_RPC_ENDPOINT, RPC_TIMEOUT_SEC, API_HOST, API_PORT, POLL_*_SEC, LOG_LEVEL.

Equivalent: uvicorn zeno_explorer.api_server.app:app --host 0.0.0.0 --port 8000
"""

import os
import sys

# Configure structured JSON logging before other imports that may log
from zeno_explorer.zeno_logging import get_logger

logger = get_logger("main")


def main() -> None:
    """Load settings, build the app and run it in the main thread."""
    from zeno_explorer.config import get_settings

    try:
        settings = get_settings()
    except ValueError as e:
        logger.error("main_config_error", error=str(e))
        sys.exit(1)

    from zeno_explorer.api_server.server import create_app
    import uvicorn

    app = create_app(settings)
    logger.info(
        "main_server_starting",
        host=settings.api_host,
        port=settings.api_port,
        endpoint=settings.rpc_endpoint,
    )
    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_level=os.getenv("LOG_LEVEL", "info").lower(),
        # keep the structlog handler installed by zeno_logging
        log_config=None,
    )


if __name__ == "__main__":
    main()
