"""
FastAPI server: JSON-RPC relay endpoint plus the dashboard read API.

- POST /api/rpc forwards {method, params, id} to the upstream node verbatim.
- GET /api/chain, /api/transactions, /api/blocks, /api/validators, /api/price
  return adapter summaries (camelCase, never an error).
- GET /api/search?q= resolves a query to a transaction, block or address.
- GET /api/dashboard returns the poller's latest snapshot per view.
Config via env (ZENO_RPC_ENDPOINT, POLL_*_SEC, POLLER_ENABLED).
"""

from __future__ import annotations

import asyncio
from contextlib import asynccontextmanager
from typing import Any

from fastapi import Depends, FastAPI, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from zeno_explorer import __version__
from zeno_explorer.config import Settings, get_settings
from zeno_explorer.core.exceptions import RelayError
from zeno_explorer.explorer.adapter import (
    DEFAULT_RECENT_LIMIT,
    get_chain_summary,
    get_price_summary,
    get_recent_blocks,
    get_recent_transactions,
    get_validator_summary,
)
from zeno_explorer.explorer.poller import DashboardPoller
from zeno_explorer.explorer.search import (
    AddressMatch,
    BlockMatch,
    SearchResult,
    TransactionMatch,
    search_blockchain,
)
from zeno_explorer.rpc.relay import RpcRelay
from zeno_explorer.zeno_logging import get_logger

logger = get_logger(__name__)

MAX_LIST_LIMIT = 1000


# -----------------------------------------------------------------------------
# Request models
# -----------------------------------------------------------------------------


class RpcRelayRequest(BaseModel):
    """POST /api/rpc body. params and id default to [] and 1 upstream."""

    method: str = Field(..., min_length=1, description="JSON-RPC method name, e.g. getSlot")
    params: list[Any] | None = Field(None, description="Positional params")
    id: int | None = Field(None, description="Request id echoed by the node")


# -----------------------------------------------------------------------------
# Dependencies
# -----------------------------------------------------------------------------


def get_relay(request: Request) -> RpcRelay:
    relay = getattr(request.app.state, "relay", None)
    if relay is None:
        raise HTTPException(status_code=503, detail="RPC relay not initialised")
    return relay


def get_poller(request: Request) -> DashboardPoller:
    poller = getattr(request.app.state, "poller", None)
    if poller is None:
        raise HTTPException(status_code=503, detail="Dashboard poller not initialised")
    return poller


def render_search_result(result: SearchResult | None) -> dict[str, Any] | None:
    """Flatten a search match into {"kind": ..., **payload}."""
    match result:
        case TransactionMatch(payload=tx):
            return {"kind": "transaction", **tx.to_dict()}
        case BlockMatch(payload=block):
            return {"kind": "block", **block.to_dict()}
        case AddressMatch(payload=address):
            return {"kind": "address", **address.to_dict()}
        case None:
            return None
    raise TypeError(f"unexpected search result {result!r}")


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------


def create_app(
    settings: Settings | None = None,
    relay: RpcRelay | None = None,
) -> FastAPI:
    """
    Build the API app.

    Args:
        settings: Service settings; read from the environment when omitted.
        relay: Pre-built relay (tests inject one over httpx.MockTransport).
            When omitted the lifespan creates one for settings.rpc_endpoint
            and closes it on shutdown.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Open the relay, start the poller if enabled; stop both on shutdown."""
        owned = relay is None
        app_relay = relay or RpcRelay(
            settings.rpc_endpoint, timeout_sec=settings.rpc_timeout_sec
        )
        poller = DashboardPoller(app_relay, settings.poll_intervals)
        app.state.relay = app_relay
        app.state.poller = poller
        if settings.poller_enabled:
            poller.start()
        logger.info(
            "api_started",
            endpoint=app_relay.endpoint,
            poller_enabled=settings.poller_enabled,
        )

        yield

        await poller.stop()
        if owned:
            await app_relay.aclose()
        logger.info("api_stopped")

    app = FastAPI(
        title="Zeno Explorer API",
        description="JSON-RPC relay and dashboard summaries for a Zeno node.",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    @app.post("/api/rpc")
    async def relay_rpc(body: RpcRelayRequest, rpc: RpcRelay = Depends(get_relay)) -> JSONResponse:
        """
        Relay one call. 200 {"result"} on success; 500 {"error", "kind"} when
        the node is unreachable, answers garbage, or returns an error object.
        """
        try:
            result = await rpc.call(body.method, body.params, body.id)
        except RelayError as e:
            logger.warning("api_rpc_failed", method=body.method, kind=e.kind, error=e.message)
            return JSONResponse(
                status_code=500,
                content={"error": e.message, "kind": e.kind},
            )
        return JSONResponse(status_code=200, content={"result": result})

    @app.get("/api/chain")
    async def chain(rpc: RpcRelay = Depends(get_relay)) -> dict[str, Any]:
        summary = await get_chain_summary(rpc)
        return summary.to_dict()

    @app.get("/api/transactions")
    async def transactions(
        limit: int = Query(DEFAULT_RECENT_LIMIT, ge=0, le=MAX_LIST_LIMIT),
        rpc: RpcRelay = Depends(get_relay),
    ) -> list[dict[str, Any]]:
        return [tx.to_dict() for tx in await get_recent_transactions(rpc, limit)]

    @app.get("/api/blocks")
    async def blocks(
        limit: int = Query(DEFAULT_RECENT_LIMIT, ge=0, le=MAX_LIST_LIMIT),
        rpc: RpcRelay = Depends(get_relay),
    ) -> list[dict[str, Any]]:
        return [block.to_dict() for block in await get_recent_blocks(rpc, limit)]

    @app.get("/api/validators")
    async def validators(rpc: RpcRelay = Depends(get_relay)) -> dict[str, Any]:
        summary = await get_validator_summary(rpc)
        return summary.to_dict()

    @app.get("/api/price")
    async def price(rpc: RpcRelay = Depends(get_relay)) -> dict[str, Any]:
        summary = await get_price_summary(rpc)
        return summary.to_dict()

    @app.get("/api/search")
    async def search(
        q: str = Query("", description="Signature, block height or address"),
        rpc: RpcRelay = Depends(get_relay),
    ) -> dict[str, Any]:
        """Returns {"result": null} when nothing matches."""
        result = await search_blockchain(rpc, q)
        return {"result": render_search_result(result)}

    @app.get("/api/dashboard")
    async def dashboard(
        refresh: bool = Query(False, description="Run one cycle per view before answering"),
        poller: DashboardPoller = Depends(get_poller),
    ) -> dict[str, Any]:
        """Latest value per view with its sequence number (0 = not yet fetched)."""
        if refresh:
            await asyncio.gather(*(poller.refresh(view) for view in poller.views))
        return {
            "running": poller.running,
            "views": {name: snap.to_dict() for name, snap in poller.snapshot().items()},
        }

    @app.get("/health")
    def health() -> dict[str, str]:
        """Liveness probe: API is up."""
        return {"status": "ok"}

    @app.exception_handler(HTTPException)
    def http_exception_handler(request: Any, exc: HTTPException) -> JSONResponse:
        """Consistent JSON error response for HTTPException."""
        return JSONResponse(
            status_code=exc.status_code,
            content={"detail": exc.detail},
        )

    return app
