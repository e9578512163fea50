"""
RPC relay: forwards {method, params} to a single upstream node as JSON-RPC 2.0.

- One attempt per call: no retries, no backoff, and no timeout unless one is
  configured explicitly.
- The upstream URL is injected at construction; relays for different nodes
  can coexist in one process.
- call() raises TransportError / ParseError / UpstreamError. call_or_none()
  collapses every failure to None (callers cannot tell "failed" from "empty").
"""

from __future__ import annotations

import json
from typing import Any

import httpx

from zeno_explorer.core.exceptions import (
    ParseError,
    RelayError,
    TransportError,
    UpstreamError,
)
from zeno_explorer.rpc.models import RpcRequest, RpcResponse
from zeno_explorer.zeno_logging import get_logger, relay_context

logger = get_logger(__name__)


class RpcRelay:
    """
    Thin async JSON-RPC client over httpx.

    Args:
        endpoint: Upstream node URL (e.g. http://127.0.0.1:8899).
        client: Optional shared httpx.AsyncClient (tests inject one backed by
            httpx.MockTransport). When omitted the relay owns its client and
            closes it in aclose().
        timeout_sec: Optional per-request timeout; None waits indefinitely.
    """

    def __init__(
        self,
        endpoint: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_sec: float | None = None,
    ) -> None:
        if not endpoint.strip():
            raise ValueError("endpoint must be non-empty")
        self._endpoint = endpoint.strip()
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=httpx.Timeout(timeout_sec))

    @property
    def endpoint(self) -> str:
        return self._endpoint

    async def __aenter__(self) -> "RpcRelay":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    @staticmethod
    def build_request(
        method: str,
        params: list[Any] | None = None,
        id: int | None = None,
    ) -> dict[str, Any]:
        """Return the JSON-RPC 2.0 envelope for (method, params, id)."""
        return RpcRequest.create(method, params, id).to_envelope()

    async def call(
        self,
        method: str,
        params: list[Any] | None = None,
        id: int | None = None,
    ) -> Any:
        """
        POST one JSON-RPC request and return its result.

        endpoint and method are bound into the log context for the whole
        call, so they appear on every line below (and on httpx's own logs).

        Raises:
            TransportError: network failure or non-2xx status.
            ParseError: body is not a JSON-RPC response object.
            UpstreamError: the node returned an error object.
        """
        with relay_context(self._endpoint, method):
            return await self._post(self.build_request(method, params, id), method)

    async def _post(self, body: dict[str, Any], method: str) -> Any:
        logger.debug("rpc_call", id=body["id"])
        try:
            resp = await self._client.post(self._endpoint, json=body)
        except httpx.HTTPError as e:
            logger.warning("rpc_transport_error", error=str(e))
            raise TransportError(f"RPC unavailable: {e}", method=method) from e

        if not resp.is_success:
            logger.warning(
                "rpc_transport_error",
                status_code=resp.status_code,
                reason=resp.reason_phrase,
            )
            raise TransportError(
                f"RPC call failed: HTTP {resp.status_code}",
                method=method,
                status_code=resp.status_code,
            )

        try:
            data = resp.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            logger.warning("rpc_parse_error", body=resp.text[:200])
            raise ParseError("Invalid RPC response", method=method) from e

        try:
            parsed = RpcResponse.from_payload(data, method=method)
        except ParseError:
            logger.warning("rpc_parse_error", body=resp.text[:200])
            raise

        if parsed.error is not None:
            logger.warning(
                "rpc_upstream_error",
                code=parsed.error.code,
                error=parsed.error.message,
            )
            raise UpstreamError(parsed.error.message, method=method, code=parsed.error.code)
        return parsed.result

    async def call_or_none(self, method: str, params: list[Any] | None = None) -> Any:
        """Like call(), but any RelayError becomes None."""
        try:
            return await self.call(method, params)
        except RelayError:
            return None
