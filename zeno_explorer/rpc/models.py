"""
JSON-RPC 2.0 request/response models for the relay.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from zeno_explorer.core.exceptions import ParseError

JSONRPC_VERSION = "2.0"
DEFAULT_REQUEST_ID = 1


@dataclass(frozen=True)
class RpcRequest:
    """
    One relayed call. id defaults to 1 and params to an empty list, matching
    what the dashboard sends when it omits them.
    """

    method: str
    params: list[Any] = field(default_factory=list)
    id: int = DEFAULT_REQUEST_ID

    @classmethod
    def create(
        cls,
        method: str,
        params: list[Any] | None = None,
        id: int | None = None,
    ) -> "RpcRequest":
        return cls(
            method=method,
            params=list(params) if params else [],
            id=id if id is not None else DEFAULT_REQUEST_ID,
        )

    def to_envelope(self) -> dict[str, Any]:
        """JSON-RPC 2.0 body POSTed to the upstream node."""
        return {
            "jsonrpc": JSONRPC_VERSION,
            "id": self.id,
            "method": self.method,
            "params": self.params,
        }


@dataclass(frozen=True)
class RpcErrorObject:
    message: str
    code: int | None = None


@dataclass(frozen=True)
class RpcResponse:
    """
    Parsed upstream response. Exactly one of result/error is meaningful;
    a body carrying neither key is rejected as malformed.
    """

    result: Any = None
    error: RpcErrorObject | None = None

    @classmethod
    def from_payload(cls, data: Any, method: str | None = None) -> "RpcResponse":
        """Build from a decoded JSON body; raise ParseError on unexpected shape."""
        if not isinstance(data, dict):
            raise ParseError("RPC response is not a JSON object", method=method)
        if "error" in data and data["error"] is not None:
            err = data["error"]
            if isinstance(err, dict):
                code = err.get("code")
                return cls(
                    error=RpcErrorObject(
                        message=str(err.get("message") or "RPC call failed"),
                        code=code if isinstance(code, int) else None,
                    )
                )
            return cls(error=RpcErrorObject(message=str(err)))
        if "result" not in data:
            raise ParseError("RPC response has neither result nor error", method=method)
        return cls(result=data["result"])
