"""
Relay error taxonomy.

TransportError: network failure or non-2xx HTTP status from the upstream node.
ParseError: body is not JSON or not a JSON-RPC response object.
UpstreamError: the node answered with a JSON-RPC error object.

Adapter and search functions absorb these at their boundary; only the
/api/rpc route surfaces them (as {"error", "kind"}).
"""

from __future__ import annotations


class RelayError(Exception):
    """Base class for failures of a single relayed JSON-RPC call."""

    kind = "relay"

    def __init__(self, message: str, *, method: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.method = method


class TransportError(RelayError):
    kind = "transport"

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message, method=method)
        self.status_code = status_code


class ParseError(RelayError):
    kind = "parse"


class UpstreamError(RelayError):
    kind = "upstream"

    def __init__(
        self,
        message: str,
        *,
        method: str | None = None,
        code: int | None = None,
    ) -> None:
        super().__init__(message, method=method)
        self.code = code
