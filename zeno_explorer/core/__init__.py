"""
Core cross-cutting pieces shared by the relay, adapter and API server.
"""

from zeno_explorer.core.exceptions import (
    ParseError,
    RelayError,
    TransportError,
    UpstreamError,
)

__all__ = ["ParseError", "RelayError", "TransportError", "UpstreamError"]
