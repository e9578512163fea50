"""
Application settings.

A single frozen Settings object built from the environment; the API factory
and main.py take their RPC endpoint, bind address and poll periods from it.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from zeno_explorer.config.env import (
    DEFAULT_API_HOST,
    DEFAULT_API_PORT,
    DEFAULT_POLL_INTERVALS,
    DEFAULT_RPC_ENDPOINT,
    get_api_bind,
    get_poll_intervals,
    get_rpc_endpoint,
    get_rpc_timeout,
    is_poller_enabled,
)


@dataclass(frozen=True)
class Settings:
    """Typed service configuration."""

    rpc_endpoint: str = DEFAULT_RPC_ENDPOINT
    rpc_timeout_sec: float | None = None
    api_host: str = DEFAULT_API_HOST
    api_port: int = DEFAULT_API_PORT
    poll_intervals: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_POLL_INTERVALS))
    poller_enabled: bool = True


def get_settings() -> Settings:
    """
    Return the current application settings from environment (and .env).

    Raises:
        ValueError: if a numeric setting cannot be parsed.
    """
    host, port = get_api_bind()
    return Settings(
        rpc_endpoint=get_rpc_endpoint(),
        rpc_timeout_sec=get_rpc_timeout(),
        api_host=host,
        api_port=port,
        poll_intervals=get_poll_intervals(),
        poller_enabled=is_poller_enabled(),
    )
