"""
Environment variable loading for the explorer backend.

- ZENO_RPC_ENDPOINT: upstream JSON-RPC node (default http://127.0.0.1:8899)
- RPC_TIMEOUT_SEC: optional HTTP timeout for upstream calls (unset = none)
- API_HOST / API_PORT: bind address for the API server
- POLL_*_SEC: dashboard poller periods per view
- POLLER_ENABLED: start the background poller with the API (default on)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv

# Project root: config is zeno_explorer/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

DEFAULT_RPC_ENDPOINT = "http://127.0.0.1:8899"
DEFAULT_API_HOST = "0.0.0.0"
DEFAULT_API_PORT = 8000

# Poll periods (seconds) per dashboard view
DEFAULT_POLL_INTERVALS: dict[str, float] = {
    "chain": 10.0,
    "transactions": 5.0,
    "blocks": 5.0,
    "validators": 30.0,
    "price": 30.0,
}


def load_explorer_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env wins."""
    load_dotenv(_ENV_PATH, override=False)


def _env_str(name: str) -> str:
    return (os.getenv(name) or "").strip()


def _env_float(name: str, default: float) -> float:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        return float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}") from None


def _env_int(name: str, default: int) -> int:
    raw = _env_str(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


def get_rpc_endpoint() -> str:
    """Upstream JSON-RPC URL: ZENO_RPC_ENDPOINT or the local node default."""
    load_explorer_env()
    return _env_str("ZENO_RPC_ENDPOINT") or DEFAULT_RPC_ENDPOINT


def get_rpc_timeout() -> float | None:
    """Optional upstream timeout in seconds. None means wait indefinitely."""
    load_explorer_env()
    if not _env_str("RPC_TIMEOUT_SEC"):
        return None
    value = _env_float("RPC_TIMEOUT_SEC", 0.0)
    return value if value > 0 else None


def get_api_bind() -> tuple[str, int]:
    """Return (host, port) for uvicorn."""
    load_explorer_env()
    host = _env_str("API_HOST") or DEFAULT_API_HOST
    port = _env_int("API_PORT", DEFAULT_API_PORT)
    return host, port


def get_poll_intervals() -> dict[str, float]:
    """Per-view poll periods; POLL_<VIEW>_SEC overrides the default."""
    load_explorer_env()
    intervals = {}
    for view, default in DEFAULT_POLL_INTERVALS.items():
        value = _env_float(f"POLL_{view.upper()}_SEC", default)
        if value <= 0:
            raise ValueError(f"POLL_{view.upper()}_SEC must be positive")
        intervals[view] = value
    return intervals


def is_poller_enabled() -> bool:
    """Return True unless POLLER_ENABLED is set to a false-like value."""
    load_explorer_env()
    raw = _env_str("POLLER_ENABLED").lower()
    return raw not in ("0", "false", "no", "off")
