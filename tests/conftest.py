"""
Pytest fixtures for explorer tests. The upstream node is faked with
httpx.MockTransport; nothing touches the network.
"""

from __future__ import annotations

from typing import Any, Callable

import httpx
import pytest

from fake_node import FAKE_ENDPOINT, FakeNode


@pytest.fixture
def fake_node() -> FakeNode:
    return FakeNode()


@pytest.fixture
def make_relay(fake_node) -> Callable[..., Any]:
    """Factory: RpcRelay over the fake node (or a custom handler)."""
    from zeno_explorer.rpc.relay import RpcRelay

    def _make(handler: Callable[[httpx.Request], httpx.Response] | None = None):
        transport = httpx.MockTransport(handler or fake_node.handler)
        return RpcRelay(FAKE_ENDPOINT, client=httpx.AsyncClient(transport=transport))

    return _make


@pytest.fixture
def relay(make_relay):
    return make_relay()


@pytest.fixture
def client(fake_node, relay):
    """FastAPI TestClient over the fake node, poller disabled; lifespan runs."""
    from fastapi.testclient import TestClient

    from zeno_explorer.api_server.server import create_app
    from zeno_explorer.config import Settings

    app = create_app(Settings(rpc_endpoint=FAKE_ENDPOINT, poller_enabled=False), relay=relay)
    with TestClient(app) as test_client:
        yield test_client
