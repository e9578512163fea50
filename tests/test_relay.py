"""
RPC relay tests: JSON-RPC envelope, error taxonomy, call_or_none.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from fake_node import HttpStatus, NodeError


def test_build_request_defaults():
    """Missing params and id become [] and 1."""
    from zeno_explorer.rpc.relay import RpcRelay

    assert RpcRelay.build_request("getSlot") == {
        "jsonrpc": "2.0",
        "id": 1,
        "method": "getSlot",
        "params": [],
    }


def test_build_request_keeps_explicit_values():
    from zeno_explorer.rpc.relay import RpcRelay

    body = RpcRelay.build_request("getBalance", ["abc"], 7)
    assert body == {"jsonrpc": "2.0", "id": 7, "method": "getBalance", "params": ["abc"]}
    # id 0 is a valid id, not "unset"
    assert RpcRelay.build_request("getSlot", None, 0)["id"] == 0


def test_call_posts_envelope_and_returns_result(fake_node, relay):
    fake_node.reply("getSlot", 145789)

    result = asyncio.run(relay.call("getSlot"))

    assert result == 145789
    assert fake_node.calls == [
        {"jsonrpc": "2.0", "id": 1, "method": "getSlot", "params": []}
    ]


def test_call_posts_to_injected_endpoint(make_relay):
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.host, request.url.port, request.headers.get("content-type")))
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": "ok"})

    relay = make_relay(handler)
    assert asyncio.run(relay.call("getHealth")) == "ok"
    assert seen == [("POST", "fake-node", 8899, "application/json")]


def test_null_result_is_a_result(fake_node, relay):
    fake_node.reply("getTransaction", None)
    assert asyncio.run(relay.call("getTransaction", ["sig"])) is None


def test_http_500_is_transport_error(fake_node, relay):
    """Upstream HTTP 500 never resolves to a parsed result."""
    from zeno_explorer.core.exceptions import TransportError

    fake_node.reply("getSlot", HttpStatus(500, '{"jsonrpc":"2.0","id":1,"result":5}'))

    with pytest.raises(TransportError) as exc_info:
        asyncio.run(relay.call("getSlot"))
    assert exc_info.value.kind == "transport"
    assert exc_info.value.status_code == 500
    assert "HTTP 500" in exc_info.value.message


def test_network_failure_is_transport_error(make_relay):
    from zeno_explorer.core.exceptions import TransportError

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    relay = make_relay(handler)
    with pytest.raises(TransportError) as exc_info:
        asyncio.run(relay.call("getHealth"))
    assert exc_info.value.message.startswith("RPC unavailable")


def test_non_json_body_is_parse_error(fake_node, relay):
    from zeno_explorer.core.exceptions import ParseError

    fake_node.reply("getSlot", HttpStatus(200, "<html>gateway</html>"))

    with pytest.raises(ParseError) as exc_info:
        asyncio.run(relay.call("getSlot"))
    assert exc_info.value.kind == "parse"
    assert exc_info.value.message == "Invalid RPC response"


def test_body_without_result_or_error_is_parse_error(make_relay):
    from zeno_explorer.core.exceptions import ParseError

    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1})

    with pytest.raises(ParseError):
        asyncio.run(make_relay(handler).call("getSlot"))


def test_upstream_error_keeps_message(fake_node, relay):
    """{error: {message: "X"}} fails with message "X"."""
    from zeno_explorer.core.exceptions import UpstreamError

    fake_node.reply("getBlock", NodeError("X", code=-32009))

    with pytest.raises(UpstreamError) as exc_info:
        asyncio.run(relay.call("getBlock", [1]))
    assert str(exc_info.value) == "X"
    assert exc_info.value.code == -32009
    assert exc_info.value.method == "getBlock"


def test_call_or_none_collapses_failures(fake_node, relay):
    fake_node.reply("getSlot", HttpStatus(503))
    fake_node.reply("getBlock", NodeError("Block not available"))

    async def run():
        return await relay.call_or_none("getSlot"), await relay.call_or_none("getBlock", [3])

    assert asyncio.run(run()) == (None, None)


def test_empty_endpoint_rejected():
    from zeno_explorer.rpc.relay import RpcRelay

    with pytest.raises(ValueError):
        RpcRelay("  ")


def test_relays_for_different_endpoints_coexist():
    from zeno_explorer.rpc.relay import RpcRelay

    def answer(tag):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json={"jsonrpc": "2.0", "id": 1, "result": tag})

        return handler

    a = RpcRelay("http://node-a:8899", client=httpx.AsyncClient(transport=httpx.MockTransport(answer("a"))))
    b = RpcRelay("http://node-b:8899", client=httpx.AsyncClient(transport=httpx.MockTransport(answer("b"))))

    async def run():
        return await asyncio.gather(a.call("getHealth"), b.call("getHealth"))

    assert asyncio.run(run()) == ["a", "b"]
    assert (a.endpoint, b.endpoint) == ("http://node-a:8899", "http://node-b:8899")
