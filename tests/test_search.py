"""
Search resolver tests: classification order, probe fall-through, no-RPC
short-circuit for blank input.
"""

from __future__ import annotations

import asyncio
from decimal import Decimal

import httpx

from fake_node import HttpStatus, NodeError

KNOWN_SIG = "5VERv8NMvzbJMEkV8xnrLkEaWRtSz9CosKDYjCJjBRnbJLgp8uirBgmQpjKhoR4tjF3ZpRzrFmBV6UjKdiSZkQUW"
FUNDED_ADDRESS = "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka"[:40]


def _transaction_result(signature: str) -> dict:
    return {
        "slot": 145789,
        "blockTime": 1_700_000_123,
        "transaction": {
            "signatures": [signature],
            "message": {"instructions": [{"programIdIndex": 1}, {"programIdIndex": 2}, {"programIdIndex": 3}]},
        },
        "meta": {"err": None, "fee": 5000},
    }


def test_known_signature_resolves_to_transaction(fake_node, relay):
    from zeno_explorer.explorer.search import TransactionMatch, search_blockchain

    assert len(KNOWN_SIG) == 88
    fake_node.reply(
        "getTransaction",
        lambda params: _transaction_result(params[0]) if params[0] == KNOWN_SIG else None,
    )

    result = asyncio.run(search_blockchain(relay, f"  {KNOWN_SIG}  "))

    assert isinstance(result, TransactionMatch)
    assert result.kind == "transaction"
    assert result.payload.signature == KNOWN_SIG
    assert result.payload.slot == 145789
    assert result.payload.fee == 5000
    assert result.payload.instruction_count == 3
    assert result.payload.success is True
    assert fake_node.methods_called() == ["getTransaction"]


def test_height_resolves_to_block(fake_node, relay):
    from zeno_explorer.explorer.search import BlockMatch, search_blockchain

    fake_node.reply(
        "getBlock",
        lambda params: {
            "blockhash": "8Yq2t5o7Fhg2kAUuA5dLB3wnxSdBGJ6MP8S1ZqD7nLZo",
            "parentSlot": params[0] - 1,
            "blockTime": 1_700_000_000,
            "signatures": ["a", "b"],
        },
    )

    result = asyncio.run(search_blockchain(relay, "145789"))

    assert isinstance(result, BlockMatch)
    assert result.kind == "block"
    assert result.payload.slot == 145789
    assert result.payload.parent_slot == 145788
    assert result.payload.transaction_count == 2
    assert fake_node.calls[0]["params"][0] == 145789


def test_funded_address_resolves_to_address(fake_node, relay):
    from zeno_explorer.explorer.search import AddressMatch, search_blockchain

    assert len(FUNDED_ADDRESS) == 40
    fake_node.reply("getBalance", {"context": {"slot": 1}, "value": 2_500_000_000})

    result = asyncio.run(search_blockchain(relay, FUNDED_ADDRESS))

    assert isinstance(result, AddressMatch)
    assert result.kind == "address"
    assert result.payload.address == FUNDED_ADDRESS
    assert result.payload.balance == Decimal("2.5")
    assert fake_node.methods_called() == ["getBalance"]


def test_zero_balance_is_still_a_hit(fake_node, relay):
    from zeno_explorer.explorer.search import AddressMatch, search_blockchain

    fake_node.reply("getBalance", {"context": {"slot": 1}, "value": 0})

    result = asyncio.run(search_blockchain(relay, FUNDED_ADDRESS))

    assert isinstance(result, AddressMatch)
    assert result.payload.balance == 0


def test_empty_query_issues_no_calls(relay, fake_node):
    from zeno_explorer.explorer.search import search_blockchain

    async def run():
        return [await search_blockchain(relay, q) for q in ("", "   ", "\t\n")]

    assert asyncio.run(run()) == [None, None, None]
    assert fake_node.calls == []


def test_unclassifiable_query_is_not_found(fake_node, relay):
    from zeno_explorer.explorer.search import search_blockchain

    assert asyncio.run(search_blockchain(relay, "not-a-real-query")) is None
    assert fake_node.calls == []


def test_missing_block_is_not_found(fake_node, relay):
    from zeno_explorer.explorer.search import search_blockchain

    fake_node.reply("getBlock", NodeError("Slot 145789 was skipped", code=-32007))

    assert asyncio.run(search_blockchain(relay, "145789")) is None
    assert fake_node.methods_called() == ["getBlock"]


def test_transaction_miss_falls_through_to_later_probes(fake_node, relay):
    """An 88-char string is only signature-shaped; a miss ends as not found."""
    from zeno_explorer.explorer.search import search_blockchain

    fake_node.reply("getTransaction", None)

    assert asyncio.run(search_blockchain(relay, KNOWN_SIG)) is None
    assert fake_node.methods_called() == ["getTransaction"]


def test_numeric_address_length_tries_block_then_address(fake_node, relay):
    """A 32+ digit string matches both heuristics; block goes first."""
    from zeno_explorer.explorer.search import AddressMatch, search_blockchain

    query = "1" * 32
    fake_node.reply("getBlock", NodeError("Block not available"))
    fake_node.reply("getBalance", {"context": {"slot": 1}, "value": 7})

    result = asyncio.run(search_blockchain(relay, query))

    assert isinstance(result, AddressMatch)
    assert fake_node.methods_called() == ["getBlock", "getBalance"]


def test_transport_failure_reads_as_not_found(make_relay):
    from zeno_explorer.explorer.search import search_blockchain

    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    relay = make_relay(handler)

    async def run():
        return [
            await search_blockchain(relay, KNOWN_SIG),
            await search_blockchain(relay, "145789"),
            await search_blockchain(relay, FUNDED_ADDRESS),
        ]

    assert asyncio.run(run()) == [None, None, None]


def test_malformed_balance_is_a_miss(fake_node, relay):
    from zeno_explorer.explorer.search import search_blockchain

    fake_node.reply("getBalance", HttpStatus(200, "not json"))
    assert asyncio.run(search_blockchain(relay, FUNDED_ADDRESS)) is None


def test_classifiers():
    from zeno_explorer.explorer.search import (
        looks_like_address,
        looks_like_height,
        looks_like_signature,
    )

    assert looks_like_signature("x" * 80)
    assert not looks_like_signature("x" * 79)
    assert looks_like_height("0")
    assert not looks_like_height("-5")
    assert not looks_like_height("12.5")
    assert not looks_like_height("١٢")  # non-ASCII digits
    assert looks_like_address("a" * 32)
    assert looks_like_address("a" * 44)
    assert not looks_like_address("a" * 45)


def test_fractional_float_balance_is_kept(fake_node, relay):
    """A float lamport count is scaled exactly, not truncated to zero."""
    from zeno_explorer.explorer.search import AddressMatch, search_blockchain

    fake_node.reply("getBalance", {"context": {"slot": 1}, "value": 2_500_000_000.5})

    result = asyncio.run(search_blockchain(relay, FUNDED_ADDRESS))

    assert isinstance(result, AddressMatch)
    assert result.payload.balance == Decimal("2.5000000005")
